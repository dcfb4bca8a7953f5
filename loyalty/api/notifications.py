"""
In-app notification endpoints.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_auth
from ..services.notification_service import notification_service

notifications_bp = Blueprint('notifications', __name__)


@notifications_bp.route('', methods=['GET'])
@require_auth
def list_notifications():
    """
    The current user's notifications, newest first.

    Query params:
        unread_only: true to skip read notifications
    """
    unread_only = request.args.get('unread_only', 'false').lower() == 'true'
    notifications = notification_service.list_for_user(g.current_user.id, unread_only=unread_only)
    return jsonify({
        'notifications': [n.to_dict() for n in notifications],
        'unread_count': notification_service.unread_count(g.current_user.id),
    })


@notifications_bp.route('/<int:notification_id>/read', methods=['POST'])
@require_auth
def mark_read(notification_id):
    notification = notification_service.mark_read(g.current_user.id, notification_id)
    return jsonify(notification.to_dict())


@notifications_bp.route('/read-all', methods=['POST'])
@require_auth
def mark_all_read():
    updated = notification_service.mark_all_read(g.current_user.id)
    return jsonify({'updated': updated})
