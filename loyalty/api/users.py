"""
Current-user dashboard endpoints.
"""
from flask import Blueprint, g, jsonify

from ..middleware.auth import require_auth
from ..services.points_service import points_service

users_bp = Blueprint('users', __name__)


@users_bp.route('/stats', methods=['GET'])
@require_auth
def get_stats():
    """
    Dashboard numbers for the current user.

    Returns:
        total_points, available_points, total_deals, pending_deals, redeemed_rewards
    """
    return jsonify(points_service.get_user_stats(g.current_user.id))
