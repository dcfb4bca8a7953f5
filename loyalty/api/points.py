"""
Points ledger endpoints.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_auth
from ..services.points_service import points_service

points_bp = Blueprint('points', __name__)


@points_bp.route('/history', methods=['GET'])
@require_auth
def get_history():
    """The current user's ledger rows, newest first."""
    history = points_service.get_history(g.current_user.id)
    return jsonify([h.to_dict() for h in history])


@points_bp.route('/leaderboard', methods=['GET'])
@require_auth
def get_leaderboard():
    """
    Top users by balance.

    Query params:
        limit: number of users (default 5, max 100)
        region: restrict to one region
    """
    limit = max(1, min(request.args.get('limit', 5, type=int), 100))
    region = request.args.get('region')
    return jsonify(points_service.get_leaderboard(limit=limit, region=region))
