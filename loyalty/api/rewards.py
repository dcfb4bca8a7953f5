"""
Rewards API endpoints for partners.

Handles:
- Available rewards listing
- Reward redemption requests
- The user's own redemption history
"""
from flask import Blueprint, g, jsonify

from ..middleware.auth import require_auth
from ..schemas import RedeemSchema, parse_body
from ..services.redemption_service import redemption_service

rewards_bp = Blueprint('rewards', __name__)
user_rewards_bp = Blueprint('user_rewards', __name__)


@rewards_bp.route('', methods=['GET'])
@require_auth
def list_rewards():
    """
    List active rewards offered in the user's region, cheapest first.
    """
    rewards = redemption_service.list_available_rewards(g.current_user)
    return jsonify([r.to_dict() for r in rewards])


@rewards_bp.route('/<int:reward_id>/redeem', methods=['POST'])
@require_auth
def redeem_reward(reward_id):
    """
    Request a reward.

    Request body:
        deliveryAddress: string (optional)

    Returns:
        Pending redemption (201). The cost is reserved against available
        points until an admin approves or rejects the request.
    """
    data = parse_body(RedeemSchema)
    redemption = redemption_service.redeem(g.current_user, reward_id, data.delivery_address)
    return jsonify({
        'message': 'Reward redemption requested. Awaiting admin approval.',
        'redemption': redemption.to_dict(),
    }), 201


@user_rewards_bp.route('', methods=['GET'])
@require_auth
def list_user_rewards():
    """The current user's redemptions, newest first."""
    redemptions = redemption_service.list_for_user(g.current_user.id)
    return jsonify([r.to_dict() for r in redemptions])
