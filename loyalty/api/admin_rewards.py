"""
Admin reward endpoints.

Handles:
- Rewards catalog management
- Redemption approval and rejection
- Shipment tracking
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_admin
from ..models import RedemptionStatus
from ..schemas import (
    RejectSchema,
    RewardCreateSchema,
    RewardUpdateSchema,
    ShipmentUpdateSchema,
    parse_body,
)
from ..services.redemption_service import redemption_service

admin_rewards_bp = Blueprint('admin_rewards', __name__)


# ==============================================================================
# REWARDS CATALOG
# ==============================================================================

@admin_rewards_bp.route('', methods=['GET'])
@require_admin
def list_rewards():
    """List all rewards, including inactive ones."""
    rewards = redemption_service.list_all_rewards()
    return jsonify([r.to_dict() for r in rewards])


@admin_rewards_bp.route('', methods=['POST'])
@require_admin
def create_reward():
    """
    Create a reward.

    Request body:
        name: string (required)
        pointsCost: int >= 1 (required)
        category: string (required)
        description, imageUrl: optional
        region: limit to one region (null = all regions)
        stockQuantity: limited stock (null = unlimited)
        isActive: bool (default true)
    """
    data = parse_body(RewardCreateSchema)
    reward = redemption_service.create_reward(data.model_dump())
    return jsonify(reward.to_dict()), 201


@admin_rewards_bp.route('/<int:reward_id>', methods=['PATCH'])
@require_admin
def update_reward(reward_id):
    data = parse_body(RewardUpdateSchema)
    reward = redemption_service.update_reward(
        reward_id,
        data.changes(nullable=('description', 'region', 'stock_quantity', 'image_url'))
    )
    return jsonify(reward.to_dict())


@admin_rewards_bp.route('/<int:reward_id>', methods=['DELETE'])
@require_admin
def delete_reward(reward_id):
    """Deactivate a reward. Existing redemptions keep referencing it."""
    redemption_service.deactivate_reward(reward_id)
    return jsonify({'message': 'Reward deactivated'})


# ==============================================================================
# REDEMPTIONS
# ==============================================================================

@admin_rewards_bp.route('/pending', methods=['GET'])
@require_admin
def pending_redemptions():
    redemptions = redemption_service.list_for_admin(g.current_user, status=RedemptionStatus.PENDING.value)
    return jsonify([r.to_dict(include_user=True) for r in redemptions])


@admin_rewards_bp.route('/redemptions', methods=['GET'])
@require_admin
def list_redemptions():
    """
    List redemptions in the admin's scope.

    Query params:
        status: pending | approved | rejected | delivered
    """
    redemptions = redemption_service.list_for_admin(g.current_user, status=request.args.get('status'))
    return jsonify([r.to_dict(include_user=True) for r in redemptions])


@admin_rewards_bp.route('/<int:redemption_id>/approve', methods=['POST'])
@require_admin
def approve_redemption(redemption_id):
    """
    Approve a pending redemption.

    Debits the reward's cost from the user's ledger and takes one unit of stock.
    """
    redemption = redemption_service.approve(g.current_user, redemption_id)
    return jsonify(redemption.to_dict(include_user=True))


@admin_rewards_bp.route('/<int:redemption_id>/reject', methods=['POST'])
@require_admin
def reject_redemption(redemption_id):
    """
    Reject a pending redemption.

    Request body:
        reason: string (optional)
    """
    data = parse_body(RejectSchema)
    redemption = redemption_service.reject(g.current_user, redemption_id, data.reason)
    return jsonify(redemption.to_dict(include_user=True))


@admin_rewards_bp.route('/<int:redemption_id>/shipment', methods=['PUT'])
@require_admin
def update_shipment(redemption_id):
    """
    Advance shipment tracking.

    Request body:
        shipmentStatus: pending | shipped | delivered (required, forward only)
    """
    data = parse_body(ShipmentUpdateSchema)
    redemption = redemption_service.update_shipment(g.current_user, redemption_id, data.shipment_status)
    return jsonify(redemption.to_dict(include_user=True))
