"""
Promotional campaign endpoints (full admins).
"""
from flask import Blueprint, jsonify, request

from ..middleware.auth import require_full_admin
from ..schemas import CampaignCreateSchema, CampaignUpdateSchema, parse_body
from ..services.campaign_service import campaign_service

campaigns_bp = Blueprint('campaigns', __name__)


@campaigns_bp.route('', methods=['GET'])
@require_full_admin
def list_campaigns():
    """
    Query params:
        active_only: true to hide deactivated campaigns
    """
    include_inactive = request.args.get('active_only', 'false').lower() != 'true'
    campaigns = campaign_service.list_campaigns(include_inactive=include_inactive)
    return jsonify([c.to_dict() for c in campaigns])


@campaigns_bp.route('/active', methods=['GET'])
@require_full_admin
def list_running_campaigns():
    """Active campaigns running right now."""
    return jsonify([c.to_dict() for c in campaign_service.list_running()])


@campaigns_bp.route('', methods=['POST'])
@require_full_admin
def create_campaign():
    """
    Create a campaign.

    Request body:
        name, startDate, endDate (required)
        description, multiplier (default 1.00, max 9.99), isActive

    Returns:
        Created campaign (201)
    """
    data = parse_body(CampaignCreateSchema)
    campaign = campaign_service.create_campaign(data.model_dump())
    return jsonify(campaign.to_dict()), 201


@campaigns_bp.route('/<int:campaign_id>', methods=['PATCH'])
@require_full_admin
def update_campaign(campaign_id):
    data = parse_body(CampaignUpdateSchema)
    campaign = campaign_service.update_campaign(campaign_id, data.changes(nullable=('description',)))
    return jsonify(campaign.to_dict())


@campaigns_bp.route('/<int:campaign_id>', methods=['DELETE'])
@require_full_admin
def delete_campaign(campaign_id):
    """Deactivate a campaign."""
    campaign_service.deactivate_campaign(campaign_id)
    return jsonify({'message': 'Campaign deactivated'})
