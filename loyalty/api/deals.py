"""
Deals API endpoints.

Partners register deals here; admins approve or reject them. Points are only
credited on approval.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_admin, require_auth
from ..schemas import DealCreateSchema, parse_body
from ..services.deal_service import deal_service

deals_bp = Blueprint('deals', __name__)


@deals_bp.route('', methods=['POST'])
@require_auth
def create_deal():
    """
    Register a new deal for the current user.

    Request body:
        productType: software | hardware | equipment (required)
        productName: string (required)
        dealValue: decimal > 0 (required)
        dealType: new_customer | renewal (default new_customer)
        quantity: int >= 1 (default 1)
        closeDate: ISO datetime (required)
        clientInfo, licenseAgreementNumber: optional

    Returns:
        Created deal (status pending, 0 points)
    """
    data = parse_body(DealCreateSchema)
    deal = deal_service.create_deal(g.current_user, data.model_dump())
    return jsonify(deal.to_dict()), 201


@deals_bp.route('', methods=['GET'])
@require_auth
def list_deals():
    """List the current user's deals, newest first."""
    deals = deal_service.list_for_user(g.current_user.id)
    return jsonify([d.to_dict() for d in deals])


@deals_bp.route('/recent', methods=['GET'])
@require_auth
def recent_deals():
    """
    Most recent deals of the current user.

    Query params:
        limit: number of deals (default 5)
    """
    limit = request.args.get('limit', 5, type=int)
    deals = deal_service.list_for_user(g.current_user.id, limit=max(1, min(limit, 100)))
    return jsonify([d.to_dict() for d in deals])


@deals_bp.route('/<int:deal_id>', methods=['GET'])
@require_auth
def get_deal(deal_id):
    deal = deal_service.get_visible_deal(g.current_user, deal_id)
    return jsonify(deal.to_dict(include_user=g.current_user.is_admin))


@deals_bp.route('/<int:deal_id>/approve', methods=['POST'])
@require_admin
def approve_deal(deal_id):
    """
    Approve a pending deal and credit its points.

    Returns:
        Updated deal; 409 if the deal is not pending
    """
    deal = deal_service.approve(g.current_user, deal_id)
    return jsonify(deal.to_dict())


@deals_bp.route('/<int:deal_id>/reject', methods=['POST'])
@require_admin
def reject_deal(deal_id):
    """Reject a pending deal. No points are credited."""
    deal = deal_service.reject(g.current_user, deal_id)
    return jsonify(deal.to_dict())
