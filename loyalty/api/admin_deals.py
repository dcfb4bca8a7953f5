"""
Admin deal management: paginated listing, edits and points recalculation.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_admin, require_full_admin
from ..models import DealStatus
from ..schemas import DealUpdateSchema, parse_body
from ..services.deal_service import deal_service

admin_deals_bp = Blueprint('admin_deals', __name__)


@admin_deals_bp.route('', methods=['GET'])
@require_admin
def list_deals():
    """
    List deals in the admin's scope.

    Query params:
        page: page number (default 1)
        limit: page size (default 20, max 100)
        status: pending | approved | rejected

    Returns:
        {deals, total, page, limit, pages}
    """
    page = max(1, request.args.get('page', 1, type=int))
    limit = max(1, min(request.args.get('limit', 20, type=int), 100))
    status = request.args.get('status')

    result = deal_service.list_for_admin(g.current_user, status=status, page=page, limit=limit)
    result['deals'] = [d.to_dict(include_user=True) for d in result['deals']]
    return jsonify(result)


@admin_deals_bp.route('/pending', methods=['GET'])
@require_admin
def pending_deals():
    result = deal_service.list_for_admin(g.current_user, status=DealStatus.PENDING.value, page=1, limit=1000)
    return jsonify([d.to_dict(include_user=True) for d in result['deals']])


@admin_deals_bp.route('/<int:deal_id>', methods=['PATCH'])
@require_admin
def update_deal(deal_id):
    """
    Edit a deal.

    Request body:
        Any deal field (pending deals only) and/or status (approved | rejected).
        Points and approver fields are never accepted.
    """
    data = parse_body(DealUpdateSchema)
    deal = deal_service.update(
        g.current_user,
        deal_id,
        data.changes(nullable=('client_info', 'license_agreement_number'))
    )
    return jsonify(deal.to_dict(include_user=True))


@admin_deals_bp.route('/recalculate-points', methods=['POST'])
@require_full_admin
def recalculate_points():
    """
    Re-price all approved deals with the current region rates.

    Returns:
        {message, updated_deals, points_delta}
    """
    result = deal_service.recalculate_points()
    return jsonify({
        'message': f"Recalculated points for {result['updated_deals']} deals",
        **result
    })
