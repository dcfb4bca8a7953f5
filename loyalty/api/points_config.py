"""
Per-region points configuration.

Admins read and edit the rates of a region; regional admins are pinned to
their own region. Partners can read their own region's config for the
redemption window and grand prize threshold.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import ensure_region_access, require_admin, require_auth
from ..schemas import PointsConfigUpdateSchema, parse_body
from ..services.points_config_service import normalize_region, points_config_service
from ..utils.errors import not_found

admin_points_config_bp = Blueprint('admin_points_config', __name__)
points_config_bp = Blueprint('points_config', __name__)


def _resolve_region(requested):
    """Region from the request, defaulting to the admin's scope."""
    admin = g.current_user
    region = normalize_region(requested)
    if region is None:
        region = admin.scope_region or None
    ensure_region_access(admin, region)
    return region


@admin_points_config_bp.route('', methods=['GET'])
@require_admin
def get_points_config():
    """
    Get the points config for a region.

    Query params:
        region: NOLA | SOLA | BRASIL | MEXICO (regional admins default to their own)

    Returns:
        Config row, or the defaults with id null when the region has none
    """
    region = _resolve_region(request.args.get('region'))
    return jsonify(points_config_service.get_config(region))


@admin_points_config_bp.route('', methods=['PATCH'])
@require_admin
def update_points_config():
    """
    Update the points config for a region (created when missing).

    Query params:
        region: target region (may also be given in the body)

    Request body:
        softwareRate, hardwareRate, equipmentRate: 1..1,000,000
        grandPrizeThreshold: 1..10,000,000
        defaultNewCustomerGoalRate, defaultRenewalGoalRate: 1..1,000,000
        redemptionStartDate, redemptionEndDate: ISO dates, end >= start
    """
    data = parse_body(PointsConfigUpdateSchema)
    region = _resolve_region(request.args.get('region') or data.region)

    changes = data.changes(nullable=('redemption_start_date', 'redemption_end_date'))
    changes.pop('region', None)

    points_config_service.update_config(region, changes, updated_by=g.current_user.id)
    return jsonify(points_config_service.get_config(region))


@points_config_bp.route('', methods=['GET'])
@require_auth
def get_my_points_config():
    """The caller's region config (read-only)."""
    region = g.current_user.region
    if not region:
        return not_found('No region assigned to this account')
    return jsonify(points_config_service.get_config(region))
