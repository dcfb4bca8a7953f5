"""
Region configuration and monthly prize endpoints (full admins).
"""
from flask import Blueprint, jsonify, request

from ..middleware.auth import require_full_admin
from ..models import Region, RegionCategory
from ..schemas import (
    MonthlyPrizeCreateSchema,
    MonthlyPrizeUpdateSchema,
    RegionConfigCreateSchema,
    RegionConfigUpdateSchema,
    parse_body,
)
from ..services.region_service import current_season_year, region_service

regions_bp = Blueprint('regions', __name__)
region_configs_bp = Blueprint('region_configs', __name__)
monthly_prizes_bp = Blueprint('monthly_prizes', __name__)


@regions_bp.route('', methods=['GET'])
@require_full_admin
def list_regions():
    """Known regions and region categories."""
    return jsonify({
        'regions': [r.value for r in Region],
        'categories': [c.value for c in RegionCategory],
    })


# ==============================================================================
# REGION CONFIGS
# ==============================================================================

@region_configs_bp.route('', methods=['GET'])
@require_full_admin
def list_region_configs():
    """
    Query params:
        region: filter by region
        active_only: true to hide inactive configs
    """
    active_only = request.args.get('active_only', 'false').lower() == 'true'
    configs = region_service.list_configs(region=request.args.get('region'), active_only=active_only)
    return jsonify([c.to_dict() for c in configs])


@region_configs_bp.route('', methods=['POST'])
@require_full_admin
def create_region_config():
    """
    Create a region config.

    Request body:
        region, category, name (required)
        subcategory, newCustomerGoalRate, renewalGoalRate, monthlyGoalTarget, isActive

    Returns:
        Created config (201); 409 when region/category/subcategory already exists
    """
    data = parse_body(RegionConfigCreateSchema)
    config = region_service.create_config(data.model_dump())
    return jsonify(config.to_dict()), 201


@region_configs_bp.route('/<int:config_id>', methods=['PATCH'])
@require_full_admin
def update_region_config(config_id):
    data = parse_body(RegionConfigUpdateSchema)
    config = region_service.update_config(config_id, data.changes(nullable=('monthly_goal_target',)))
    return jsonify(config.to_dict())


@region_configs_bp.route('/seed', methods=['POST'])
@require_full_admin
def seed_region_configs():
    """
    Create the default region configs and the current season's prizes.

    Query params:
        season_year: year the season starts in November (default: current season)
    """
    season_year = request.args.get('season_year', type=int) or current_season_year()
    result = region_service.seed_defaults(season_year)
    return jsonify({
        'message': f"Seeded {result['configs']} region configs and {result['prizes']} monthly prizes",
        **result
    })


# ==============================================================================
# MONTHLY PRIZES
# ==============================================================================

@monthly_prizes_bp.route('', methods=['GET'])
@require_full_admin
def list_monthly_prizes():
    """
    Query params:
        month: 1-12
        year: e.g. 2025
        region: filter by region
        include_inactive: true to include deactivated prizes
    """
    include_inactive = request.args.get('include_inactive', 'false').lower() == 'true'
    prizes = region_service.list_prizes(
        month=request.args.get('month', type=int),
        year=request.args.get('year', type=int),
        region=request.args.get('region'),
        include_inactive=include_inactive
    )
    return jsonify([p.to_dict() for p in prizes])


@monthly_prizes_bp.route('', methods=['POST'])
@require_full_admin
def create_monthly_prize():
    data = parse_body(MonthlyPrizeCreateSchema)
    prize = region_service.create_prize(data.model_dump())
    return jsonify(prize.to_dict()), 201


@monthly_prizes_bp.route('/<int:prize_id>', methods=['PATCH'])
@require_full_admin
def update_monthly_prize(prize_id):
    data = parse_body(MonthlyPrizeUpdateSchema)
    prize = region_service.update_prize(prize_id, data.changes(nullable=('prize_description',)))
    return jsonify(prize.to_dict())


@monthly_prizes_bp.route('/<int:prize_id>', methods=['DELETE'])
@require_full_admin
def delete_monthly_prize(prize_id):
    """Deactivate a prize."""
    region_service.deactivate_prize(prize_id)
    return jsonify({'message': 'Monthly prize deactivated'})
