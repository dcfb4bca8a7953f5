"""
Admin reports with CSV export.

All endpoints accept startDate/endDate (ISO dates or datetimes) and an
optional region filter. A bare endDate covers the whole day.
"""
from datetime import datetime, time

from flask import Blueprint, Response, jsonify, request

from ..middleware.auth import require_full_admin
from ..services.report_service import (
    DEALS_PER_USER_COLUMNS,
    REDEMPTION_COLUMNS,
    USER_RANKING_COLUMNS,
    report_service,
)
from ..utils.exceptions import ValidationError

reports_bp = Blueprint('reports', __name__)


def _parse_date_arg(*names, end_of_day=False):
    for name in names:
        raw = request.args.get(name)
        if not raw:
            continue
        try:
            value = datetime.fromisoformat(raw.replace('Z', '+00:00')).replace(tzinfo=None)
        except ValueError:
            raise ValidationError(f'{names[0]} must be an ISO date', names[0])
        if end_of_day and len(raw) == 10:
            value = datetime.combine(value.date(), time.max)
        return value
    return None


def _filters():
    return {
        'start': _parse_date_arg('startDate', 'start_date'),
        'end': _parse_date_arg('endDate', 'end_date', end_of_day=True),
        'region': request.args.get('region') or None,
    }


def _csv_response(rows, columns, name):
    filename = f"{name}_{datetime.utcnow().strftime('%Y%m%d')}.csv"
    return Response(
        report_service.to_csv(rows, columns),
        mimetype='text/csv',
        headers={
            'Content-Disposition': f'attachment; filename={filename}',
            'Content-Type': 'text/csv; charset=utf-8'
        }
    )


@reports_bp.route('', methods=['GET'])
@require_full_admin
def summary():
    """
    Program summary.

    Query params:
        country, region, startDate, endDate

    Returns:
        user_count, deal_count (approved), total_revenue, redeemed_rewards
    """
    filters = _filters()
    return jsonify(report_service.summary(country=request.args.get('country') or None, **filters))


@reports_bp.route('/user-ranking', methods=['GET'])
@require_full_admin
def user_ranking():
    """Partners ranked by points earned in the period."""
    return jsonify(report_service.user_ranking(**_filters()))


@reports_bp.route('/user-ranking/export', methods=['GET'])
@require_full_admin
def export_user_ranking():
    rows = report_service.user_ranking(**_filters())
    return _csv_response(rows, USER_RANKING_COLUMNS, 'user_ranking')


@reports_bp.route('/reward-redemptions', methods=['GET'])
@require_full_admin
def reward_redemptions():
    """Redemptions in the period, newest first."""
    return jsonify(report_service.reward_redemptions(**_filters()))


@reports_bp.route('/reward-redemptions/export', methods=['GET'])
@require_full_admin
def export_reward_redemptions():
    rows = report_service.reward_redemptions(**_filters())
    return _csv_response(rows, REDEMPTION_COLUMNS, 'reward_redemptions')


@reports_bp.route('/deals-per-user', methods=['GET'])
@require_full_admin
def deals_per_user():
    """Approved deal count, sales and average deal size per partner."""
    return jsonify(report_service.deals_per_user(**_filters()))


@reports_bp.route('/deals-per-user/export', methods=['GET'])
@require_full_admin
def export_deals_per_user():
    rows = report_service.deals_per_user(**_filters())
    return _csv_response(rows, DEALS_PER_USER_COLUMNS, 'deals_per_user')
