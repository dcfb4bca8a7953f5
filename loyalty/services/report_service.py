"""
Admin reports and their CSV exports.

All reports count approved deals only. Date filters apply to the record's
creation time (deals, ledger rows) or redemption time (redemptions).
"""
import csv
import io
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func

from ..extensions import db
from ..models import (
    Deal,
    DealStatus,
    PointsHistory,
    RedemptionStatus,
    Reward,
    User,
    UserReward,
    UserRole,
)

USER_RANKING_COLUMNS = [
    ('user_id', 'User ID'),
    ('username', 'Username'),
    ('first_name', 'First Name'),
    ('last_name', 'Last Name'),
    ('email', 'Email'),
    ('country', 'Country'),
    ('region', 'Region'),
    ('total_points', 'Total Points'),
    ('total_deals', 'Total Deals'),
    ('total_sales', 'Total Sales'),
]

REDEMPTION_COLUMNS = [
    ('username', 'Username'),
    ('first_name', 'First Name'),
    ('last_name', 'Last Name'),
    ('email', 'Email'),
    ('reward_name', 'Reward'),
    ('points_cost', 'Points Cost'),
    ('status', 'Status'),
    ('shipment_status', 'Shipment Status'),
    ('redeemed_at', 'Redeemed At'),
    ('approved_at', 'Approved At'),
]

DEALS_PER_USER_COLUMNS = [
    ('user_id', 'User ID'),
    ('username', 'Username'),
    ('first_name', 'First Name'),
    ('last_name', 'Last Name'),
    ('email', 'Email'),
    ('country', 'Country'),
    ('region', 'Region'),
    ('total_deals', 'Total Deals'),
    ('total_sales', 'Total Sales'),
    ('average_deal_size', 'Average Deal Size'),
]


def _money(value) -> float:
    return float(Decimal(str(value or 0)).quantize(Decimal('0.01')))


def _apply_range(query, column, start: Optional[datetime], end: Optional[datetime]):
    if start:
        query = query.filter(column >= start)
    if end:
        query = query.filter(column <= end)
    return query


class ReportService:

    def _partner_users(self, country: str = None, region: str = None) -> List[User]:
        query = User.query.filter(User.role == UserRole.USER.value)
        if country:
            query = query.filter(User.country == country)
        if region:
            query = query.filter(User.region == region)
        return query.all()

    def _deal_totals(self, start, end) -> Dict[int, Dict[str, Any]]:
        query = db.session.query(
            Deal.user_id,
            func.count(Deal.id),
            func.coalesce(func.sum(Deal.deal_value), 0)
        ).filter(Deal.status == DealStatus.APPROVED.value)
        query = _apply_range(query, Deal.created_at, start, end)
        return {
            user_id: {'total_deals': int(count), 'total_sales': _money(sales)}
            for user_id, count, sales in query.group_by(Deal.user_id).all()
        }

    def summary(self, country: str = None, region: str = None,
                start: datetime = None, end: datetime = None) -> Dict[str, Any]:
        user_query = User.query
        if country:
            user_query = user_query.filter(User.country == country)
        if region:
            user_query = user_query.filter(User.region == region)

        deal_query = db.session.query(
            func.count(Deal.id),
            func.coalesce(func.sum(Deal.deal_value), 0)
        ).join(User, Deal.user_id == User.id).filter(Deal.status == DealStatus.APPROVED.value)
        if country:
            deal_query = deal_query.filter(User.country == country)
        if region:
            deal_query = deal_query.filter(User.region == region)
        deal_query = _apply_range(deal_query, Deal.created_at, start, end)
        deal_count, revenue = deal_query.one()

        redeemed_query = UserReward.query.join(User, UserReward.user_id == User.id).filter(
            UserReward.status.in_([RedemptionStatus.APPROVED.value, RedemptionStatus.DELIVERED.value])
        )
        if country:
            redeemed_query = redeemed_query.filter(User.country == country)
        if region:
            redeemed_query = redeemed_query.filter(User.region == region)
        redeemed_query = _apply_range(redeemed_query, UserReward.redeemed_at, start, end)

        return {
            'user_count': user_query.count(),
            'deal_count': int(deal_count or 0),
            'total_revenue': _money(revenue),
            'redeemed_rewards': redeemed_query.count(),
        }

    def user_ranking(self, start: datetime = None, end: datetime = None,
                     region: str = None) -> List[Dict[str, Any]]:
        """Partners ranked by points earned (credits only, redemptions excluded)."""
        points_query = db.session.query(
            PointsHistory.user_id,
            func.sum(PointsHistory.points)
        ).filter(PointsHistory.points > 0)
        points_query = _apply_range(points_query, PointsHistory.created_at, start, end)
        points = {user_id: int(total or 0) for user_id, total in points_query.group_by(PointsHistory.user_id).all()}

        deals = self._deal_totals(start, end)

        rows = []
        for user in self._partner_users(region=region):
            user_deals = deals.get(user.id, {'total_deals': 0, 'total_sales': 0.0})
            rows.append({
                'user_id': user.id,
                'username': user.username or '',
                'first_name': user.first_name or '',
                'last_name': user.last_name or '',
                'email': user.email or '',
                'country': user.country or '',
                'region': user.region or '',
                'total_points': points.get(user.id, 0),
                'total_deals': user_deals['total_deals'],
                'total_sales': user_deals['total_sales'],
            })

        return sorted(rows, key=lambda row: row['total_points'], reverse=True)

    def reward_redemptions(self, start: datetime = None, end: datetime = None,
                           region: str = None) -> List[Dict[str, Any]]:
        query = db.session.query(UserReward, User, Reward).join(
            User, UserReward.user_id == User.id
        ).join(Reward, UserReward.reward_id == Reward.id)
        if region:
            query = query.filter(User.region == region)
        query = _apply_range(query, UserReward.redeemed_at, start, end)

        return [
            {
                'username': user.username or '',
                'first_name': user.first_name,
                'last_name': user.last_name,
                'email': user.email,
                'reward_name': reward.name,
                'points_cost': reward.points_cost,
                'status': redemption.status,
                'shipment_status': redemption.shipment_status,
                'redeemed_at': redemption.redeemed_at.isoformat() if redemption.redeemed_at else None,
                'approved_at': redemption.approved_at.isoformat() if redemption.approved_at else None,
            }
            for redemption, user, reward in query.order_by(UserReward.redeemed_at.desc(), UserReward.id.desc()).all()
        ]

    def deals_per_user(self, start: datetime = None, end: datetime = None,
                       region: str = None) -> List[Dict[str, Any]]:
        deals = self._deal_totals(start, end)

        rows = []
        for user in self._partner_users(region=region):
            user_deals = deals.get(user.id, {'total_deals': 0, 'total_sales': 0.0})
            total_deals = user_deals['total_deals']
            total_sales = user_deals['total_sales']
            rows.append({
                'user_id': user.id,
                'username': user.username or '',
                'first_name': user.first_name or '',
                'last_name': user.last_name or '',
                'email': user.email or '',
                'country': user.country or '',
                'region': user.region or '',
                'total_deals': total_deals,
                'total_sales': total_sales,
                'average_deal_size': round(total_sales / total_deals, 2) if total_deals else 0.0,
            })

        return sorted(rows, key=lambda row: (row['total_deals'], row['total_sales']), reverse=True)

    @staticmethod
    def to_csv(rows: Sequence[Dict[str, Any]], columns: Sequence[tuple]) -> str:
        """Render report rows as CSV with a header row of column labels."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow([label for _, label in columns])
        for row in rows:
            writer.writerow(['' if row.get(key) is None else row.get(key) for key, _ in columns])
        return output.getvalue()


# Singleton instance
report_service = ReportService()
