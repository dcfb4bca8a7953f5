"""
Points ledger service.

ARCHITECTURE:
- Every change to a user's points is a signed PointsHistory row; rows are
  never edited or deleted.
- Balance = sum of the user's ledger rows.
- Available = balance minus the cost of the user's pending redemptions,
  floored at 0. Pending redemptions reserve points without debiting them;
  the debit row is written when an admin approves the redemption.
"""
from typing import Any, Dict, List, Optional

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
)


class PointsService:
    """
    Central service for ledger reads and writes.

    Usage:
        points_service.add_entry(user.id, 25, 'Points earned from deal: X', deal_id=deal.id)
        available = points_service.get_available_points(user.id)
    """

    def add_entry(
        self,
        user_id: int,
        points: int,
        description: str,
        deal_id: int = None,
        reward_id: int = None
    ) -> PointsHistory:
        """Append a ledger row. The caller owns the commit."""
        entry = PointsHistory(
            user_id=user_id,
            deal_id=deal_id,
            reward_id=reward_id,
            points=points,
            description=description[:500],
        )
        db.session.add(entry)
        return entry

    def get_balance(self, user_id: int) -> int:
        total = db.session.query(func.coalesce(func.sum(PointsHistory.points), 0)).filter(
            PointsHistory.user_id == user_id
        ).scalar()
        return int(total or 0)

    def get_reserved_points(self, user_id: int, exclude_redemption_id: int = None) -> int:
        """Points held by the user's pending redemptions."""
        query = db.session.query(func.coalesce(func.sum(Reward.points_cost), 0)).join(
            UserReward, UserReward.reward_id == Reward.id
        ).filter(
            UserReward.user_id == user_id,
            UserReward.status == RedemptionStatus.PENDING.value
        )
        if exclude_redemption_id is not None:
            query = query.filter(UserReward.id != exclude_redemption_id)
        return int(query.scalar() or 0)

    def get_available_points(self, user_id: int, exclude_redemption_id: int = None) -> int:
        balance = self.get_balance(user_id)
        reserved = self.get_reserved_points(user_id, exclude_redemption_id)
        return max(0, balance - reserved)

    def get_history(self, user_id: int, limit: Optional[int] = None) -> List[PointsHistory]:
        query = PointsHistory.query.filter_by(user_id=user_id).order_by(
            PointsHistory.created_at.desc(), PointsHistory.id.desc()
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_user_stats(self, user_id: int) -> Dict[str, Any]:
        """Dashboard numbers for one user."""
        total_deals = Deal.query.filter_by(user_id=user_id).count()
        pending_deals = Deal.query.filter_by(user_id=user_id, status=DealStatus.PENDING.value).count()
        redeemed_rewards = UserReward.query.filter(
            UserReward.user_id == user_id,
            UserReward.status.in_([RedemptionStatus.APPROVED.value, RedemptionStatus.DELIVERED.value])
        ).count()

        return {
            'total_points': self.get_balance(user_id),
            'available_points': self.get_available_points(user_id),
            'total_deals': total_deals,
            'pending_deals': pending_deals,
            'redeemed_rewards': redeemed_rewards,
        }

    def get_leaderboard(self, limit: int = 5, region: str = None) -> List[Dict[str, Any]]:
        """Top active users by ledger balance, positive balances only."""
        total = func.sum(PointsHistory.points).label('points')
        query = db.session.query(User, total).join(
            PointsHistory, PointsHistory.user_id == User.id
        ).filter(User.is_active.is_(True))
        if region:
            query = query.filter(User.region == region)

        rows = query.group_by(User.id).having(total > 0).order_by(total.desc()).limit(limit).all()

        return [
            {
                'user_id': user.id,
                'username': user.username,
                'first_name': user.first_name,
                'last_name': user.last_name,
                'region': user.region,
                'points': int(points),
            }
            for user, points in rows
        ]


# Singleton instance
points_service = PointsService()
