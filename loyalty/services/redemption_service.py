"""
Reward catalog and redemptions.

Redemption lifecycle:
    pending -> approved -> delivered
    pending -> rejected

A pending request reserves the reward's cost against the user's available
points. Approval re-checks the balance, debits the ledger and takes one unit
of stock. Shipment (pending -> shipped -> delivered) applies only to approved
redemptions and never moves backwards.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_

from ..extensions import db
from ..models import (
    NotificationType,
    RedemptionStatus,
    Reward,
    SHIPMENT_ORDER,
    ShipmentStatus,
    User,
    UserReward,
)
from ..middleware.auth import ensure_user_access
from ..utils.exceptions import (
    DuplicateError,
    InsufficientPointsError,
    InvalidStatusTransitionError,
    NotFoundError,
    OutOfStockError,
    RedemptionWindowError,
    ValidationError,
)
from .email_service import email_service
from .notification_service import notification_service
from .points_config_service import is_redemption_open
from .points_service import points_service
from .user_service import get_admin_recipients

logger = logging.getLogger(__name__)


class RedemptionService:

    # ==================== Catalog ====================

    def list_available_rewards(self, user: User) -> List[Reward]:
        """Active rewards offered in the user's region (or everywhere), cheapest first."""
        query = Reward.query.filter(Reward.is_active.is_(True))
        if user.region:
            query = query.filter(or_(Reward.region.is_(None), Reward.region == user.region))
        else:
            query = query.filter(Reward.region.is_(None))
        return query.order_by(Reward.points_cost.asc(), Reward.id.asc()).all()

    def list_all_rewards(self) -> List[Reward]:
        return Reward.query.order_by(Reward.created_at.desc(), Reward.id.desc()).all()

    def get_reward(self, reward_id: int) -> Reward:
        reward = Reward.query.get(reward_id)
        if not reward:
            raise NotFoundError('Reward', reward_id)
        return reward

    def create_reward(self, data: Dict[str, Any]) -> Reward:
        reward = Reward(**data)
        db.session.add(reward)
        db.session.commit()
        return reward

    def update_reward(self, reward_id: int, changes: Dict[str, Any]) -> Reward:
        reward = self.get_reward(reward_id)
        for key, value in changes.items():
            setattr(reward, key, value)
        db.session.commit()
        return reward

    def deactivate_reward(self, reward_id: int) -> Reward:
        return self.update_reward(reward_id, {'is_active': False})

    # ==================== Redemption requests ====================

    def redeem(self, user: User, reward_id: int, delivery_address: Optional[str] = None) -> UserReward:
        """
        Create a pending redemption.

        Raises:
            NotFoundError: reward missing, inactive or not offered in the user's region
            OutOfStockError: no stock left
            RedemptionWindowError: region's redemption window is closed
            DuplicateError: a pending request for this reward already exists
            InsufficientPointsError: cost exceeds available points
        """
        reward = Reward.query.get(reward_id)
        if not reward or not reward.is_active:
            raise NotFoundError('Reward', reward_id)
        if reward.region and reward.region != user.region:
            raise NotFoundError('Reward', reward_id)
        if not reward.in_stock:
            raise OutOfStockError(reward.name)
        if not is_redemption_open(user.region):
            raise RedemptionWindowError()

        duplicate = UserReward.query.filter_by(
            user_id=user.id,
            reward_id=reward.id,
            status=RedemptionStatus.PENDING.value
        ).first()
        if duplicate:
            raise DuplicateError('Pending redemption', f'reward {reward.name}')

        available = points_service.get_available_points(user.id)
        if reward.points_cost > available:
            raise InsufficientPointsError(available, reward.points_cost)

        redemption = UserReward(
            user_id=user.id,
            reward_id=reward.id,
            status=RedemptionStatus.PENDING.value,
            shipment_status=ShipmentStatus.PENDING.value,
            delivery_address=delivery_address,
        )
        db.session.add(redemption)
        notification_service.notify(
            user.id,
            'Redemption requested',
            f'Your request for "{reward.name}" ({reward.points_cost} points) is awaiting approval.',
            NotificationType.INFO.value
        )
        db.session.commit()
        logger.info('User %s requested reward %s (%d points)', user.id, reward.id, reward.points_cost)

        admins = get_admin_recipients(user.region)
        email_service.send_redemption_request_to_admins(admins, user, reward)
        return redemption

    def list_for_user(self, user_id: int) -> List[UserReward]:
        return UserReward.query.filter_by(user_id=user_id).order_by(
            UserReward.redeemed_at.desc(), UserReward.id.desc()
        ).all()

    def list_for_admin(self, admin: User, status: str = None) -> List[UserReward]:
        query = UserReward.query.join(User, UserReward.user_id == User.id)
        scope = admin.scope_region
        if scope is not None:
            query = query.filter(User.region == scope)
        if status:
            query = query.filter(UserReward.status == status)
        return query.order_by(UserReward.redeemed_at.desc(), UserReward.id.desc()).all()

    def get_redemption(self, admin: User, redemption_id: int) -> UserReward:
        redemption = UserReward.query.get(redemption_id)
        if not redemption:
            raise NotFoundError('Redemption', redemption_id)
        ensure_user_access(admin, redemption.user)
        return redemption

    def approve(self, admin: User, redemption_id: int) -> UserReward:
        """Approve a pending redemption: debit points and take stock."""
        redemption = self.get_redemption(admin, redemption_id)
        if redemption.status != RedemptionStatus.PENDING.value:
            raise InvalidStatusTransitionError('redemption', redemption.status, RedemptionStatus.APPROVED.value)

        reward = redemption.reward
        if not reward.in_stock:
            raise OutOfStockError(reward.name)

        # Other pending requests must not eat into this one's reservation
        available = points_service.get_available_points(redemption.user_id, exclude_redemption_id=redemption.id)
        if reward.points_cost > available:
            raise InsufficientPointsError(available, reward.points_cost)

        redemption.status = RedemptionStatus.APPROVED.value
        redemption.approved_by = admin.id
        redemption.approved_at = datetime.utcnow()
        if reward.stock_quantity is not None:
            reward.stock_quantity -= 1

        points_service.add_entry(
            redemption.user_id,
            -reward.points_cost,
            f'Points redeemed for reward: {reward.name}',
            reward_id=reward.id
        )
        notification_service.notify(
            redemption.user_id,
            'Redemption approved',
            f'Your redemption of "{reward.name}" was approved.',
            NotificationType.SUCCESS.value
        )
        db.session.commit()
        logger.info('Redemption %s approved by %s', redemption.id, admin.id)

        if not email_service.send_redemption_approved_email(redemption.user, reward):
            logger.warning('Redemption approved email for %s failed', redemption.id)
        return redemption

    def reject(self, admin: User, redemption_id: int, reason: Optional[str] = None) -> UserReward:
        redemption = self.get_redemption(admin, redemption_id)
        if redemption.status != RedemptionStatus.PENDING.value:
            raise InvalidStatusTransitionError('redemption', redemption.status, RedemptionStatus.REJECTED.value)

        redemption.status = RedemptionStatus.REJECTED.value
        redemption.rejection_reason = reason
        redemption.approved_by = admin.id
        redemption.approved_at = datetime.utcnow()

        message = f'Your redemption of "{redemption.reward.name}" was rejected.'
        if reason:
            message = f'{message} Reason: {reason}'
        notification_service.notify(redemption.user_id, 'Redemption rejected', message, NotificationType.WARNING.value)
        db.session.commit()
        logger.info('Redemption %s rejected by %s', redemption.id, admin.id)
        return redemption

    def update_shipment(self, admin: User, redemption_id: int, shipment_status: str) -> UserReward:
        """Advance shipment tracking on an approved redemption."""
        if shipment_status not in SHIPMENT_ORDER:
            raise ValidationError(f"Invalid shipment status '{shipment_status}'", 'shipment_status')

        redemption = self.get_redemption(admin, redemption_id)
        if redemption.status not in (RedemptionStatus.APPROVED.value, RedemptionStatus.DELIVERED.value):
            raise InvalidStatusTransitionError('shipment', redemption.status, shipment_status)

        current = redemption.shipment_status or ShipmentStatus.PENDING.value
        if shipment_status == current:
            return redemption
        if SHIPMENT_ORDER.index(shipment_status) < SHIPMENT_ORDER.index(current):
            raise InvalidStatusTransitionError('shipment', current, shipment_status)

        now = datetime.utcnow()
        redemption.shipment_status = shipment_status
        if shipment_status in (ShipmentStatus.SHIPPED.value, ShipmentStatus.DELIVERED.value):
            if redemption.shipped_at is None:
                redemption.shipped_at = now
                redemption.shipped_by = admin.id
        if shipment_status == ShipmentStatus.DELIVERED.value:
            redemption.delivered_at = now
            redemption.status = RedemptionStatus.DELIVERED.value

        notification_service.notify(
            redemption.user_id,
            'Reward shipment update',
            f'Your reward "{redemption.reward.name}" is now {shipment_status}.',
            NotificationType.INFO.value
        )
        db.session.commit()
        return redemption


# Singleton instance
redemption_service = RedemptionService()
