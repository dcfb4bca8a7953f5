"""
Deal registration and approval.

Lifecycle: pending -> approved | rejected. Both transitions are one-way.
Points are computed from the owner's region config at approval time and
credited to the ledger in the same transaction that approves the deal.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..extensions import db
from ..models import Deal, DealStatus, NotificationType, User
from ..middleware.auth import ensure_user_access
from ..utils.exceptions import InvalidStatusTransitionError, NotFoundError
from .email_service import email_service
from .notification_service import notification_service
from .points_config_service import calculate_deal_points
from .points_service import points_service

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'product_type',
    'product_name',
    'deal_value',
    'deal_type',
    'quantity',
    'close_date',
    'client_info',
    'license_agreement_number',
)


class DealService:

    def create_deal(self, user: User, data: Dict[str, Any]) -> Deal:
        """Register a pending deal for ``user``. Points stay 0 until approval."""
        deal = Deal(
            user_id=user.id,
            status=DealStatus.PENDING.value,
            points_earned=0,
            **{key: data[key] for key in EDITABLE_FIELDS if key in data}
        )
        db.session.add(deal)
        db.session.commit()
        logger.info('Deal %s registered by user %s', deal.id, user.id)
        return deal

    def list_for_user(self, user_id: int, limit: Optional[int] = None) -> List[Deal]:
        query = Deal.query.filter_by(user_id=user_id).order_by(Deal.created_at.desc(), Deal.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_deal(self, deal_id: int) -> Deal:
        deal = Deal.query.get(deal_id)
        if not deal:
            raise NotFoundError('Deal', deal_id)
        return deal

    def get_visible_deal(self, viewer: User, deal_id: int) -> Deal:
        """Owners see their own deals; admins see deals in their scope."""
        deal = self.get_deal(deal_id)
        if deal.user_id == viewer.id:
            return deal
        if not viewer.is_admin:
            raise NotFoundError('Deal', deal_id)
        ensure_user_access(viewer, deal.user)
        return deal

    def list_for_admin(self, admin: User, status: str = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        query = Deal.query.join(User, Deal.user_id == User.id)
        scope = admin.scope_region
        if scope is not None:
            query = query.filter(User.region == scope)
        if status:
            query = query.filter(Deal.status == status)

        total = query.count()
        deals = query.order_by(Deal.created_at.desc(), Deal.id.desc()).offset((page - 1) * limit).limit(limit).all()
        return {
            'deals': deals,
            'total': total,
            'page': page,
            'limit': limit,
            'pages': (total + limit - 1) // limit if limit else 1,
        }

    def approve(self, admin: User, deal_id: int) -> Deal:
        """
        Approve a pending deal and credit its points.

        Raises:
            InvalidStatusTransitionError: deal is not pending
        """
        deal = self.get_deal(deal_id)
        ensure_user_access(admin, deal.user)
        if not deal.is_pending:
            raise InvalidStatusTransitionError('deal', deal.status, DealStatus.APPROVED.value)

        points = calculate_deal_points(deal.deal_value, deal.product_type, deal.user.region)

        deal.status = DealStatus.APPROVED.value
        deal.points_earned = points
        deal.approved_by = admin.id
        deal.approved_at = datetime.utcnow()

        if points > 0:
            points_service.add_entry(
                deal.user_id,
                points,
                f'Points earned from deal: {deal.product_name}',
                deal_id=deal.id
            )

        notification_service.notify(
            deal.user_id,
            'Deal approved',
            f'Your deal "{deal.product_name}" was approved and earned {points} points.',
            NotificationType.SUCCESS.value
        )
        db.session.commit()
        logger.info('Deal %s approved by %s for %d points', deal.id, admin.id, points)

        if not email_service.send_deal_approved_email(deal.user, deal):
            logger.warning('Deal approved email for deal %s failed', deal.id)
        return deal

    def reject(self, admin: User, deal_id: int) -> Deal:
        deal = self.get_deal(deal_id)
        ensure_user_access(admin, deal.user)
        if not deal.is_pending:
            raise InvalidStatusTransitionError('deal', deal.status, DealStatus.REJECTED.value)

        deal.status = DealStatus.REJECTED.value
        deal.points_earned = 0
        deal.approved_by = admin.id
        deal.approved_at = datetime.utcnow()

        notification_service.notify(
            deal.user_id,
            'Deal rejected',
            f'Your deal "{deal.product_name}" was not approved.',
            NotificationType.WARNING.value
        )
        db.session.commit()
        logger.info('Deal %s rejected by %s', deal.id, admin.id)
        return deal

    def update(self, admin: User, deal_id: int, changes: Dict[str, Any]) -> Deal:
        """
        Admin edit. Field edits apply only while the deal is pending; a status
        change goes through approve/reject.
        """
        deal = self.get_deal(deal_id)
        ensure_user_access(admin, deal.user)

        status = changes.pop('status', None)
        field_changes = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}

        if field_changes:
            if not deal.is_pending:
                raise InvalidStatusTransitionError('deal', deal.status, 'edited')
            for key, value in field_changes.items():
                setattr(deal, key, value)
            db.session.commit()

        if status and status != deal.status:
            if status == DealStatus.APPROVED.value:
                return self.approve(admin, deal.id)
            if status == DealStatus.REJECTED.value:
                return self.reject(admin, deal.id)
            raise InvalidStatusTransitionError('deal', deal.status, status)

        return deal

    def recalculate_points(self) -> Dict[str, Any]:
        """
        Re-price every approved deal with the current region rates.

        Differences are written as adjustment rows so the ledger stays
        append-only.
        """
        updated = 0
        total_delta = 0
        for deal in Deal.query.filter_by(status=DealStatus.APPROVED.value).all():
            new_points = calculate_deal_points(deal.deal_value, deal.product_type, deal.user.region)
            delta = new_points - (deal.points_earned or 0)
            if delta == 0:
                continue

            points_service.add_entry(
                deal.user_id,
                delta,
                f'Points adjustment after recalculation: {deal.product_name}',
                deal_id=deal.id
            )
            deal.points_earned = new_points
            updated += 1
            total_delta += delta

        db.session.commit()
        logger.info('Recalculated points: %d deals changed, net %+d points', updated, total_delta)
        return {'updated_deals': updated, 'points_delta': total_delta}


# Singleton instance
deal_service = DealService()
