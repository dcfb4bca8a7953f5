"""
Support tickets raised by partners and answered by admins.
"""
import logging
from typing import Any, Dict, List

from ..extensions import db
from ..models import NotificationType, SupportTicket, TicketStatus, User
from ..middleware.auth import ensure_user_access
from ..utils.exceptions import InvalidStatusTransitionError, NotFoundError
from .email_service import email_service
from .notification_service import notification_service
from .user_service import get_admin_recipients

logger = logging.getLogger(__name__)


class SupportService:

    def create_ticket(self, user: User, data: Dict[str, Any]) -> SupportTicket:
        ticket = SupportTicket(
            user_id=user.id,
            subject=data['subject'],
            message=data['message'],
            priority=data.get('priority') or 'medium',
            status=TicketStatus.OPEN.value,
        )
        db.session.add(ticket)
        db.session.commit()
        logger.info('Support ticket %s opened by user %s', ticket.id, user.id)

        admins = get_admin_recipients(user.region)
        email_service.send_support_ticket_to_admins(admins, user, ticket)
        return ticket

    def list_for_user(self, user_id: int) -> List[SupportTicket]:
        return SupportTicket.query.filter_by(user_id=user_id).order_by(
            SupportTicket.created_at.desc(), SupportTicket.id.desc()
        ).all()

    def list_for_admin(self, admin: User, status: str = None) -> List[SupportTicket]:
        query = SupportTicket.query.join(User, SupportTicket.user_id == User.id)
        scope = admin.scope_region
        if scope is not None:
            query = query.filter(User.region == scope)
        if status:
            query = query.filter(SupportTicket.status == status)
        return query.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc()).all()

    def update_ticket(self, admin: User, ticket_id: int, changes: Dict[str, Any]) -> SupportTicket:
        """
        Apply an admin update: status move, reply, priority or assignee.

        Raises:
            InvalidStatusTransitionError: status move not allowed from the current status
        """
        ticket = SupportTicket.query.get(ticket_id)
        if not ticket:
            raise NotFoundError('Support ticket', ticket_id)
        ensure_user_access(admin, ticket.user)

        status = changes.get('status')
        if status and not ticket.can_transition_to(status):
            raise InvalidStatusTransitionError('ticket', ticket.status, status)

        response = changes.get('admin_response')
        if response:
            ticket.record_response(response, admin.id)
            notification_service.notify(
                ticket.user_id,
                'Support ticket answered',
                f'An administrator replied to "{ticket.subject}".',
                NotificationType.INFO.value
            )
            # First reply picks the ticket up
            if not status and ticket.status == TicketStatus.OPEN.value:
                status = TicketStatus.IN_PROGRESS.value

        if status:
            ticket.status = status
        if changes.get('priority'):
            ticket.priority = changes['priority']
        if 'assigned_to' in changes:
            ticket.assigned_to = changes['assigned_to']

        db.session.commit()
        return ticket


# Singleton instance
support_service = SupportService()
