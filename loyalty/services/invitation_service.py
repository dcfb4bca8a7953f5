"""
Admin invitations.

An invite creates the user row up front (no username, no password) with a
random token. The partner follows the emailed link, picks credentials and
the account is approved on the spot. A token stops working once it expires
or has been accepted. Rejecting the invite revokes it.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List

from flask import current_app
from pydantic import ValidationError as SchemaValidationError

from ..extensions import db
from ..models import User, UserRole
from ..schemas import InviteSchema
from ..utils.errors import validation_errors
from ..utils.exceptions import AuthorizationError, DuplicateError, InvalidTokenError, LoyaltyError
from .email_service import email_service
from .user_service import user_service

logger = logging.getLogger(__name__)


class InvitationService:

    def create_invite(self, inviter: User, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an invited user and email the link.

        Returns:
            Dict with the user and whether the email went out
        """
        scope = inviter.scope_region
        region = data.get('region')
        if scope is not None:
            if region and region != scope:
                raise AuthorizationError('You can only invite users to your assigned region')
            region = scope

        email = data['email'].lower()
        if User.query.filter(db.func.lower(User.email) == email).first():
            raise DuplicateError('User', f'email {email}')

        user = User(
            email=email,
            first_name=data['first_name'],
            last_name=data['last_name'],
            country=data['country'],
            region=region,
            role=UserRole.USER.value,
            is_active=True,
            is_approved=False,
            invited_by=inviter.id,
        )
        token = user.issue_invite_token(current_app.config['INVITE_TOKEN_TTL_DAYS'])
        db.session.add(user)
        db.session.commit()

        email_sent = email_service.send_invite_email(user.email, user.first_name, user.last_name, token)
        if not email_sent:
            logger.warning('Invite email to %s failed; invite %s remains valid', user.email, user.id)

        return {'user': user, 'email_sent': email_sent}

    def create_bulk_invites(self, inviter: User, rows: List[dict]) -> Dict[str, Any]:
        """Invite many users; each row succeeds or fails on its own."""
        invited = []
        errors = []
        for index, row in enumerate(rows, start=1):
            try:
                data = InviteSchema.model_validate(row).model_dump()
                result = self.create_invite(inviter, data)
                invited.append({'email': result['user'].email, 'email_sent': result['email_sent']})
            except SchemaValidationError as e:
                db.session.rollback()
                messages = '; '.join(f"{err['field']}: {err['message']}" for err in validation_errors(e))
                errors.append({'row': index, 'email': row.get('email'), 'error': messages})
            except LoyaltyError as e:
                db.session.rollback()
                errors.append({'row': index, 'email': row.get('email'), 'error': e.message})

        return {
            'invited': invited,
            'success_count': len(invited),
            'error_count': len(errors),
            'errors': errors,
        }

    def verify_invite(self, token: str) -> User:
        """
        Resolve an invite token to its pending user.

        Raises:
            InvalidTokenError: unknown, revoked, expired or already used token
        """
        user = User.query.filter_by(invite_token=token).first() if token else None
        if not user:
            raise InvalidTokenError('Invalid invitation token')
        if not user.is_active:
            raise InvalidTokenError('This invitation has been revoked')
        if user.invite_accepted_at is not None:
            raise InvalidTokenError('This invitation has already been used')
        if not user.invite_token_expires_at or user.invite_token_expires_at < datetime.utcnow():
            raise InvalidTokenError('This invitation has expired')
        return user

    def complete_registration(self, token: str, username: str, password: str) -> User:
        """Set credentials on an invited user, approve them and send the welcome email."""
        user = self.verify_invite(token)
        user_service.ensure_unique(username=username, exclude_id=user.id)

        user.username = username
        user.set_password(password)
        user.invite_accepted_at = datetime.utcnow()
        user.approve(user.invited_by)
        db.session.commit()

        if not email_service.send_welcome_email(user.email, user.first_name, user.last_name):
            logger.warning('Welcome email to user %s failed', user.id)

        logger.info('Invited user %s completed registration', user.id)
        return user


# Singleton instance
invitation_service = InvitationService()
