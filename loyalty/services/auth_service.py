"""
Login, self-registration and password reset.
"""
import logging
from datetime import datetime
from typing import Any, Dict

from flask import current_app
from sqlalchemy import func, or_

from ..extensions import db
from ..models import User, UserRole
from ..utils.exceptions import AuthenticationError, InvalidTokenError
from .email_service import email_service
from .user_service import user_service

logger = logging.getLogger(__name__)


class AuthService:

    def authenticate(self, identifier: str, password: str) -> User:
        """
        Check credentials. ``identifier`` may be a username or an email.

        Raises:
            AuthenticationError: bad credentials, inactive or unapproved account
        """
        ident = identifier.strip().lower()
        user = User.query.filter(
            or_(func.lower(User.username) == ident, func.lower(User.email) == ident)
        ).first()

        if not user or not user.check_password(password):
            raise AuthenticationError('Invalid credentials')
        if not user.is_active:
            raise AuthenticationError('Account inactive', 'ACCOUNT_INACTIVE')
        if not user.is_approved:
            raise AuthenticationError(
                'Account pending approval. An administrator must approve your account before you can log in.',
                'ACCOUNT_PENDING'
            )

        logger.info('User %s logged in', user.id)
        return user

    def register(self, data: Dict[str, Any]) -> User:
        """Self-registration. The account waits for admin approval."""
        user_service.ensure_unique(data['username'], data['email'])

        user = User(
            username=data['username'],
            email=data['email'].lower(),
            first_name=data['first_name'],
            last_name=data['last_name'],
            country=data['country'],
            region=data.get('region'),
            role=UserRole.USER.value,
            is_active=True,
            is_approved=False,
        )
        user.set_password(data['password'])
        db.session.add(user)
        db.session.commit()

        logger.info('User %s registered, pending approval', user.id)
        return user

    def request_password_reset(self, email: str) -> bool:
        """Issue a reset token and email it. Unknown emails are silently ignored."""
        user = User.query.filter(func.lower(User.email) == email.lower()).first()
        if not user or not user.is_active or not user.password_hash:
            return False

        token = user.issue_reset_token(current_app.config['RESET_TOKEN_TTL_MINUTES'])
        db.session.commit()
        return email_service.send_password_reset_email(user, token)

    def reset_password(self, token: str, password: str) -> User:
        user = User.query.filter_by(reset_token=token).first()
        if not user:
            raise InvalidTokenError('Invalid or expired reset token')
        if not user.reset_token_expiry or user.reset_token_expiry < datetime.utcnow():
            raise InvalidTokenError('Invalid or expired reset token')

        user.set_password(password)
        user.reset_token = None
        user.reset_token_expiry = None
        db.session.commit()
        return user


# Singleton instance
auth_service = AuthService()
