"""
User administration.

Region-scoped admins (``regional-admin``) only see and act on users of their
region; full admins see everyone.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from ..extensions import db
from ..models import ADMIN_ROLES, FULL_ADMIN_ROLES, RegionConfig, User, UserRole
from ..middleware.auth import ensure_user_access
from ..utils.exceptions import (
    AuthorizationError,
    DuplicateError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from .email_service import email_service
from .emblue_service import emblue_service

logger = logging.getLogger(__name__)


def scoped_user_query(admin: User, query=None):
    """Restrict a User query to the admin's region when the admin is region-scoped."""
    query = query if query is not None else User.query
    scope = admin.scope_region
    if scope is not None:
        query = query.filter(User.region == scope)
    return query


def get_admin_recipients(region: Optional[str]) -> List[User]:
    """
    Admins who should hear about activity in ``region``: every active
    admin/super-admin plus the region's regional admins.
    """
    admins = User.query.filter(
        User.is_active.is_(True),
        User.role.in_(FULL_ADMIN_ROLES)
    ).all()

    if region:
        regional = User.query.outerjoin(RegionConfig, User.admin_region_id == RegionConfig.id).filter(
            User.is_active.is_(True),
            User.role == UserRole.REGIONAL_ADMIN.value,
            or_(
                RegionConfig.region == region,
                (User.admin_region_id.is_(None)) & (User.region == region)
            )
        ).all()
        admins.extend(regional)

    return admins


class UserService:

    def get_user(self, user_id: int) -> User:
        user = User.query.get(user_id)
        if not user:
            raise NotFoundError('User', user_id)
        return user

    def get_scoped_user(self, admin: User, user_id: int) -> User:
        user = self.get_user(user_id)
        ensure_user_access(admin, user)
        return user

    def get_managed_user(self, admin: User, user_id: int) -> User:
        """
        Scoped lookup that also checks rank: only super admins act on super
        admins, and only full admins act on admin-level accounts.
        """
        user = self.get_scoped_user(admin, user_id)
        if user.role == UserRole.SUPER_ADMIN.value and admin.role != UserRole.SUPER_ADMIN.value:
            raise AuthorizationError('Only super admins can manage super-admin accounts')
        if user.role in ADMIN_ROLES and admin.role not in FULL_ADMIN_ROLES:
            raise AuthorizationError('Only full admins can manage admin accounts')
        return user

    def list_users(self, admin: User, region: str = None, role: str = None,
                   include_inactive: bool = True) -> List[User]:
        query = scoped_user_query(admin)
        if region:
            query = query.filter(User.region == region)
        if role:
            query = query.filter(User.role == role)
        if not include_inactive:
            query = query.filter(User.is_active.is_(True))
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    def list_pending(self, admin: User) -> List[User]:
        """Self-registered users awaiting approval. Unaccepted invites are not listed."""
        query = scoped_user_query(admin).filter(
            User.is_approved.is_(False),
            User.is_active.is_(True),
            User.password_hash.isnot(None)
        )
        return query.order_by(User.created_at.asc()).all()

    def ensure_unique(self, username: str = None, email: str = None, exclude_id: int = None) -> None:
        if username:
            query = User.query.filter(func.lower(User.username) == username.lower())
            if exclude_id:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise DuplicateError('User', f'username {username}')
        if email:
            query = User.query.filter(func.lower(User.email) == email.lower())
            if exclude_id:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise DuplicateError('User', f'email {email}')

    def create_user(self, data: Dict[str, Any], approved_by: int = None) -> User:
        """Create an approved, active account (admin-created or imported)."""
        self.ensure_unique(data.get('username'), data.get('email'))

        user = User(
            username=data['username'],
            email=data['email'].lower(),
            first_name=data['first_name'],
            last_name=data['last_name'],
            country=data['country'],
            role=data.get('role') or UserRole.USER.value,
            region=data.get('region'),
            region_category=data.get('region_category'),
            region_subcategory=data.get('region_subcategory'),
        )
        user.set_password(data['password'])
        user.approve(approved_by)
        db.session.add(user)
        db.session.commit()
        return user

    def update_user(self, admin: User, user_id: int, changes: Dict[str, Any]) -> User:
        user = self.get_managed_user(admin, user_id)

        if 'region' in changes and admin.scope_region is not None and changes['region'] != admin.scope_region:
            raise AuthorizationError('You cannot move users outside your assigned region')
        if 'email' in changes and changes['email']:
            changes['email'] = changes['email'].lower()
            self.ensure_unique(email=changes['email'], exclude_id=user.id)
        if changes.get('is_active') is False and user.id == admin.id:
            raise ValidationError('You cannot deactivate your own account', 'is_active')

        for key, value in changes.items():
            setattr(user, key, value)
        db.session.commit()
        return user

    def change_role(self, admin: User, user_id: int, role: str, admin_region_id: int = None) -> User:
        user = self.get_user(user_id)
        if user.id == admin.id:
            raise ValidationError('You cannot change your own role', 'role')
        user = self.get_managed_user(admin, user_id)
        if role == UserRole.SUPER_ADMIN.value and admin.role != UserRole.SUPER_ADMIN.value:
            raise AuthorizationError('Only super admins can grant the super-admin role')

        if admin_region_id is not None:
            if not RegionConfig.query.get(admin_region_id):
                raise NotFoundError('Region config', admin_region_id)

        user.role = role
        if role == UserRole.REGIONAL_ADMIN.value:
            user.admin_region_id = admin_region_id
        else:
            user.admin_region_id = None
        db.session.commit()

        logger.info('User %s role set to %s by admin %s', user.id, role, admin.id)
        return user

    def deactivate(self, admin: User, user_id: int) -> User:
        user = self.get_managed_user(admin, user_id)
        if user.id == admin.id:
            raise ValidationError('You cannot deactivate your own account')
        user.is_active = False
        db.session.commit()
        return user

    def approve(self, admin: User, user_id: int) -> Dict[str, Any]:
        """Approve a pending registration and send the approval email (non-fatal)."""
        user = self.get_managed_user(admin, user_id)
        if user.account_status != 'pending':
            raise InvalidStatusTransitionError('User', user.account_status, 'approved')
        user.approve(admin.id)
        db.session.commit()

        if emblue_service.is_configured:
            email_sent = emblue_service.send_approval_email(user.email, user.first_name, user.last_name)
        else:
            email_sent = email_service.send_approval_email(user.email, user.first_name, user.last_name)

        if not email_sent:
            logger.warning('Approval email to user %s failed; approval stands', user.id)

        return {'user': user, 'email_sent': email_sent}

    def reject(self, admin: User, user_id: int) -> User:
        """
        Reject a pending registration or revoke an outstanding invite by
        deactivating the account. A revoked invite loses its token.
        """
        user = self.get_managed_user(admin, user_id)
        if user.account_status not in ('pending', 'invited'):
            raise InvalidStatusTransitionError('User', user.account_status, 'rejected')

        if user.account_status == 'invited':
            user.invite_token = None
            user.invite_token_expires_at = None
        user.is_active = False
        user.is_approved = False
        db.session.commit()
        return user


# Singleton instance
user_service = UserService()
