"""
User model and role/region enumerations.
"""
import secrets
from datetime import datetime, timedelta
from enum import Enum

from werkzeug.security import generate_password_hash, check_password_hash

from ..extensions import db


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'
    REGIONAL_ADMIN = 'regional-admin'
    SUPER_ADMIN = 'super-admin'


class Region(str, Enum):
    NOLA = 'NOLA'
    SOLA = 'SOLA'
    BRASIL = 'BRASIL'
    MEXICO = 'MEXICO'


class RegionCategory(str, Enum):
    ENTERPRISE = 'ENTERPRISE'
    SMB = 'SMB'
    MSSP = 'MSSP'


# Roles allowed to review deals, redemptions and tickets
ADMIN_ROLES = (UserRole.ADMIN.value, UserRole.REGIONAL_ADMIN.value, UserRole.SUPER_ADMIN.value)

# Roles allowed to manage users, regions, reports and imports
FULL_ADMIN_ROLES = (UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value)

REGION_VALUES = tuple(r.value for r in Region)


class User(db.Model):
    """
    A partner account.

    Invited users exist before they can log in: the row carries an
    ``invite_token`` and no username/password until the invite is accepted.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=True, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=UserRole.USER.value)

    country = db.Column(db.String(100), nullable=False)
    region = db.Column(db.String(20), nullable=True, index=True)
    region_category = db.Column(db.String(20), nullable=True)
    region_subcategory = db.Column(db.String(100), nullable=True)
    admin_region_id = db.Column(db.Integer, db.ForeignKey('region_configs.id', ondelete='SET NULL'), nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_approved = db.Column(db.Boolean, nullable=False, default=False)
    approved_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)

    # Invitation
    invite_token = db.Column(db.String(64), unique=True, nullable=True, index=True)
    invite_token_expires_at = db.Column(db.DateTime, nullable=True)
    invite_accepted_at = db.Column(db.DateTime, nullable=True)
    invited_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Password reset
    reset_token = db.Column(db.String(64), unique=True, nullable=True, index=True)
    reset_token_expiry = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    admin_region = db.relationship('RegionConfig', foreign_keys=[admin_region_id])

    def __repr__(self):
        return f'<User {self.username or self.email} role={self.role}>'

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_full_admin(self) -> bool:
        return self.role in FULL_ADMIN_ROLES

    @property
    def is_invite_pending(self) -> bool:
        return self.invite_token is not None and self.invite_accepted_at is None

    @property
    def account_status(self) -> str:
        """One of inactive, approved, invited (no credentials yet) or pending."""
        if not self.is_active:
            return 'inactive'
        if self.is_approved:
            return 'approved'
        if self.password_hash is None:
            return 'invited'
        return 'pending'

    @property
    def scope_region(self):
        """
        Region a regional admin is restricted to, or None when unrestricted.

        Uses the assigned admin region config, falling back to the admin's
        own region. A regional admin with neither is scoped to nothing.
        """
        if self.role != UserRole.REGIONAL_ADMIN.value:
            return None
        if self.admin_region is not None:
            return self.admin_region.region
        return self.region or ''

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def issue_invite_token(self, ttl_days: int) -> str:
        self.invite_token = secrets.token_urlsafe(32)
        self.invite_token_expires_at = datetime.utcnow() + timedelta(days=ttl_days)
        self.invite_accepted_at = None
        return self.invite_token

    def issue_reset_token(self, ttl_minutes: int) -> str:
        self.reset_token = secrets.token_urlsafe(32)
        self.reset_token_expiry = datetime.utcnow() + timedelta(minutes=ttl_minutes)
        return self.reset_token

    def approve(self, approver_id: int = None) -> None:
        self.is_approved = True
        self.is_active = True
        self.approved_by = approver_id
        self.approved_at = datetime.utcnow()

    def to_dict(self, include_admin_fields: bool = False) -> dict:
        data = {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'role': self.role,
            'country': self.country,
            'region': self.region,
            'region_category': self.region_category,
            'region_subcategory': self.region_subcategory,
            'admin_region_id': self.admin_region_id,
            'is_active': self.is_active,
            'is_approved': self.is_approved,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_admin_fields:
            data.update({
                'approved_by': self.approved_by,
                'approved_at': self.approved_at.isoformat() if self.approved_at else None,
                'invited_by': self.invited_by,
                'invite_pending': self.is_invite_pending,
                'invite_token_expires_at': (
                    self.invite_token_expires_at.isoformat() if self.invite_token_expires_at else None
                ),
            })
        return data
