"""
Deal registration model.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum

from ..extensions import db


class DealStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class ProductType(str, Enum):
    SOFTWARE = 'software'
    HARDWARE = 'hardware'
    EQUIPMENT = 'equipment'


class DealType(str, Enum):
    NEW_CUSTOMER = 'new_customer'
    RENEWAL = 'renewal'


class Deal(db.Model):
    """
    A sale registered by a partner.

    ``points_earned`` stays 0 while the deal is pending or rejected; it is
    set once, on approval.
    """
    __tablename__ = 'deals'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    product_type = db.Column(db.String(20), nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    deal_value = db.Column(db.Numeric(12, 2), nullable=False)
    deal_type = db.Column(db.String(20), nullable=False, default=DealType.NEW_CUSTOMER.value)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    close_date = db.Column(db.DateTime, nullable=False)
    client_info = db.Column(db.Text, nullable=True)
    license_agreement_number = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=DealStatus.PENDING.value, index=True)
    points_earned = db.Column(db.Integer, nullable=False, default=0)
    approved_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User', foreign_keys=[user_id], backref=db.backref('deals', lazy='dynamic'))
    approver = db.relationship('User', foreign_keys=[approved_by])

    def __repr__(self):
        return f'<Deal {self.id} {self.product_name} status={self.status}>'

    @property
    def is_pending(self) -> bool:
        return self.status == DealStatus.PENDING.value

    def to_dict(self, include_user: bool = False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'product_type': self.product_type,
            'product_name': self.product_name,
            'deal_value': str(Decimal(self.deal_value).quantize(Decimal('0.01'))) if self.deal_value is not None else None,
            'deal_type': self.deal_type,
            'quantity': self.quantity,
            'close_date': self.close_date.isoformat() if self.close_date else None,
            'client_info': self.client_info,
            'license_agreement_number': self.license_agreement_number,
            'status': self.status,
            'points_earned': self.points_earned,
            'approved_by': self.approved_by,
            'approved_at': self.approved_at.isoformat() if self.approved_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user and self.user:
            data['user_first_name'] = self.user.first_name
            data['user_last_name'] = self.user.last_name
            data['user_region'] = self.user.region
        return data
