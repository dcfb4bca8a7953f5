"""
Reward catalog and redemption models.
"""
from datetime import datetime
from enum import Enum

from ..extensions import db


class RedemptionStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    DELIVERED = 'delivered'


class ShipmentStatus(str, Enum):
    PENDING = 'pending'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'


# Shipment moves forward only, in this order
SHIPMENT_ORDER = [ShipmentStatus.PENDING.value, ShipmentStatus.SHIPPED.value, ShipmentStatus.DELIVERED.value]


class Reward(db.Model):
    __tablename__ = 'rewards'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    points_cost = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(100), nullable=False)
    region = db.Column(db.String(20), nullable=True)  # None: offered in every region
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    stock_quantity = db.Column(db.Integer, nullable=True)  # None: unlimited
    image_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<Reward {self.name} cost={self.points_cost}>'

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity is None or self.stock_quantity > 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'points_cost': self.points_cost,
            'category': self.category,
            'region': self.region,
            'is_active': self.is_active,
            'stock_quantity': self.stock_quantity,
            'image_url': self.image_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class UserReward(db.Model):
    """
    A redemption request.

    Points are reserved (not debited) while pending and debited on approval.
    Shipment tracking applies only after approval.
    """
    __tablename__ = 'user_rewards'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    reward_id = db.Column(db.Integer, db.ForeignKey('rewards.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=RedemptionStatus.PENDING.value, index=True)
    shipment_status = db.Column(db.String(20), nullable=False, default=ShipmentStatus.PENDING.value)
    approved_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    delivery_address = db.Column(db.Text, nullable=True)
    redeemed_at = db.Column(db.DateTime, default=datetime.utcnow)
    shipped_at = db.Column(db.DateTime, nullable=True)
    shipped_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    delivered_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship('User', foreign_keys=[user_id], backref=db.backref('redemptions', lazy='dynamic'))
    reward = db.relationship('Reward', backref=db.backref('redemptions', lazy='dynamic'))

    def __repr__(self):
        return f'<UserReward {self.id} reward={self.reward_id} status={self.status}>'

    def to_dict(self, include_user: bool = False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'reward_id': self.reward_id,
            'reward_name': self.reward.name if self.reward else None,
            'points_cost': self.reward.points_cost if self.reward else None,
            'status': self.status,
            'shipment_status': self.shipment_status,
            'approved_by': self.approved_by,
            'approved_at': self.approved_at.isoformat() if self.approved_at else None,
            'rejection_reason': self.rejection_reason,
            'delivery_address': self.delivery_address,
            'redeemed_at': self.redeemed_at.isoformat() if self.redeemed_at else None,
            'shipped_at': self.shipped_at.isoformat() if self.shipped_at else None,
            'shipped_by': self.shipped_by,
            'delivered_at': self.delivered_at.isoformat() if self.delivered_at else None,
        }
        if include_user and self.user:
            data['user_first_name'] = self.user.first_name
            data['user_last_name'] = self.user.last_name
            data['user_email'] = self.user.email
            data['user_region'] = self.user.region
        return data
