"""
Region configuration and monthly prize models.
"""
from datetime import datetime

from ..extensions import db


class RegionConfig(db.Model):
    """
    A region/category/subcategory bucket with its goal rates.

    Regional admins are attached to one of these through
    ``User.admin_region_id``.
    """
    __tablename__ = 'region_configs'
    __table_args__ = (
        db.UniqueConstraint('region', 'category', 'subcategory', name='uq_region_category_subcategory'),
    )

    id = db.Column(db.Integer, primary_key=True)
    region = db.Column(db.String(20), nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False)
    subcategory = db.Column(db.String(100), nullable=True)
    name = db.Column(db.String(255), nullable=False)
    new_customer_goal_rate = db.Column(db.Integer, nullable=False, default=1000)
    renewal_goal_rate = db.Column(db.Integer, nullable=False, default=2000)
    monthly_goal_target = db.Column(db.Integer, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    prizes = db.relationship('MonthlyRegionPrize', backref='region_config', lazy='dynamic')

    def __repr__(self):
        return f'<RegionConfig {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'region': self.region,
            'category': self.category,
            'subcategory': self.subcategory,
            'name': self.name,
            'new_customer_goal_rate': self.new_customer_goal_rate,
            'renewal_goal_rate': self.renewal_goal_rate,
            'monthly_goal_target': self.monthly_goal_target,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class MonthlyRegionPrize(db.Model):
    __tablename__ = 'monthly_region_prizes'

    id = db.Column(db.Integer, primary_key=True)
    region_config_id = db.Column(db.Integer, db.ForeignKey('region_configs.id', ondelete='CASCADE'), nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    prize_name = db.Column(db.String(255), nullable=False)
    prize_description = db.Column(db.Text, nullable=True)
    goal_target = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<MonthlyRegionPrize {self.year}-{self.month:02d} {self.prize_name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'region_config_id': self.region_config_id,
            'region': self.region_config.region if self.region_config else None,
            'month': self.month,
            'year': self.year,
            'prize_name': self.prize_name,
            'prize_description': self.prize_description,
            'goal_target': self.goal_target,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
