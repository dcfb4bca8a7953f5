"""
Per-region points configuration.
"""
from datetime import datetime

from ..extensions import db

# Applied when a region has no stored row
DEFAULT_POINTS_CONFIG = {
    'software_rate': 1000,
    'hardware_rate': 5000,
    'equipment_rate': 10000,
    'grand_prize_threshold': 50000,
    'default_new_customer_goal_rate': 1000,
    'default_renewal_goal_rate': 2000,
    'redemption_start_date': None,
    'redemption_end_date': None,
}


class PointsConfig(db.Model):
    """
    Point-earning rates for one region.

    A deal earns ``floor(deal_value / rate)`` points, where the rate is the
    dollar amount needed per point for the deal's product type.
    """
    __tablename__ = 'points_config'

    id = db.Column(db.Integer, primary_key=True)
    region = db.Column(db.String(20), unique=True, nullable=False)
    software_rate = db.Column(db.Integer, nullable=False, default=1000)
    hardware_rate = db.Column(db.Integer, nullable=False, default=5000)
    equipment_rate = db.Column(db.Integer, nullable=False, default=10000)
    grand_prize_threshold = db.Column(db.Integer, nullable=False, default=50000)
    default_new_customer_goal_rate = db.Column(db.Integer, nullable=False, default=1000)
    default_renewal_goal_rate = db.Column(db.Integer, nullable=False, default=2000)
    redemption_start_date = db.Column(db.Date, nullable=True)
    redemption_end_date = db.Column(db.Date, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    def __repr__(self):
        return f'<PointsConfig {self.region}>'

    def to_dict(self):
        return {
            'id': self.id,
            'region': self.region,
            'software_rate': self.software_rate,
            'hardware_rate': self.hardware_rate,
            'equipment_rate': self.equipment_rate,
            'grand_prize_threshold': self.grand_prize_threshold,
            'default_new_customer_goal_rate': self.default_new_customer_goal_rate,
            'default_renewal_goal_rate': self.default_renewal_goal_rate,
            'redemption_start_date': self.redemption_start_date.isoformat() if self.redemption_start_date else None,
            'redemption_end_date': self.redemption_end_date.isoformat() if self.redemption_end_date else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'updated_by': self.updated_by,
        }
