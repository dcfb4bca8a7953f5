"""
Promotional campaign model.
"""
from datetime import datetime
from decimal import Decimal

from ..extensions import db


class Campaign(db.Model):
    """
    A dated promotion with a points multiplier, shown to partners while it
    is active and inside its date range.
    """
    __tablename__ = 'campaigns'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    multiplier = db.Column(db.Numeric(3, 2), nullable=False, default=Decimal('1.00'))
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Campaign {self.name}>'

    def is_running(self, at: datetime = None) -> bool:
        at = at or datetime.utcnow()
        return bool(self.is_active) and self.start_date <= at <= self.end_date

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'multiplier': float(self.multiplier) if self.multiplier is not None else None,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'is_active': self.is_active,
            'is_running': self.is_running(),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
