"""
Points ledger.
"""
from datetime import datetime

from ..extensions import db


class PointsHistory(db.Model):
    """
    One signed ledger entry. A user's balance is the sum of their entries;
    rows are only ever appended.
    """
    __tablename__ = 'points_history'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    deal_id = db.Column(db.Integer, db.ForeignKey('deals.id', ondelete='SET NULL'), nullable=True)
    reward_id = db.Column(db.Integer, db.ForeignKey('rewards.id', ondelete='SET NULL'), nullable=True)
    points = db.Column(db.Integer, nullable=False)
    description = db.Column(db.String(500), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<PointsHistory user={self.user_id} points={self.points}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'deal_id': self.deal_id,
            'reward_id': self.reward_id,
            'points': self.points,
            'description': self.description,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
