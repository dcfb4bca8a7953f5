"""
Support ticket model.
"""
from datetime import datetime
from enum import Enum
from ..extensions import db


class TicketStatus(str, Enum):
    """Possible statuses for a support ticket."""
    OPEN = 'open'
    IN_PROGRESS = 'in_progress'
    RESOLVED = 'resolved'
    CLOSED = 'closed'


class TicketPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


# Allowed status moves; resolved may only be closed, closed is terminal
TICKET_TRANSITIONS = {
    TicketStatus.OPEN.value: {TicketStatus.IN_PROGRESS.value, TicketStatus.RESOLVED.value, TicketStatus.CLOSED.value},
    TicketStatus.IN_PROGRESS.value: {TicketStatus.RESOLVED.value, TicketStatus.CLOSED.value},
    TicketStatus.RESOLVED.value: {TicketStatus.CLOSED.value},
    TicketStatus.CLOSED.value: set(),
}


class SupportTicket(db.Model):
    """
    A help request from a partner, answered by an admin.
    """
    __tablename__ = 'support_tickets'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=TicketStatus.OPEN.value, index=True)
    priority = db.Column(db.String(10), nullable=False, default=TicketPriority.MEDIUM.value)
    assigned_to = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    admin_response = db.Column(db.Text, nullable=True)
    responded_at = db.Column(db.DateTime, nullable=True)
    responded_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User', foreign_keys=[user_id], backref=db.backref('support_tickets', lazy='dynamic'))

    def __repr__(self):
        return f'<SupportTicket {self.id} status={self.status}>'

    def to_dict(self, include_user: bool = False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'subject': self.subject,
            'message': self.message,
            'status': self.status,
            'priority': self.priority,
            'assigned_to': self.assigned_to,
            'admin_response': self.admin_response,
            'responded_at': self.responded_at.isoformat() if self.responded_at else None,
            'responded_by': self.responded_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user and self.user:
            data['user_first_name'] = self.user.first_name
            data['user_last_name'] = self.user.last_name
            data['user_email'] = self.user.email
        return data

    def can_transition_to(self, status: str) -> bool:
        if status == self.status:
            return True
        return status in TICKET_TRANSITIONS.get(self.status, set())

    def record_response(self, response: str, admin_id: int):
        """Store an admin reply."""
        self.admin_response = response
        self.responded_at = datetime.utcnow()
        self.responded_by = admin_id
