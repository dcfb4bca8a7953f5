"""
In-app notifications.

Rows are written inside the caller's transaction; the caller commits.
"""
from typing import List

from ..extensions import db
from ..models import Notification, NotificationType
from ..utils.exceptions import NotFoundError


class NotificationService:

    def notify(self, user_id: int, title: str, message: str,
               notification_type: str = NotificationType.INFO.value) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
        )
        db.session.add(notification)
        return notification

    def list_for_user(self, user_id: int, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        query = Notification.query.filter_by(user_id=user_id)
        if unread_only:
            query = query.filter_by(is_read=False)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    def unread_count(self, user_id: int) -> int:
        return Notification.query.filter_by(user_id=user_id, is_read=False).count()

    def mark_read(self, user_id: int, notification_id: int) -> Notification:
        notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
        if not notification:
            raise NotFoundError('Notification', notification_id)
        notification.is_read = True
        db.session.commit()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        updated = Notification.query.filter_by(user_id=user_id, is_read=False).update({'is_read': True})
        db.session.commit()
        return updated


# Singleton instance
notification_service = NotificationService()
