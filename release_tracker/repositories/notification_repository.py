"""
Repository for Notification database operations
"""

from sqlalchemy.exc import SQLAlchemyError

from release_tracker.db import db
from release_tracker.models.notification import Notification


class NotificationRepository:
    """Repository for Notification database operations"""

    @staticmethod
    def get_by_id(id):
        return db.session.get(Notification, id)

    @staticmethod
    def get_all_by_user(user_id):
        """Get all notifications for a user, newest first"""
        return (
            Notification.query.filter_by(user_id=user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    @staticmethod
    def get_unread_by_user(user_id):
        return (
            Notification.query.filter_by(user_id=user_id, is_read=False)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    @staticmethod
    def count_unread_by_user(user_id):
        return Notification.query.filter_by(user_id=user_id, is_read=False).count()

    @staticmethod
    def save(notification):
        try:
            db.session.add(notification)
            db.session.commit()
            return notification
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def save_all(notifications):
        """Persist a batch of notifications in one commit"""
        try:
            db.session.add_all(notifications)
            db.session.commit()
            return notifications
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete(notification):
        db.session.delete(notification)
        db.session.commit()
        return True
