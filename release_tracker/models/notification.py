"""
Model: Notification
"""

from release_tracker.db import db, now_utc


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    game_id = db.Column(db.Integer, db.ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    message = db.Column(db.String(512), nullable=False)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    user = db.relationship("User")
    game = db.relationship("Game")

    __table_args__ = (
        db.Index("idx_notifications_user_id", "user_id"),
        db.Index("idx_notifications_read", "is_read"),
        db.Index("idx_notifications_created_at", "created_at"),
    )
