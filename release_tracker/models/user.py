"""
Model: User
"""

from flask_login import UserMixin

from release_tracker.db import db, now_utc
from release_tracker.models.role import Role
from release_tracker.utils import isoformat_utc


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(Role, native_enum=False, length=20), nullable=False, default=Role.ROLE_USER)
    enable_notifications = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)
    updated_at = db.Column(db.DateTime, nullable=False, default=now_utc, onupdate=now_utc)

    @property
    def is_admin(self):
        return self.role == Role.ROLE_ADMIN

    def has_role(self, role):
        return self.role == role

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value if self.role else None,
            "enable_notifications": self.enable_notifications,
            "created_at": isoformat_utc(self.created_at),
        }
