"""
Notification Routes - the logged in user's inbox

Notifications belonging to someone else answer 404, the same as missing ones.
"""

from flask import Blueprint
from flask_login import current_user, login_required

from release_tracker.api_responses import success_response
from release_tracker.services.notification_service import NotificationService

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.route("")
@login_required
def get_notifications():
    return success_response(NotificationService().get_user_notifications(current_user.id))


@notifications_bp.route("/unread")
@login_required
def get_unread_notifications():
    return success_response(NotificationService().get_unread_notifications(current_user.id))


@notifications_bp.route("/unread/count")
@login_required
def get_unread_count():
    return success_response({"count": NotificationService().get_unread_notification_count(current_user.id)})


@notifications_bp.route("/<int:notification_id>/read", methods=["PUT"])
@login_required
def mark_as_read(notification_id):
    NotificationService().mark_as_read(notification_id, current_user.id)
    return "", 204


@notifications_bp.route("/<int:notification_id>/unread", methods=["PUT"])
@login_required
def mark_as_unread(notification_id):
    NotificationService().mark_as_unread(notification_id, current_user.id)
    return "", 204


@notifications_bp.route("/read-all", methods=["PUT"])
@login_required
def mark_all_as_read():
    count = NotificationService().mark_all_as_read(current_user.id)
    return success_response({"updated": count})


@notifications_bp.route("/<int:notification_id>", methods=["DELETE"])
@login_required
def delete_notification(notification_id):
    NotificationService().delete_notification(notification_id, current_user.id)
    return "", 204
