"""
User Routes - the logged in user's account, and user management for admins
"""

from flask import Blueprint
from flask_login import current_user, login_required, logout_user

from release_tracker.api_responses import get_json_body, success_response
from release_tracker.auth import roles_required
from release_tracker.exceptions import ForbiddenException
from release_tracker.models.role import Role
from release_tracker.services import user_service

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("/me")
@login_required
def get_me():
    return success_response(current_user.to_dict())


@users_bp.route("/me", methods=["PUT"])
@login_required
def update_me():
    data = get_json_body()
    user = user_service.update_profile(
        current_user.id,
        enable_notifications=data.get("enable_notifications"),
        email=data.get("email"),
        username=data.get("username"),
    )
    return success_response(user.to_dict())


@users_bp.route("/me/password", methods=["PUT"])
@login_required
def update_my_password():
    data = get_json_body()
    user_service.update_password(
        current_user.id,
        data.get("old_password"),
        data.get("new_password"),
        data.get("confirm_password"),
    )
    return "", 204


@users_bp.route("/me", methods=["DELETE"])
@login_required
def delete_me():
    user_id = current_user.id
    logout_user()
    user_service.delete_user(user_id)
    return "", 204


# Admin

@users_bp.route("/admin")
@roles_required([Role.ROLE_ADMIN])
def list_users():
    return success_response([user.to_dict() for user in user_service.get_all_users()])


@users_bp.route("/admin/id/<int:user_id>")
@roles_required([Role.ROLE_ADMIN])
def get_user_by_id(user_id):
    return success_response(user_service.get_user_by_id(user_id).to_dict())


@users_bp.route("/admin/username/<username>")
@roles_required([Role.ROLE_ADMIN])
def get_user_by_username(username):
    return success_response(user_service.get_user_by_username(username).to_dict())


@users_bp.route("/admin/<int:user_id>", methods=["DELETE"])
@roles_required([Role.ROLE_ADMIN])
def delete_user(user_id):
    if user_id == current_user.id:
        raise ForbiddenException("Admins cannot delete their own account here.")
    user_service.delete_user(user_id)
    return "", 204


@users_bp.route("/admin/<int:user_id>/role", methods=["PUT"])
@roles_required([Role.ROLE_ADMIN])
def update_user_role(user_id):
    if user_id == current_user.id:
        raise ForbiddenException("Admins cannot change their own role.")
    data = get_json_body()
    user = user_service.update_user_role(user_id, data.get("role"))
    return success_response(user.to_dict())
