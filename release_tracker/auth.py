from functools import wraps
import logging
import os

from flask import Blueprint
from flask_login import LoginManager, current_user, login_required, login_user, logout_user

from release_tracker.api_responses import ErrorCode, error_response, get_json_body, success_response
from release_tracker.db import db
from release_tracker.exceptions import ForbiddenException
from release_tracker.models.user import User
from release_tracker.services import user_service

# Retrieve main logger
logger = logging.getLogger("main")

login_manager = LoginManager()

auth_blueprint = Blueprint("auth", __name__, url_prefix="/api/auth")


@login_manager.user_loader
def load_user(user_id):
    """Load user for Flask-Login"""
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized_json():
    return error_response(ErrorCode.UNAUTHORIZED, "Authentication required", status_code=401)


def roles_required(roles: list, require_all=False):
    def _roles_required(f):
        @wraps(f)
        def decorated_view(*args, **kwargs):
            if not roles:
                raise ValueError("Empty list used when requiring a role.")
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if require_all and not all(current_user.has_role(role) for role in roles):
                raise ForbiddenException()
            elif not require_all and not any(current_user.has_role(role) for role in roles):
                raise ForbiddenException()
            return f(*args, **kwargs)

        return decorated_view

    return _roles_required


def init_user_from_environment(environment_name):
    """
    Create or promote an admin account from environment variables,
    so a fresh install has someone able to manage users
    """
    username = os.getenv(environment_name + "_NAME")
    password = os.getenv(environment_name + "_PASSWORD")
    email = os.getenv(environment_name + "_EMAIL", "admin@example.com")
    if username and password:
        logger.info("Initializing an admin user from environment variable...")
        user_service.create_or_update_admin(username, password, email)


def init_users(app):
    with app.app_context():
        if os.environ.get("USER_ADMIN_NAME") is not None:
            init_user_from_environment(environment_name="USER_ADMIN")


@auth_blueprint.route("/register", methods=["POST"])
def register():
    data = get_json_body()
    user = user_service.register_user(
        data.get("username"),
        data.get("email"),
        data.get("password"),
    )
    login_user(user)
    return success_response(user.to_dict(), status_code=201)


@auth_blueprint.route("/login", methods=["POST"])
def login():
    data = get_json_body()
    user = user_service.authenticate(data.get("username"), data.get("password"))
    login_user(user, remember=bool(data.get("remember", False)))
    logger.info(f"User {user.username} logged in")
    return success_response(user.to_dict())


@auth_blueprint.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return success_response(message="Logged out")
