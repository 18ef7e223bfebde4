"""
Service layer for accounts: registration, credential checks, profile and
password changes, deletion and the admin-only role management
"""
import logging
import re

from werkzeug.security import check_password_hash, generate_password_hash

from release_tracker.exceptions import (
    AuthenticationException,
    DuplicateResourceException,
    NotFoundException,
    ValidationException,
)
from release_tracker.models.role import Role
from release_tracker.repositories.user_repository import UserRepository

logger = logging.getLogger("main")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8


def _validate_username(username):
    if not username or len(username) > 50:
        raise ValidationException("Username is required and must be at most 50 characters")


def _validate_email(email):
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationException("A valid email address is required")


def _validate_password(password):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def get_user_by_id(user_id):
    user = UserRepository.get_by_id(user_id)
    if user is None:
        raise NotFoundException(f"User not found with id: {user_id}")
    return user


def get_user_by_username(username):
    user = UserRepository.get_by_username(username)
    if user is None:
        raise NotFoundException(f"User not found with username: {username}")
    return user


def get_all_users():
    return UserRepository.get_all()


def register_user(username, email, password, role=Role.ROLE_USER):
    _validate_username(username)
    _validate_email(email)
    _validate_password(password)

    if UserRepository.get_by_username(username):
        raise DuplicateResourceException(f"Username '{username}' is already taken")
    if UserRepository.get_by_email(email):
        raise DuplicateResourceException(f"Email '{email}' is already registered")

    user = UserRepository.create(
        username=username,
        email=email,
        password=generate_password_hash(password),
        role=role,
    )
    logger.info(f"Registered user {username}")
    return user


def authenticate(username, password):
    user = UserRepository.get_by_username(username)
    if user is None or not check_password_hash(user.password, password or ""):
        # Same message for unknown user and bad password
        raise AuthenticationException("Invalid username or password")
    return user


def update_profile(user_id, enable_notifications=None, email=None, username=None):
    user = get_user_by_id(user_id)

    changes = {}
    if enable_notifications is not None:
        if not isinstance(enable_notifications, bool):
            raise ValidationException("enable_notifications must be a boolean")
        changes["enable_notifications"] = enable_notifications
    if email is not None and email != user.email:
        _validate_email(email)
        if UserRepository.get_by_email(email):
            raise DuplicateResourceException(f"Email '{email}' is already registered")
        changes["email"] = email
    if username is not None and username != user.username:
        _validate_username(username)
        if UserRepository.get_by_username(username):
            raise DuplicateResourceException(f"Username '{username}' is already taken")
        changes["username"] = username

    return UserRepository.update(user_id, **changes)


def update_password(user_id, old_password, new_password, confirm_password):
    user = get_user_by_id(user_id)
    if not check_password_hash(user.password, old_password or ""):
        raise ValidationException("Incorrect current password.")
    if new_password != confirm_password:
        raise ValidationException("New passwords do not match.")
    _validate_password(new_password)

    UserRepository.update(user_id, password=generate_password_hash(new_password))
    logger.info(f"Password changed for user {user.username}")


def delete_user(user_id):
    user = get_user_by_id(user_id)
    UserRepository.delete(user)
    logger.info(f"Deleted user {user_id}")


def update_user_role(user_id, role_name):
    user = get_user_by_id(user_id)
    try:
        role = Role(role_name)
    except ValueError:
        raise ValidationException(f"Unknown role '{role_name}'")
    return UserRepository.update(user.id, role=role)


def create_or_update_admin(username, password, email):
    """Make sure an admin account with these credentials exists"""
    user = UserRepository.get_by_username(username)
    hashed_pw = generate_password_hash(password)
    if user:
        logger.info(f"Updating existing admin {username}")
        return UserRepository.update(user.id, password=hashed_pw, role=Role.ROLE_ADMIN)

    logger.info(f"Creating admin user {username}")
    return UserRepository.create(username=username, email=email, password=hashed_pw, role=Role.ROLE_ADMIN)
