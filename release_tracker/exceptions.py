"""
Release Tracker - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger('exceptions')


class ReleaseTrackerException(Exception):
    """Base exception for Release Tracker"""
    status_code = 400

    def __init__(self, message: str, code: str = "RELEASE_TRACKER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'error': True,
            'code': self.code,
            'message': self.message
        }


class NotFoundException(ReleaseTrackerException):
    """Resource does not exist, or is not visible to the caller"""
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, code="NOT_FOUND")


class DuplicateResourceException(ReleaseTrackerException):
    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class DatabaseException(ReleaseTrackerException):
    """Database-related exceptions"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="DATABASE_ERROR")
        logger.error(f"Database error: {message}")


class ValidationException(ReleaseTrackerException):
    """Validation-related exceptions"""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")
        logger.warning(f"Validation error: {message}")


class AuthenticationException(ReleaseTrackerException):
    """Authentication-related exceptions"""
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTH_ERROR")
        logger.warning(f"Authentication error: {message}")


class ForbiddenException(ReleaseTrackerException):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")
        logger.warning(f"Forbidden: {message}")


class CatalogAPIException(Exception):
    """Base exception for external catalog API errors"""

    def __init__(self, message: str, status_code: int = None, body: str = None):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class CatalogClientError(CatalogAPIException):
    """4xx response from the catalog API"""
    pass


class CatalogServerError(CatalogAPIException):
    """5xx response from the catalog API"""
    pass


class CatalogTransportError(CatalogAPIException):
    """Connection failure, timeout or unparseable response"""
    pass


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({
            'error': True,
            'code': e.name.upper().replace(' ', '_'),
            'message': e.description
        }), e.code

    @app.errorhandler(ReleaseTrackerException)
    def handle_release_tracker_exception(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        from release_tracker.db import db
        db.session.rollback()
        logger.error(f"Unhandled database error: {e}", exc_info=True)
        error = DatabaseException("A database error occurred")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'error': True,
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred'
        }), 500
