"""
API Response Utilities - Standardized success and paged responses
"""

from flask import jsonify, request

from release_tracker.exceptions import ValidationException


class ErrorCode:
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"


def success_response(data=None, message=None, status_code=200):
    """
    Standard success response format for API endpoints
    """
    response = {"code": ErrorCode.SUCCESS, "success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return jsonify(response), status_code


def error_response(error_code, message, status_code=400):
    return jsonify({"error": True, "code": error_code, "message": message}), status_code


def paginated_response(items, total, page, per_page):
    """
    Standard paginated response format for list endpoints
    """
    has_more = page * per_page < total
    return jsonify({
        "code": ErrorCode.SUCCESS,
        "success": True,
        "data": items,
        "pagination": {
            "total": total,
            "page": page,
            "per_page": per_page,
            "total_pages": (total + per_page - 1) // per_page,
            "has_more": has_more,
            "next_page": page + 1 if has_more else None,
            "prev_page": page - 1 if page > 1 else None,
        },
    }), 200


def get_json_body():
    """Request JSON object, or a validation error"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    return data


def get_int_arg(name, default, minimum=1, maximum=None):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationException(f"Query parameter '{name}' must be an integer")
    if value < minimum or (maximum is not None and value > maximum):
        raise ValidationException(f"Query parameter '{name}' is out of range")
    return value
