"""
Response helpers for consistent API responses.

Every /wordpress endpoint answers with the same envelope:
    {"success": true, "data": ..., "meta": {...}}
    {"success": false, "message": ..., "error": ...}
"""
from flask import jsonify
from typing import Any, Dict, Optional, Union
import logging

from blog_proxy.exceptions import ValidationError

logger = logging.getLogger(__name__)


def success_response(
    data: Any = None,
    meta: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    status: int = 200
) -> tuple:
    """
    Create a standardized success response.

    Args:
        data: The data payload to return (optional)
        meta: Pagination or query metadata (optional)
        message: Success message to include (optional)
        status: HTTP status code (default: 200)

    Returns:
        Tuple of (response, status_code) suitable for Flask return

    Example:
        return success_response(data=posts, meta={'total': 12, 'page': 1, 'per_page': 10})
    """
    response: Dict[str, Any] = {'success': True}

    if message is not None:
        response['message'] = message

    response['data'] = data

    if meta is not None:
        response['meta'] = meta

    logger.debug(f"Success response: {status} - {message or 'OK'}")
    return jsonify(response), status


def error_response(
    message: str,
    status: int = 500,
    error: Optional[str] = None,
    errors: Optional[Union[Dict, list]] = None,
    error_code: Optional[str] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: Generic, user-facing description (required)
        status: HTTP status code (default: 500)
        error: Underlying error string (optional)
        errors: Per-field validation messages (optional)
        error_code: Machine-readable error code (optional)

    Returns:
        Tuple of (response, status_code) suitable for Flask return

    Common status codes:
        401 - Unauthorized (missing or wrong API token)
        404 - Not Found (upstream confirmed absence)
        422 - Unprocessable Entity (validation errors)
        429 - Too Many Requests
        500 - Upstream failure
        503 - Service Unavailable (missing configuration)
    """
    response: Dict[str, Any] = {
        'success': False,
        'message': message,
    }

    if error is not None:
        response['error'] = error

    if errors is not None:
        response['errors'] = errors

    if error_code is not None:
        response['error_code'] = error_code

    logger.warning(f"Error response: {status} - {message}" + (f" ({error})" if error else ''))
    return jsonify(response), status


def validation_error_response(exc: ValidationError) -> tuple:
    """
    Create a 422 response from a ValidationError.

    Example:
        except ValidationError as e:
            return validation_error_response(e)
    """
    return error_response(
        message=str(exc),
        status=422,
        error='Validation failed',
        errors=exc.errors,
        error_code='VALIDATION_ERROR'
    )


def not_found_response(
    resource: str,
    identifier: Optional[Union[str, int]] = None
) -> tuple:
    """
    Create a standardized "not found" error response.

    Example:
        return not_found_response('Post', post_id)
    """
    error = f'{resource} {identifier} does not exist' if identifier is not None else None
    return error_response(
        message=f'{resource} not found',
        status=404,
        error=error,
        error_code='NOT_FOUND'
    )


def upstream_error_response(message: str, exc: Exception) -> tuple:
    """
    Create a 500 response for any upstream-caused failure.

    The generic message goes first; the underlying error string is kept for
    the frontend's diagnostics panel.
    """
    return error_response(
        message=message,
        status=500,
        error=str(exc),
        error_code='UPSTREAM_ERROR'
    )


def service_unavailable_response(
    service: str,
    message: Optional[str] = None,
    error_code: str = 'SERVICE_UNAVAILABLE'
) -> tuple:
    """
    Create a standardized service unavailable error response.

    Example:
        return service_unavailable_response('WordPress', 'no upstream token configured')
    """
    if message:
        full_message = f'{service} is temporarily unavailable: {message}'
    else:
        full_message = f'{service} is temporarily unavailable'

    return error_response(
        message=full_message,
        status=503,
        error_code=error_code
    )
