"""
Authentication decorators for route protection.

Cache management, sync and write passthrough routes are guarded by a single
shared API token sent as a bearer token.
"""

from functools import wraps
import hmac
import logging

from flask import current_app, request

from blog_proxy.utils.response_helpers import error_response

logger = logging.getLogger(__name__)


def _bearer_token():
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def require_api_token(f):
    """
    Decorator to require the configured API token.

    Usage:
        @wordpress_bp.route('/cache', methods=['DELETE'])
        @require_api_token
        def clear_cache():
            ...

    Returns 401 when the Authorization header is missing or wrong, and also
    when no API_TOKEN is configured at all.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get('API_TOKEN')
        provided = _bearer_token()

        if not expected:
            logger.warning(f"Protected route {request.path} called but API_TOKEN is not configured")
            return error_response('Authentication required', status=401,
                                  error='API token is not configured', error_code='UNAUTHENTICATED')

        if provided is None or not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning(
                f"Unauthenticated access attempt to {f.__name__} at {request.path} "
                f"from {request.remote_addr}"
            )
            return error_response('Authentication required', status=401,
                                  error='Missing or invalid bearer token', error_code='UNAUTHENTICATED')

        return f(*args, **kwargs)

    return decorated_function
