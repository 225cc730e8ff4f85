"""
CORS handling for the browser frontend.

The request Origin is echoed back only when it is on the configured
allow-list (or the list contains '*'). Methods, headers, credentials and
max-age are always sent. OPTIONS preflights never reach a view.
"""

import logging
from typing import Iterable, Optional

from flask import Flask, request

logger = logging.getLogger(__name__)

ALLOWED_METHODS = 'GET, POST, PUT, DELETE, OPTIONS'
ALLOWED_HEADERS = 'Content-Type, Authorization, X-Requested-With, X-CSRF-TOKEN'
MAX_AGE = '3600'


def is_origin_allowed(origin: Optional[str], allowed_origins: Iterable[str]) -> bool:
    if not origin:
        return False
    allowed = list(allowed_origins)
    return '*' in allowed or origin in allowed


def init_cors(app: Flask) -> None:
    """Register the CORS hooks. Must run before the rate limiter is attached."""

    @app.before_request
    def short_circuit_preflight():
        if request.method == 'OPTIONS':
            # Headers are added by apply_cors_headers on the way out
            return app.response_class('', status=200)
        return None

    @app.after_request
    def apply_cors_headers(response):
        origin = request.headers.get('Origin')
        if is_origin_allowed(origin, app.config.get('ALLOWED_ORIGINS', [])):
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers.add('Vary', 'Origin')
        elif origin:
            logger.debug(f"Origin not in CORS allow-list: {origin}")

        response.headers['Access-Control-Allow-Methods'] = ALLOWED_METHODS
        response.headers['Access-Control-Allow-Headers'] = ALLOWED_HEADERS
        response.headers['Access-Control-Allow-Credentials'] = 'true'
        response.headers['Access-Control-Max-Age'] = MAX_AGE
        return response
