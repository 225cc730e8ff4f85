"""
Fixed-window rate limiting per client address.

Flask-Limiter does the counting and injects the X-RateLimit-Limit,
X-RateLimit-Remaining, X-RateLimit-Reset and Retry-After headers; this
module only wires it to the app and shapes the 429 body.
"""

import logging
import time

from flask import Blueprint, Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

logger = logging.getLogger(__name__)

WINDOW = 'minute'
WINDOW_SECONDS = 60
DEFAULT_RETRY_AFTER = 60
# One counter per address across every limited route
LIMIT_SCOPE = 'wordpress-api'


def init_rate_limiting(app: Flask, *blueprints: Blueprint) -> Limiter:
    """
    Attach a limiter to the app and apply the per-minute limit to the given blueprints.

    Routes outside those blueprints (health, config) are not limited.
    """
    per_window = int(app.config.get('RATE_LIMIT_PER_MINUTE', 60))

    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        storage_uri=app.config.get('RATELIMIT_STORAGE_URI', 'memory://'),
        strategy='fixed-window',
        headers_enabled=True,
    )

    for blueprint in blueprints:
        limiter.shared_limit(f"{per_window} per {WINDOW}", scope=LIMIT_SCOPE)(blueprint)

    @app.errorhandler(429)
    def rate_limit_exceeded(e):
        current = limiter.current_limit
        if current is not None:
            # reset_at is already rounded up to the next whole second
            retry_after = int(current.reset_at - time.time())
            retry_after = min(max(retry_after, 1), WINDOW_SECONDS)
        else:
            retry_after = DEFAULT_RETRY_AFTER

        logger.warning(f"Rate limit exceeded: {get_remote_address()} retry_after={retry_after}s")
        response = jsonify({
            'success': False,
            'error': 'Too many requests',
            'message': f'Rate limit exceeded. Try again in {retry_after} seconds.',
            'retry_after': retry_after,
        })
        return response, 429

    # Store limiter in app for use in routes
    app.limiter = limiter
    logger.info(f"Rate limiting configured: {per_window} per {WINDOW}")
    return limiter
