from flask import Blueprint, current_app, jsonify, url_for
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return jsonify({
        'message': f"{current_app.config.get('APP_NAME', 'Blog Proxy')} API",
        'version': current_app.config.get('APP_VERSION'),
        'endpoints': {
            'health': url_for('main.health_check', _external=True),
            'config': url_for('main.public_config', _external=True),
            'wordpress': url_for('main.index', _external=True) + 'wordpress',
        }
    })


@main_bp.route('/health')
def health_check():
    """Health check endpoint for Docker and load balancers."""
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'version': current_app.config.get('APP_VERSION'),
        'environment': current_app.config.get('ENVIRONMENT'),
    }), 200


@main_bp.route('/config')
def public_config():
    """Configuration the frontend may see. Tokens are never echoed."""
    config = current_app.config
    return jsonify({
        'wordpress_api_url': config.get('WORDPRESS_API_URL'),
        'site_url': config.get('WORDPRESS_SITE_URL'),
        'cache_enabled': config.get('ENABLE_CACHING'),
        'sync_enabled': config.get('SYNC_ENABLED'),
        'rate_limit_per_minute': config.get('RATE_LIMIT_PER_MINUTE'),
        'cache_ttl': {
            'posts': config.get('POSTS_CACHE_TTL'),
            'search': config.get('SEARCH_CACHE_TTL'),
            'taxonomy': config.get('TAXONOMY_CACHE_TTL'),
            'stats': config.get('STATS_CACHE_TTL'),
        },
    })
