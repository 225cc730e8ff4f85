from flask import Flask
import logging
import os

from blog_proxy.cache import cache, CacheStore, FlaskCacheStore
from blog_proxy.clients.wordpress_client import WordPressClient
from blog_proxy.exceptions import BlogProxyError
from blog_proxy.services.content_gateway import CacheTTLs, ContentGateway
from blog_proxy.utils.response_helpers import error_response

logger = logging.getLogger(__name__)


def create_app(config_name=None, config_overrides=None, upstream_client=None,
               cache_store: CacheStore = None, clock=None):
    """
    Build the application.

    Args:
        config_name: Key into config.config; defaults to FLASK_ENV
        config_overrides: Dict applied on top of the config class
        upstream_client: Replaces the WordPressClient built from config
        cache_store: Replaces the Flask-Caching backed store
        clock: Time source for cache expiry, defaults to time.time
    """
    app = Flask(__name__)

    # Load configuration from config.py
    from config import config

    # Determine config name from environment or parameter
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Load the appropriate configuration
    app.config.from_object(config.get(config_name, config['development']))
    app.config['ENVIRONMENT'] = config_name
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))
    logger.info(f"Creating app with '{config_name}' configuration")

    # Add security headers with Flask-Talisman (production only)
    if config_name == 'production':
        from flask_talisman import Talisman

        # JSON only: nothing is rendered, so nothing needs to be loaded
        csp = {
            'default-src': "'none'",
            'frame-ancestors': "'none'"
        }

        Talisman(
            app,
            force_https=app.config.get('FORCE_HTTPS', True),
            strict_transport_security=True,
            strict_transport_security_max_age=31536000,  # 1 year
            content_security_policy=csp,
            referrer_policy='strict-origin-when-cross-origin'
        )
        logger.info("Security headers configured with Flask-Talisman")

    cache.init_app(app)

    client = upstream_client or WordPressClient(
        base_url=app.config['WORDPRESS_API_URL'],
        timeout=app.config['WORDPRESS_API_TIMEOUT'],
        auth_token=app.config.get('WORDPRESS_JWT_TOKEN'),
    )
    gateway_options = {}
    if clock is not None:
        gateway_options['clock'] = clock
    app.extensions['content_gateway'] = ContentGateway(
        client=client,
        store=cache_store or FlaskCacheStore(cache),
        ttls=CacheTTLs.from_config(app.config),
        caching_enabled=app.config.get('ENABLE_CACHING', True),
        stats_sample_size=app.config.get('WORDPRESS_MAX_POSTS', 100),
        site_url=app.config.get('WORDPRESS_SITE_URL'),
        **gateway_options
    )

    # CORS hooks go first so preflights are answered before rate limiting
    from blog_proxy.middleware import init_cors, init_rate_limiting
    init_cors(app)

    # Register blueprints
    from blog_proxy.routes.main_routes import main_bp
    app.register_blueprint(main_bp)

    from blog_proxy.routes.wordpress_routes import wordpress_bp
    app.register_blueprint(wordpress_bp)

    if app.config.get('RATELIMIT_ENABLED', True):
        init_rate_limiting(app, wordpress_bp)

    @app.errorhandler(404)
    def not_found(e):
        return error_response('Resource not found', status=404, error_code='NOT_FOUND')

    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response('Method not allowed', status=405, error_code='METHOD_NOT_ALLOWED')

    @app.errorhandler(BlogProxyError)
    def unhandled_proxy_error(e):
        logger.error(f"Unhandled {e.__class__.__name__}: {e}")
        return error_response('Request failed', status=500, error=str(e))

    return app
