import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name, default):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default):
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    """Base configuration class."""
    APP_NAME = 'Blog Proxy'
    APP_VERSION = os.environ.get('APP_VERSION', '1.0.0')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Upstream content API
    WORDPRESS_API_URL = os.environ.get(
        'WORDPRESS_API_URL',
        'https://public-api.wordpress.com/rest/v1.1/sites/jcreforme.home.blog'
    )
    WORDPRESS_SITE_URL = os.environ.get('WORDPRESS_SITE_URL', 'https://jcreforme.home.blog')
    WORDPRESS_JWT_TOKEN = os.environ.get('WORDPRESS_JWT_TOKEN')
    if WORDPRESS_JWT_TOKEN in ['CHANGE_THIS_TOKEN', 'your-jwt-token']:
        raise ValueError("WORDPRESS_JWT_TOKEN must be changed from the default placeholder value")
    WORDPRESS_API_TIMEOUT = int(os.environ.get('WORDPRESS_API_TIMEOUT', '30'))  # seconds
    WORDPRESS_MAX_POSTS = int(os.environ.get('WORDPRESS_MAX_POSTS', '100'))  # sample size for stats

    # Cache settings (configurable via environment variables)
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', '300'))  # 5 minutes default
    CACHE_REDIS_URL = os.environ.get('CACHE_REDIS_URL')
    ENABLE_CACHING = _env_bool('ENABLE_CACHING', 'true')
    POSTS_CACHE_TTL = int(os.environ.get('POSTS_CACHE_TTL', '300'))
    SEARCH_CACHE_TTL = int(os.environ.get('SEARCH_CACHE_TTL', '300'))
    TAXONOMY_CACHE_TTL = int(os.environ.get('TAXONOMY_CACHE_TTL', '3600'))  # categories and tags
    STATS_CACHE_TTL = int(os.environ.get('STATS_CACHE_TTL', '1800'))

    # Content sync
    SYNC_ENABLED = _env_bool('SYNC_ENABLED', 'true')

    # Edge settings
    ALLOWED_ORIGINS = _env_list('ALLOWED_ORIGINS', 'http://localhost:3000')
    RATE_LIMIT_PER_MINUTE = int(os.environ.get('RATE_LIMIT_PER_MINUTE', '60'))
    RATELIMIT_ENABLED = _env_bool('RATELIMIT_ENABLED', 'true')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Token required by the cache, sync and write routes
    API_TOKEN = os.environ.get('API_TOKEN')

    DEBUG = False
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    CACHE_TYPE = 'SimpleCache'
    ENABLE_CACHING = True
    SYNC_ENABLED = True
    ALLOWED_ORIGINS = ['http://localhost:3000']
    RATE_LIMIT_PER_MINUTE = 60
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = 'memory://'
    API_TOKEN = 'test-api-token'
    WORDPRESS_API_URL = 'https://public-api.wordpress.com/rest/v1.1/sites/example.blog'
    WORDPRESS_SITE_URL = 'https://example.blog'
    WORDPRESS_JWT_TOKEN = 'test-upstream-token'


class ProductionConfig(Config):
    """Production configuration."""
    # Explicitly disable debug mode in production
    DEBUG = False

    # HTTPS is normally terminated by the reverse proxy in front of gunicorn
    FORCE_HTTPS = _env_bool('FORCE_HTTPS', 'true')


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
