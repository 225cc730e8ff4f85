"""
/wordpress API routes.

HTTP-shape translation only: validate, call the gateway, wrap the result in
the response envelope. Absence maps to 404, bad input to 422 and every other
upstream failure to 500.
"""

from functools import wraps
import logging

from flask import Blueprint, current_app, request

from blog_proxy.decorators import require_api_token
from blog_proxy.exceptions import (
    CacheUnavailable, ConfigurationError, InvalidResponse, NotFound, UpstreamUnavailable,
    ValidationError
)
from blog_proxy.services.content_gateway import ContentGateway
from blog_proxy.utils.response_helpers import (
    error_response, not_found_response, service_unavailable_response,
    success_response, upstream_error_response, validation_error_response
)
from blog_proxy.validation import (
    validate_post_payload, validate_post_query, validate_search_query
)

logger = logging.getLogger(__name__)

wordpress_bp = Blueprint('wordpress', __name__, url_prefix='/wordpress')

DEFAULT_PER_PAGE = 10


def get_gateway() -> ContentGateway:
    return current_app.extensions['content_gateway']


def gateway_errors(failure_message):
    """Translate gateway exceptions into envelopes. failure_message is the generic 500 text."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                return validation_error_response(e)
            except NotFound as e:
                return error_response('Resource not found', status=404, error=str(e), error_code='NOT_FOUND')
            except ConfigurationError as e:
                return service_unavailable_response('WordPress', str(e), error_code='UPSTREAM_AUTH_MISSING')
            except (UpstreamUnavailable, InvalidResponse) as e:
                return upstream_error_response(failure_message, e)
            except CacheUnavailable as e:
                return error_response(failure_message, status=500, error=str(e), error_code='CACHE_ERROR')
        return decorated_function
    return decorator


# --- Public read routes ---

@wordpress_bp.route('/posts', methods=['GET'])
@gateway_errors('Failed to fetch posts')
def get_posts():
    """List posts with optional filtering and pagination."""
    params = validate_post_query(request.args)
    page = get_gateway().list_posts(params)

    return success_response(
        data=[post.to_dict() for post in page.posts],
        meta={
            'total': page.total,
            'page': params.get('page', 1),
            'per_page': params.get('per_page', DEFAULT_PER_PAGE),
        }
    )


@wordpress_bp.route('/posts/<int:post_id>', methods=['GET'])
@gateway_errors('Failed to fetch post')
def get_post(post_id):
    lookup = get_gateway().get_post(post_id)
    if not lookup.found:
        return not_found_response('Post', post_id)
    return success_response(data=lookup.post.to_dict())


@wordpress_bp.route('/search', methods=['GET'])
@gateway_errors('Search failed')
def search_posts():
    query = validate_search_query(request.args)
    results = get_gateway().search_posts(query)

    return success_response(
        data=[post.to_dict() for post in results],
        meta={'query': query, 'total': len(results)}
    )


@wordpress_bp.route('/categories', methods=['GET'])
@gateway_errors('Failed to fetch categories')
def get_categories():
    categories = get_gateway().list_categories()
    return success_response(data=[category.to_dict() for category in categories])


@wordpress_bp.route('/tags', methods=['GET'])
@gateway_errors('Failed to fetch tags')
def get_tags():
    tags = get_gateway().list_tags()
    return success_response(data=[tag.to_dict() for tag in tags])


@wordpress_bp.route('/stats', methods=['GET'])
@gateway_errors('Failed to fetch statistics')
def get_stats():
    stats = get_gateway().get_blog_stats()
    return success_response(data=stats.to_dict())


# --- Protected routes ---

@wordpress_bp.route('/posts', methods=['POST'])
@require_api_token
@gateway_errors('Failed to create post')
def create_post():
    payload = validate_post_payload(request.get_json(silent=True))
    post = get_gateway().create_post(payload)
    return success_response(data=post.to_dict(), message='Post created', status=201)


@wordpress_bp.route('/posts/<int:post_id>', methods=['PUT'])
@require_api_token
@gateway_errors('Failed to update post')
def update_post(post_id):
    payload = validate_post_payload(request.get_json(silent=True), partial=True)
    post = get_gateway().update_post(post_id, payload)
    return success_response(data=post.to_dict(), message='Post updated')


@wordpress_bp.route('/posts/<int:post_id>', methods=['DELETE'])
@require_api_token
@gateway_errors('Failed to delete post')
def delete_post(post_id):
    post = get_gateway().delete_post(post_id)
    return success_response(data=post.to_dict(), message='Post deleted')


@wordpress_bp.route('/sync', methods=['POST'])
@require_api_token
@gateway_errors('Content sync failed')
def sync_content():
    if not current_app.config.get('SYNC_ENABLED', True):
        return error_response('Content sync is disabled', status=409, error_code='SYNC_DISABLED')

    counts = get_gateway().sync()
    return success_response(data=counts, message='Content synchronized')


@wordpress_bp.route('/cache', methods=['DELETE'])
@require_api_token
@gateway_errors('Failed to clear cache')
def clear_cache():
    get_gateway().clear_cache()
    logger.info(f"Cache cleared via API by {request.remote_addr}")
    return success_response(data=None, message='Cache cleared successfully')
