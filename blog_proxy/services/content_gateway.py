"""
Read-through caching layer between the API routes and the upstream client.

Pure Python - no Flask dependencies. The cache store, upstream client and
clock are all injected.
"""

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from blog_proxy.cache import CacheStore
from blog_proxy.clients.wordpress_client import WordPressClient
from blog_proxy.exceptions import (
    InvalidResponse, NotFound, UpstreamUnavailable
)
from blog_proxy.models import BlogStats, CacheEntry, Post, PostLookup, PostPage, Term
from blog_proxy.services.stats_service import StatsService

logger = logging.getLogger(__name__)

CACHE_PREFIX = 'wordpress'

# API parameter name -> upstream query parameter name
UPSTREAM_POST_PARAMS = {
    'per_page': 'number',
    'page': 'page',
    'categories': 'category',
    'search': 'search',
    'author': 'author',
    'status': 'status',
}

SEARCH_RESULT_LIMIT = 20
STATS_POST_FIELDS = 'ID,title,content,date'


@dataclass
class CacheTTLs:
    """Time-to-live per operation class, in seconds."""
    posts: int = 300
    search: int = 300
    taxonomy: int = 3600
    stats: int = 1800

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'CacheTTLs':
        return cls(
            posts=int(config.get('POSTS_CACHE_TTL', cls.posts)),
            search=int(config.get('SEARCH_CACHE_TTL', cls.search)),
            taxonomy=int(config.get('TAXONOMY_CACHE_TTL', cls.taxonomy)),
            stats=int(config.get('STATS_CACHE_TTL', cls.stats)),
        )


def normalize_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop unset values and stringify the rest so equal queries hash equally."""
    return {str(k): str(v) for k, v in (params or {}).items() if v is not None and v != ''}


def build_cache_key(operation: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Deterministic key from the operation name and its sorted parameter pairs."""
    canonical = json.dumps(sorted(normalize_params(params).items()), separators=(',', ':'))
    digest = hashlib.md5(canonical.encode('utf-8')).hexdigest()
    return f"{CACHE_PREFIX}:{operation}:{digest}"


def _items(payload: Dict[str, Any], field: str) -> List[Dict[str, Any]]:
    items = payload.get(field, [])
    if not isinstance(items, list):
        raise InvalidResponse(f"Upstream field '{field}' is not a list")
    return items


class ContentGateway:
    """
    Decides whether cached content is fresh enough to reuse.

    Every read follows the same shape: build the key, serve an unexpired
    entry without contacting upstream, otherwise fetch, store and return.
    Failures propagate as typed errors and are never stored.
    """

    def __init__(self,
                 client: WordPressClient,
                 store: CacheStore,
                 ttls: Optional[CacheTTLs] = None,
                 clock: Callable[[], float] = time.time,
                 caching_enabled: bool = True,
                 stats_sample_size: int = 100,
                 site_url: Optional[str] = None):
        self.client = client
        self.store = store
        self.ttls = ttls or CacheTTLs()
        self.clock = clock
        self.caching_enabled = caching_enabled
        self.stats_sample_size = stats_sample_size
        self.site_url = site_url

    # --- cache plumbing ---

    def _read(self, key: str) -> Optional[CacheEntry]:
        raw = self.store.get(key)
        if raw is None:
            return None
        entry = CacheEntry.from_dict(raw)
        if entry.is_expired(self.clock()):
            # lazy eviction
            self.store.delete(key)
            return None
        return entry

    def _remember(self, operation: str, params: Optional[Dict[str, Any]], ttl: int,
                  loader: Callable[[], Any]) -> Any:
        """Return the cached value for (operation, params) or load and store it."""
        if not self.caching_enabled:
            return self._load(operation, params, loader)

        key = build_cache_key(operation, params)
        entry = self._read(key)
        if entry is not None:
            logger.debug(f"Cache hit: {operation} {key}")
            return entry.value

        logger.debug(f"Cache miss: {operation} {key}")
        value = self._load(operation, params, loader)
        entry = CacheEntry(key=key, value=value, expires_at=self.clock() + ttl)
        self.store.set(key, entry.to_dict(), ttl)
        return value

    def _load(self, operation: str, params: Optional[Dict[str, Any]], loader: Callable[[], Any]) -> Any:
        try:
            return loader()
        except NotFound:
            raise
        except (UpstreamUnavailable, InvalidResponse) as e:
            status = getattr(e, 'status', None)
            logger.error(
                f"Upstream failure in {operation}: params={normalize_params(params)} "
                f"status={status} error={e}"
            )
            raise

    # --- read operations ---

    def list_posts(self, params: Optional[Dict[str, Any]] = None) -> PostPage:
        params = normalize_params(params)

        def load():
            query = {UPSTREAM_POST_PARAMS[k]: v for k, v in params.items() if k in UPSTREAM_POST_PARAMS}
            payload = self.client.get_posts(query)
            posts = [Post.from_upstream(item) for item in _items(payload, 'posts')]
            found = payload.get('found')
            total = found if isinstance(found, int) else len(posts)
            return PostPage(posts=posts, total=total).to_dict()

        return PostPage.from_dict(self._remember('posts', params, self.ttls.posts, load))

    def get_post(self, post_id: int) -> PostLookup:
        """Absence upstream is a normal result here, not an error. It is not cached."""
        params = {'id': post_id}

        def load():
            return Post.from_upstream(self.client.get_post(post_id)).to_dict()

        try:
            data = self._remember('post', params, self.ttls.posts, load)
        except NotFound:
            logger.info(f"Post {post_id} not found upstream")
            return PostLookup(post=None)
        return PostLookup(post=Post(**data))

    def search_posts(self, query: str) -> List[Post]:
        params = {'q': query}

        def load():
            payload = self.client.get_posts({'search': query, 'number': SEARCH_RESULT_LIMIT})
            return [Post.from_upstream(item).to_dict() for item in _items(payload, 'posts')]

        return [Post(**item) for item in self._remember('search', params, self.ttls.search, load)]

    def list_categories(self) -> List[Term]:
        def load():
            payload = self.client.get_categories()
            return [Term.from_upstream(item).to_dict() for item in _items(payload, 'categories')]

        return [Term(**item) for item in self._remember('categories', None, self.ttls.taxonomy, load)]

    def list_tags(self) -> List[Term]:
        def load():
            payload = self.client.get_tags()
            return [Term.from_upstream(item).to_dict() for item in _items(payload, 'tags')]

        return [Term(**item) for item in self._remember('tags', None, self.ttls.taxonomy, load)]

    def get_blog_stats(self) -> BlogStats:
        def load():
            site = self.client.get_site()
            posts_payload = self.client.get_posts({
                'number': self.stats_sample_size,
                'fields': STATS_POST_FIELDS,
                'order_by': 'date',
                'order': 'DESC',
            })
            posts = [Post.from_upstream(item) for item in _items(posts_payload, 'posts')]
            stats = StatsService.compute(
                site=site,
                posts_payload=posts_payload,
                posts=posts,
                category_count=len(self.list_categories()),
                tag_count=len(self.list_tags()),
                default_site_url=self.site_url,
            )
            return stats.to_dict()

        return BlogStats(**self._remember('stats', None, self.ttls.stats, load))

    def clear_cache(self) -> None:
        """Forget every cached response. Upstream data is untouched."""
        self.store.delete_prefix(CACHE_PREFIX)
        logger.info("WordPress cache cleared")

    # --- write passthrough ---

    def create_post(self, data: Dict[str, Any]) -> Post:
        post = Post.from_upstream(self.client.create_post(data))
        logger.info(f"Created post {post.id} upstream")
        self.clear_cache()
        return post

    def update_post(self, post_id: int, data: Dict[str, Any]) -> Post:
        post = Post.from_upstream(self.client.update_post(post_id, data))
        logger.info(f"Updated post {post_id} upstream")
        self.clear_cache()
        return post

    def delete_post(self, post_id: int) -> Post:
        post = Post.from_upstream(self.client.delete_post(post_id))
        logger.info(f"Deleted post {post_id} upstream")
        self.clear_cache()
        return post

    def sync(self) -> Dict[str, int]:
        """Drop the cache and re-warm the first page of posts and the taxonomies."""
        self.clear_cache()
        page = self.list_posts()
        counts = {
            'posts': len(page.posts),
            'categories': len(self.list_categories()),
            'tags': len(self.list_tags()),
        }
        logger.info(f"Content sync complete: {counts}")
        return counts
