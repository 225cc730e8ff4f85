"""
Tests for the content gateway.

Uses an in-memory store, a fake upstream client and a controllable clock so
cache hits, expiry and invalidation can be asserted by counting upstream calls.
"""

import pytest

from blog_proxy.exceptions import InvalidResponse, UpstreamUnavailable
from blog_proxy.services.content_gateway import (
    CacheTTLs, ContentGateway, build_cache_key, normalize_params
)
from tests.fakes import FakeClock, FakeWordPressClient, InMemoryCacheStore, make_post


@pytest.fixture
def client():
    return FakeWordPressClient()


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway(client, store, clock):
    return ContentGateway(client=client, store=store, ttls=CacheTTLs(), clock=clock)


class TestCacheKeys:
    """Tests for cache key construction"""

    def test_key_ignores_parameter_order(self):
        first = build_cache_key('posts', {'page': 2, 'per_page': 10})
        second = build_cache_key('posts', {'per_page': 10, 'page': 2})
        assert first == second

    def test_key_differs_by_operation(self):
        assert build_cache_key('posts', {'q': 'ab'}) != build_cache_key('search', {'q': 'ab'})

    def test_key_differs_by_parameters(self):
        assert build_cache_key('posts', {'page': 1}) != build_cache_key('posts', {'page': 2})

    def test_unset_values_are_dropped(self):
        assert build_cache_key('posts', {'page': 1, 'search': None}) == build_cache_key('posts', {'page': 1})

    def test_int_and_string_values_normalize_equal(self):
        assert normalize_params({'page': 1}) == normalize_params({'page': '1'})

    def test_key_is_namespaced(self):
        assert build_cache_key('tags').startswith('wordpress:tags:')


class TestReadThrough:
    """Tests for the cache hit / miss / expiry cycle"""

    def test_second_call_within_ttl_hits_cache(self, gateway, client):
        first = gateway.list_posts({'page': 1})
        second = gateway.list_posts({'page': 1})

        assert client.count('get_posts') == 1
        assert first == second

    def test_different_parameters_miss(self, gateway, client):
        gateway.list_posts({'page': 1})
        gateway.list_posts({'page': 2})
        assert client.count('get_posts') == 2

    def test_expired_entry_is_refetched_once(self, gateway, client, clock):
        gateway.list_categories()
        clock.advance(3600)  # taxonomy TTL reached
        gateway.list_categories()
        gateway.list_categories()

        assert client.count('get_categories') == 2

    def test_entry_just_before_expiry_is_served(self, gateway, client, clock):
        gateway.list_tags()
        clock.advance(3599)
        gateway.list_tags()
        assert client.count('get_tags') == 1

    def test_expired_entry_is_evicted_on_read(self, gateway, store, clock):
        gateway.search_posts('flask')
        key = build_cache_key('search', {'q': 'flask'})
        assert key in store.data

        clock.advance(301)
        # re-read stores a fresh entry with a new expiry
        gateway.search_posts('flask')
        assert store.data[key]['expires_at'] == clock.now + 300

    def test_posts_ttl_is_five_minutes(self, gateway, client, clock):
        gateway.list_posts()
        clock.advance(299)
        gateway.list_posts()
        clock.advance(1)
        gateway.list_posts()
        assert client.count('get_posts') == 2

    def test_configured_ttls_are_used(self, client, store, clock):
        gateway = ContentGateway(client=client, store=store, ttls=CacheTTLs(posts=10), clock=clock)
        gateway.list_posts()
        clock.advance(10)
        gateway.list_posts()
        assert client.count('get_posts') == 2

    def test_caching_disabled_always_goes_upstream(self, client, store, clock):
        gateway = ContentGateway(client=client, store=store, clock=clock, caching_enabled=False)
        gateway.list_tags()
        gateway.list_tags()

        assert client.count('get_tags') == 2
        assert store.data == {}

    def test_cached_posts_are_rebuilt_as_models(self, gateway):
        gateway.list_posts()
        page = gateway.list_posts()

        assert page.total == 2
        assert [post.id for post in page.posts] == [1, 2]
        assert page.posts[0].categories == [3]
        assert page.posts[0].tags == [11, 12]


class TestFailures:
    """Tests for error propagation"""

    def test_failure_is_not_cached(self, gateway, client, store):
        client.failures['get_categories'] = UpstreamUnavailable('Upstream returned HTTP 502', status=502)

        with pytest.raises(UpstreamUnavailable):
            gateway.list_categories()
        assert store.data == {}

        del client.failures['get_categories']
        categories = gateway.list_categories()
        assert len(categories) == 2
        assert client.count('get_categories') == 2

    def test_malformed_list_is_invalid_response(self, gateway, client):
        client.get_tags = lambda: {'tags': 'not-a-list'}
        with pytest.raises(InvalidResponse):
            gateway.list_tags()

    def test_post_without_id_is_invalid_response(self, gateway, client):
        client.posts = [{'title': 'no id'}]
        with pytest.raises(InvalidResponse):
            gateway.list_posts()


class TestGetPost:
    """Tests for single post lookup"""

    def test_found(self, gateway):
        lookup = gateway.get_post(1)
        assert lookup.found is True
        assert lookup.post.id == 1
        assert lookup.post.title == 'Post 1'

    def test_upstream_404_is_not_found_result(self, gateway):
        lookup = gateway.get_post(404)
        assert lookup.found is False
        assert lookup.post is None

    def test_not_found_is_not_cached(self, gateway, client):
        gateway.get_post(404)
        gateway.get_post(404)
        assert client.count('get_post') == 2

    def test_found_post_is_cached(self, gateway, client):
        gateway.get_post(1)
        gateway.get_post(1)
        assert client.count('get_post') == 1

    def test_upstream_failure_still_raises(self, gateway, client):
        client.failures['get_post'] = UpstreamUnavailable('Upstream request timed out after 30s')
        with pytest.raises(UpstreamUnavailable):
            gateway.get_post(1)


class TestSearch:
    """Tests for search"""

    def test_search_passes_query_upstream(self, gateway, client):
        results = gateway.search_posts('flask')

        assert len(results) == 2
        name, params = client.calls[0]
        assert name == 'get_posts'
        assert params['search'] == 'flask'
        assert params['number'] == 20

    def test_list_posts_translates_parameter_names(self, gateway, client):
        gateway.list_posts({'per_page': 5, 'page': 2, 'categories': 'news', 'author': 7, 'status': 'publish'})

        _, params = client.calls[0]
        assert params == {'number': '5', 'page': '2', 'category': 'news', 'author': '7', 'status': 'publish'}


class TestClearCache:
    """Tests for invalidation"""

    def test_clear_forces_fresh_upstream_call(self, gateway, client):
        gateway.list_posts()
        gateway.clear_cache()
        gateway.list_posts()
        assert client.count('get_posts') == 2

    def test_clear_removes_every_entry(self, gateway, store):
        gateway.list_posts()
        gateway.list_categories()
        gateway.list_tags()
        assert len(store.data) == 3

        gateway.clear_cache()
        assert store.data == {}


class TestBlogStats:
    """Tests for the composite stats operation"""

    def test_stats_composition(self, gateway, client):
        client.posts = [
            make_post(1, words=10, date='2024-01-01T00:00:00+00:00'),
            make_post(2, words=20, date='2024-03-01T00:00:00+00:00'),
            make_post(3, words=30, date='2024-02-01T00:00:00+00:00'),
        ]

        stats = gateway.get_blog_stats()

        assert stats.average_post_length == 20
        assert stats.total_posts == 3
        assert stats.total_categories == 2
        assert stats.total_tags == 1
        assert stats.last_post_date == '2024-03-01T00:00:00+00:00'
        assert stats.site_name == 'Example Blog'
        assert stats.site_url == 'https://example.blog'

    def test_stats_prefers_upstream_total(self, gateway, client):
        client.site['post_count'] = 250
        assert gateway.get_blog_stats().total_posts == 250

    def test_stats_requests_sample(self, client, store, clock):
        gateway = ContentGateway(client=client, store=store, clock=clock, stats_sample_size=100)
        gateway.get_blog_stats()

        posts_call = next(call for call in client.calls if call[0] == 'get_posts')
        assert posts_call[1]['number'] == 100
        assert client.count('get_site') == 1

    def test_stats_reuses_taxonomy_cache(self, gateway, client):
        gateway.list_categories()
        gateway.list_tags()
        gateway.get_blog_stats()

        assert client.count('get_categories') == 1
        assert client.count('get_tags') == 1

    def test_stats_cached_for_thirty_minutes(self, gateway, client, clock):
        gateway.get_blog_stats()
        clock.advance(1799)
        gateway.get_blog_stats()
        assert client.count('get_site') == 1

        clock.advance(1)
        gateway.get_blog_stats()
        assert client.count('get_site') == 2

    def test_stats_site_url_falls_back_to_config(self, client, store, clock):
        client.site = {}
        gateway = ContentGateway(client=client, store=store, clock=clock, site_url='https://fallback.blog')

        stats = gateway.get_blog_stats()
        assert stats.site_url == 'https://fallback.blog'
        assert stats.site_name == 'WordPress Site'


class TestWritePassthrough:
    """Tests for create / update / delete and sync"""

    def test_create_clears_cache(self, gateway, client, store):
        gateway.list_posts()
        post = gateway.create_post({'title': 'Hello'})

        assert post.id == 99
        assert post.title == 'Hello'
        assert store.data == {}

    def test_update_clears_cache(self, gateway, client):
        gateway.list_posts()
        post = gateway.update_post(1, {'title': 'Renamed'})
        gateway.list_posts()

        assert post.title == 'Renamed'
        assert client.count('get_posts') == 2

    def test_delete_returns_post(self, gateway):
        assert gateway.delete_post(2).id == 2

    def test_sync_rewarms_cache(self, gateway, client, store):
        counts = gateway.sync()

        assert counts == {'posts': 2, 'categories': 2, 'tags': 1}
        gateway.list_posts()
        gateway.list_categories()
        assert client.count('get_posts') == 1
        assert client.count('get_categories') == 1
