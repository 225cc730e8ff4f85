"""
Tests for the upstream WordPress client.

The requests session is replaced with a mock, so no network is used.
"""

import pytest
import requests
from unittest.mock import MagicMock

from blog_proxy.clients.wordpress_client import WordPressClient
from blog_proxy.exceptions import (
    ConfigurationError, InvalidResponse, NotFound, UpstreamUnavailable
)

BASE_URL = 'https://public-api.wordpress.com/rest/v1.1/sites/example.blog'


def _response(status=200, payload=None, text=None):
    response = MagicMock()
    response.status_code = status
    if text is not None:
        response.text = text
        response.json.side_effect = ValueError('No JSON object could be decoded')
    else:
        response.text = str(payload)
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return WordPressClient(BASE_URL + '/', timeout=30, auth_token='secret', session=session)


class TestRequests:
    """Tests for URL building and request options"""

    def test_posts_url_and_defaults(self, client, session):
        session.request.return_value = _response(payload={'found': 0, 'posts': []})

        client.get_posts({'number': 5})

        kwargs = session.request.call_args.kwargs
        assert kwargs['method'] == 'GET'
        assert kwargs['url'] == BASE_URL + '/posts'
        assert kwargs['params']['number'] == 5
        assert 'fields' in kwargs['params']
        assert kwargs['timeout'] == 30

    def test_site_url_is_base(self, client, session):
        session.request.return_value = _response(payload={'name': 'Example'})

        assert client.get_site() == {'name': 'Example'}
        assert session.request.call_args.kwargs['url'] == BASE_URL

    def test_single_post_url(self, client, session):
        session.request.return_value = _response(payload={'ID': 5})

        client.get_post(5)
        assert session.request.call_args.kwargs['url'] == BASE_URL + '/posts/5'

    def test_taxonomies_request_one_hundred(self, client, session):
        session.request.return_value = _response(payload={'categories': []})

        client.get_categories()
        assert session.request.call_args.kwargs['params'] == {'number': 100}

    def test_read_requests_are_unauthenticated(self, client, session):
        session.request.return_value = _response(payload={'tags': []})

        client.get_tags()
        assert 'Authorization' not in session.request.call_args.kwargs['headers']


class TestErrorTranslation:
    """Tests for transport and status translation"""

    def test_timeout(self, client, session):
        session.request.side_effect = requests.exceptions.Timeout('read timed out')

        with pytest.raises(UpstreamUnavailable) as exc_info:
            client.get_posts()
        assert 'timed out' in str(exc_info.value)

    def test_connection_error(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError('refused')

        with pytest.raises(UpstreamUnavailable):
            client.get_site()

    def test_not_retried(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError('refused')

        with pytest.raises(UpstreamUnavailable):
            client.get_posts()
        assert session.request.call_count == 1

    def test_404_is_not_found(self, client, session):
        session.request.return_value = _response(status=404, payload={'error': 'unknown_post'})

        with pytest.raises(NotFound):
            client.get_post(12345)

    def test_server_error_carries_status(self, client, session):
        session.request.return_value = _response(status=503, payload={'error': 'down'})

        with pytest.raises(UpstreamUnavailable) as exc_info:
            client.get_posts()
        assert exc_info.value.status == 503

    def test_forbidden_is_unavailable(self, client, session):
        session.request.return_value = _response(status=403, payload={'error': 'unauthorized'})

        with pytest.raises(UpstreamUnavailable) as exc_info:
            client.create_post({'title': 'x'})
        assert exc_info.value.status == 403

    def test_non_json_body(self, client, session):
        session.request.return_value = _response(text='<html>maintenance</html>')

        with pytest.raises(InvalidResponse):
            client.get_posts()

    def test_json_array_body(self, client, session):
        session.request.return_value = _response(payload=[1, 2, 3])

        with pytest.raises(InvalidResponse):
            client.get_posts()


class TestWrites:
    """Tests for authenticated write calls"""

    def test_create_sends_bearer_token(self, client, session):
        session.request.return_value = _response(payload={'ID': 1})

        client.create_post({'title': 'Hello'})

        kwargs = session.request.call_args.kwargs
        assert kwargs['method'] == 'POST'
        assert kwargs['url'] == BASE_URL + '/posts/new'
        assert kwargs['json'] == {'title': 'Hello'}
        assert kwargs['headers']['Authorization'] == 'Bearer secret'

    def test_update_and_delete_urls(self, client, session):
        session.request.return_value = _response(payload={'ID': 4})

        client.update_post(4, {'title': 'New'})
        assert session.request.call_args.kwargs['url'] == BASE_URL + '/posts/4'

        client.delete_post(4)
        assert session.request.call_args.kwargs['url'] == BASE_URL + '/posts/4/delete'

    def test_write_without_token(self, session):
        client = WordPressClient(BASE_URL, session=session)

        with pytest.raises(ConfigurationError):
            client.create_post({'title': 'Hello'})
        session.request.assert_not_called()
