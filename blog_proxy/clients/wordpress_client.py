"""
HTTP client for the upstream WordPress REST API.

Every transport problem leaves this module as one of the typed errors in
blog_proxy.exceptions. Requests are never retried here.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

from blog_proxy.exceptions import (
    ConfigurationError, InvalidResponse, NotFound, UpstreamUnavailable
)

logger = logging.getLogger(__name__)

POST_FIELDS = 'ID,title,content,excerpt,date,URL,author,categories,tags,featured_image'


class WordPressClient:
    """Thin wrapper over a requests.Session bound to one upstream site."""

    def __init__(self,
                 base_url: str,
                 timeout: int = 30,
                 auth_token: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.auth_token = auth_token
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'blog-proxy/1.0',
        })

    def _build_url(self, endpoint: str) -> str:
        if not endpoint:
            return self.base_url
        return urljoin(f"{self.base_url}/", endpoint.lstrip('/'))

    def _auth_headers(self) -> Dict[str, str]:
        if not self.auth_token:
            raise ConfigurationError("No upstream token configured for write operations")
        return {'Authorization': f'Bearer {self.auth_token}'}

    def _request(self, method: str, endpoint: str,
                 params: Optional[Dict] = None,
                 data: Optional[Dict] = None,
                 headers: Optional[Dict] = None) -> Dict[str, Any]:
        url = self._build_url(endpoint)

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=data,
                headers=headers or {},
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Upstream timeout: {method} {url} params={params} after {self.timeout}s")
            raise UpstreamUnavailable(f"Upstream request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Upstream request failed: {method} {url} params={params}: {e.__class__.__name__}: {e}")
            raise UpstreamUnavailable(f"Upstream request failed: {e.__class__.__name__}") from e

        if response.status_code == 404:
            logger.info(f"Upstream 404: {method} {url}")
            raise NotFound(f"Upstream resource not found: {endpoint or '/'}")

        if response.status_code >= 400:
            logger.error(
                f"Upstream error status: {method} {url} params={params} status={response.status_code}"
            )
            raise UpstreamUnavailable(
                f"Upstream returned HTTP {response.status_code}",
                status=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Upstream returned non-JSON body: {method} {url} length={len(response.text)}")
            raise InvalidResponse("Upstream returned a body that is not JSON") from e

        if not isinstance(payload, dict):
            logger.error(f"Upstream returned unexpected JSON type {type(payload).__name__}: {method} {url}")
            raise InvalidResponse(f"Expected a JSON object, got {type(payload).__name__}")

        return payload

    # --- Read operations ---

    def get_site(self) -> Dict[str, Any]:
        return self._request('GET', '')

    def get_posts(self, params: Optional[Dict] = None) -> Dict[str, Any]:
        query = {'number': 10, 'fields': POST_FIELDS}
        query.update(params or {})
        return self._request('GET', '/posts', params=query)

    def get_post(self, post_id: int) -> Dict[str, Any]:
        return self._request('GET', f'/posts/{post_id}', params={'fields': f'{POST_FIELDS},metadata'})

    def get_categories(self) -> Dict[str, Any]:
        return self._request('GET', '/categories', params={'number': 100})

    def get_tags(self) -> Dict[str, Any]:
        return self._request('GET', '/tags', params={'number': 100})

    # --- Write operations (require the upstream token) ---

    def create_post(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/posts/new', data=data, headers=self._auth_headers())

    def update_post(self, post_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', f'/posts/{post_id}', data=data, headers=self._auth_headers())

    def delete_post(self, post_id: int) -> Dict[str, Any]:
        return self._request('POST', f'/posts/{post_id}/delete', headers=self._auth_headers())

    def close(self):
        self.session.close()
