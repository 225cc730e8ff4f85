"""
Read-only projections of upstream content.

Pure Python - no Flask dependencies.
Upstream payloads are normalised into these dataclasses once, at the gateway
boundary, so routes and the stats computation only ever see one shape.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from blog_proxy.exceptions import InvalidResponse


def _text(value: Any) -> str:
    """WordPress REST v2 wraps text fields in {'rendered': ...}; v1.1 does not."""
    if isinstance(value, dict):
        value = value.get('rendered', '')
    return value if isinstance(value, str) else ''


def _term_ids(value: Any) -> List[int]:
    # v1.1 returns {name: {ID, ...}}, v2 returns [id, ...]
    if isinstance(value, dict):
        terms = value.values()
    elif isinstance(value, list):
        terms = value
    else:
        return []

    ids = set()
    for term in terms:
        if isinstance(term, dict):
            term_id = term.get('ID', term.get('id'))
        else:
            term_id = term
        if isinstance(term_id, int):
            ids.add(term_id)
    return sorted(ids)


def _author_id(value: Any) -> Optional[int]:
    if isinstance(value, dict):
        value = value.get('ID', value.get('id'))
    return value if isinstance(value, int) else None


@dataclass(frozen=True)
class Post:
    """A blog post as exposed to the frontend."""
    id: int
    title: str
    content: str
    excerpt: str
    date: Optional[str]
    author: Optional[int]
    categories: List[int] = field(default_factory=list)
    tags: List[int] = field(default_factory=list)
    featured_media: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_upstream(cls, payload: Dict[str, Any]) -> 'Post':
        if not isinstance(payload, dict):
            raise InvalidResponse(f"Expected a post object, got {type(payload).__name__}")

        post_id = payload.get('ID', payload.get('id'))
        if not isinstance(post_id, int):
            raise InvalidResponse("Post payload is missing a numeric identifier")

        featured = payload.get('featured_image') or payload.get('featured_media') or None
        if not isinstance(featured, str):
            # v2 reports a media id here, not a URL
            featured = None

        return cls(
            id=post_id,
            title=_text(payload.get('title')),
            content=_text(payload.get('content')),
            excerpt=_text(payload.get('excerpt')),
            date=payload.get('date'),
            author=_author_id(payload.get('author')),
            categories=_term_ids(payload.get('categories')),
            tags=_term_ids(payload.get('tags')),
            featured_media=featured,
            url=payload.get('URL', payload.get('link')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Term:
    """Category or tag."""
    id: int
    name: str
    slug: str = ''
    post_count: int = 0

    @classmethod
    def from_upstream(cls, payload: Dict[str, Any]) -> 'Term':
        if not isinstance(payload, dict):
            raise InvalidResponse(f"Expected a term object, got {type(payload).__name__}")

        term_id = payload.get('ID', payload.get('id'))
        if not isinstance(term_id, int):
            raise InvalidResponse("Term payload is missing a numeric identifier")

        post_count = payload.get('post_count', payload.get('count', 0))
        return cls(
            id=term_id,
            name=_text(payload.get('name')),
            slug=payload.get('slug') or '',
            post_count=post_count if isinstance(post_count, int) else 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


Category = Term
Tag = Term


@dataclass(frozen=True)
class BlogStats:
    """Aggregate computed on demand from post, category and tag snapshots."""
    total_posts: int
    total_categories: int
    total_tags: int
    average_post_length: int
    last_post_date: Optional[str]
    site_name: str
    site_description: str
    site_url: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PostPage:
    """One page of posts plus the upstream-reported total."""
    posts: List[Post]
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {'posts': [post.to_dict() for post in self.posts], 'total': self.total}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PostPage':
        return cls(posts=[Post(**post) for post in data['posts']], total=data['total'])


@dataclass(frozen=True)
class PostLookup:
    """Result of fetching a single post: either found with a post, or absent."""
    post: Optional[Post] = None

    @property
    def found(self) -> bool:
        return self.post is not None


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the absolute time after which it must not be served."""
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key, 'value': self.value, 'expires_at': self.expires_at}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheEntry':
        return cls(key=data['key'], value=data['value'], expires_at=data['expires_at'])
