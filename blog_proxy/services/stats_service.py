"""
Business logic for blog statistics.

Pure Python - no Flask dependencies.
A single pass over at most a hundred posts; nothing here touches the network.
"""

import html
import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence

from blog_proxy.models import BlogStats, Post

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r'<[^>]*>')


def strip_markup(content: str) -> str:
    """Remove HTML tags and decode entities. Tags become spaces so adjacent blocks don't merge."""
    return html.unescape(_TAG_RE.sub(' ', content or ''))


def word_count(content: str) -> int:
    return len(strip_markup(content).split())


def parse_publish_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an upstream ISO-8601 date. Naive values are taken as UTC."""
    if not value:
        return None
    candidate = value.strip()
    if candidate.endswith('Z'):
        candidate = candidate[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        logger.debug(f"Unparseable publish date: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class StatsService:
    """
    Derives BlogStats from post, category and tag snapshots.

    All methods are pure functions - the gateway fetches, this computes.
    """

    @staticmethod
    def average_post_length(posts: Sequence[Post]) -> int:
        """Mean word count over the given posts, rounded half up. Zero for no posts."""
        if not posts:
            return 0
        total_words = sum(word_count(post.content) for post in posts)
        average = Decimal(total_words) / Decimal(len(posts))
        return int(average.quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    @staticmethod
    def sort_by_publish_date(posts: Sequence[Post]) -> List[Post]:
        """Newest first. Posts without a parseable date sink to the end."""
        oldest = datetime.min.replace(tzinfo=timezone.utc)

        def sort_key(post: Post):
            parsed = parse_publish_date(post.date)
            return (parsed is not None, parsed or oldest)

        return sorted(posts, key=sort_key, reverse=True)

    @staticmethod
    def last_post_date(posts: Sequence[Post]) -> Optional[str]:
        ordered = StatsService.sort_by_publish_date(posts)
        if not ordered or parse_publish_date(ordered[0].date) is None:
            return None
        return ordered[0].date

    @staticmethod
    def total_posts(site: Dict[str, Any], posts_payload: Dict[str, Any], fetched: int) -> int:
        """Prefer the upstream-reported total; fall back to how many posts were fetched."""
        for candidate in (site.get('post_count'), site.get('posts_total'), posts_payload.get('found')):
            if isinstance(candidate, int) and candidate >= 0:
                return candidate
        return fetched

    @staticmethod
    def compute(
        site: Dict[str, Any],
        posts_payload: Dict[str, Any],
        posts: Sequence[Post],
        category_count: int,
        tag_count: int,
        default_site_url: Optional[str] = None
    ) -> BlogStats:
        stats = BlogStats(
            total_posts=StatsService.total_posts(site, posts_payload, len(posts)),
            total_categories=category_count,
            total_tags=tag_count,
            average_post_length=StatsService.average_post_length(posts),
            last_post_date=StatsService.last_post_date(posts),
            site_name=site.get('name') or 'WordPress Site',
            site_description=site.get('description') or '',
            site_url=site.get('URL') or default_site_url,
        )
        logger.info(
            f"Computed blog stats: posts={stats.total_posts}, sample={len(posts)}, "
            f"avg_length={stats.average_post_length}"
        )
        return stats
