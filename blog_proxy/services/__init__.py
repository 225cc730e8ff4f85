"""
Service layer for business logic.

Services contain pure business logic without Flask dependencies.
This makes them testable and reusable.
"""

from blog_proxy.services.content_gateway import CacheTTLs, ContentGateway
from blog_proxy.services.stats_service import StatsService

__all__ = ['CacheTTLs', 'ContentGateway', 'StatsService']
