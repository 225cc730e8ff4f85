"""
Decorators for Flask routes.

Provides reusable decorators for common route patterns.
"""

from blog_proxy.decorators.auth import require_api_token

__all__ = ['require_api_token']
