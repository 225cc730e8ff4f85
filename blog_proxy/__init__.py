from blog_proxy.main import create_app

__all__ = [
    'create_app'
]
