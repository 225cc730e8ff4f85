from blog_proxy.clients.wordpress_client import WordPressClient

__all__ = ['WordPressClient']
