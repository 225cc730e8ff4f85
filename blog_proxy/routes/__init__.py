# Routes package initialization
from blog_proxy.routes.main_routes import main_bp
from blog_proxy.routes.wordpress_routes import wordpress_bp

__all__ = [
    'main_bp',
    'wordpress_bp'
]
