from blog_proxy.middleware.cors import init_cors
from blog_proxy.middleware.rate_limit import init_rate_limiting

__all__ = ['init_cors', 'init_rate_limiting']
