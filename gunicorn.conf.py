# Gunicorn configuration file
# This file is used by gunicorn to configure the application server
import os

# Server socket
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
# SimpleCache and memory:// rate limits are per worker; point CACHE_TYPE and
# RATELIMIT_STORAGE_URI at redis before raising this.
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
worker_class = "gthread"
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
timeout = 60  # upstream calls are bounded by WORDPRESS_API_TIMEOUT
keepalive = 2
max_requests = 1000
max_requests_jitter = 100

preload_app = True

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'


# Custom access log filter to suppress health check logs
class HealthCheckFilter:
    def filter(self, record):
        if hasattr(record, 'getMessage'):
            message = record.getMessage()
            return not ('/health' in message and ' 200 ' in message)
        return True


def when_ready(server):
    import logging
    access_logger = logging.getLogger("gunicorn.access")
    access_logger.addFilter(HealthCheckFilter())


# Process naming
proc_name = "blog_proxy"

# Server mechanics
daemon = False
pidfile = "/tmp/gunicorn.pid"
tmp_upload_dir = None

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190
