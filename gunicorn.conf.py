# Gunicorn configuration for the blog API
# Run with: gunicorn -c gunicorn.conf.py "blogapp:create_app()"

import multiprocessing
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:5000")

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "gthread"
threads = 2

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100
timeout = 30
keepalive = 2
preload_app = True

# Request limits; bodies are capped by MAX_CONTENT_LENGTH in the app
limit_request_line = 4096
limit_request_fields = 100
limit_request_field_size = 8190

# Only drop privileges when running as root
if hasattr(os, "geteuid") and os.geteuid() == 0:
    user = os.getenv("GUNICORN_USER", "blogapp")
    group = os.getenv("GUNICORN_GROUP", "blogapp")

# Logging: the app logs JSON through structlog to stderr
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(a)s" %(D)s'

worker_tmp_dir = "/dev/shm"
