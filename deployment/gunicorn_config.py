"""
Gunicorn Configuration for the Copilot Metrics Dashboard

Usage:
    gunicorn --config deployment/gunicorn_config.py deployment.production_app:application
"""

import os
import multiprocessing

# Server socket
bind = os.getenv('GUNICORN_BIND', f"0.0.0.0:{os.getenv('PORT', 8080)}")

# Worker processes
# The metrics file has no locking, so concurrent uploads are last-write-wins
# regardless of the worker count.
workers = int(os.getenv('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
timeout = int(os.getenv('GUNICORN_TIMEOUT', 120))  # large exports take a while to aggregate
keepalive = 2
max_requests = 1000
max_requests_jitter = 50

preload_app = True

# Logging - stdout/stderr for container logs
accesslog = "-"
errorlog = "-"
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

proc_name = "copilot_metrics_dashboard"

daemon = False

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190


def on_starting(server):
    storage_path = os.getenv('STORAGE_PATH', '/data')
    server.log.info(f"Metrics storage: {storage_path}")
