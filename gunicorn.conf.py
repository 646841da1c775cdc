"""
Gunicorn configuration for the DogCare tracker.

Run with:  gunicorn dogcare.main:app -c gunicorn.conf.py

Env vars that override defaults:
  PORT      TCP port to bind (default: 8000)
  HOST      interface to bind (default: 127.0.0.1, local use only)
"""
import os

bind = f"{os.environ.get('HOST', '127.0.0.1')}:{os.environ.get('PORT', '8000')}"

# The key-value store is single-writer and the refresher lives in-process:
# exactly one worker.
workers = 1

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = 60

# stdout only; application loggers are configured from LOG_LEVEL.
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

# Give the refresher task time to be cancelled cleanly.
graceful_timeout = 10
