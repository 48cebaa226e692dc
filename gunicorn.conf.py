"""
Gunicorn configuration for the InterpretReflect API.

Run with:
  gunicorn interpret_reflect.main:app -c gunicorn.conf.py

Env vars that override defaults:
  PORT     — TCP port to bind (default: 8000)
  WORKERS  — number of worker processes (default: 1)
  LOG_LEVEL

Pattern state (patterns and nudges) lives in process memory, so a single
worker keeps every user's nudges in one place. Scale out only with sticky
routing per user.
"""
import os

wsgi_app = "interpret_reflect.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "1"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

timeout = 120

# stdout only; the app's own loggers share the same stream.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
