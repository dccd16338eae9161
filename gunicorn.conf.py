"""Gunicorn configuration for production.

Run with:

    gunicorn -c gunicorn.conf.py openprd.main:app

Every worker builds its own registry and vault from the same settings, so
KEY_VAULT_SECRET must be identical across workers and hosts.
"""
import multiprocessing
import os

# Import settings - but handle case where the package may not be importable
try:
    from openprd.config import get_settings
    _settings = get_settings()
    _host = _settings.server_host
    _port = _settings.server_port
    _workers = _settings.server_workers or (multiprocessing.cpu_count() * 2 + 1)
    _log_level = _settings.log_level.lower()
    _llm_timeout = _settings.llm_timeout
except Exception:
    _host = os.getenv("SERVER_HOST", "0.0.0.0")
    _port = os.getenv("SERVER_PORT", "8000")
    _workers = int(os.getenv("SERVER_WORKERS", multiprocessing.cpu_count() * 2 + 1))
    _log_level = os.getenv("LOG_LEVEL", "info").lower()
    _llm_timeout = float(os.getenv("LLM_TIMEOUT", "120"))

# Server socket
bind = f"{_host}:{_port}"

# Worker processes
workers = _workers
worker_class = "uvicorn.workers.UvicornWorker"
worker_tmp_dir = "/dev/shm"

# Must exceed the LLM timeout
timeout = int(_llm_timeout) + 30
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = "-"
errorlog = "-"
loglevel = _log_level

access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Security
limit_request_line = 8190
limit_request_fields = 100
