"""Gunicorn configuration for the IdP API façade.

Run with:
    gunicorn -c gunicorn.conf.py idp_api.flask_app:app

Requests are handled synchronously; each outbound IdP call blocks its worker
thread, so concurrency comes from workers x threads.
"""
import os

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "15"))
graceful_timeout = timeout
keepalive = 5

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"


def post_fork(server, worker):
    """Called just after a worker has been forked."""
    secrets_dir = "/run/secrets"
    secrets = os.listdir(secrets_dir) if os.path.isdir(secrets_dir) else []
    if secrets:
        worker.log.info(f"Found {len(secrets)} secrets in /run/secrets")
    else:
        worker.log.info("No /run/secrets mount, using environment configuration")
