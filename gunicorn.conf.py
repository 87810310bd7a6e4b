"""Gunicorn config for Railway deployment."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8070')}"
# watchers and chart bindings are process-local
workers = 1
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
timeout = 60


def post_worker_init(worker):
    """Log which backend the worker talks to once it has booted."""
    from sales_dashboard.config import load_settings

    settings = load_settings()
    if settings.backend_configured:
        worker.log.info(f"Worker ready, backend {settings.supabase_url}")
    else:
        worker.log.warning("Worker ready, but SUPABASE_URL / SUPABASE_KEY are not set")
