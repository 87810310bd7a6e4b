"""
WSGI entry point for deployment (Railway / Gunicorn).
Builds the services handle from the environment and exposes the Flask server.
"""
from sales_dashboard.app import create_app
from sales_dashboard.config import configure_logging, load_settings
from sales_dashboard.services import Services

settings = load_settings()
configure_logging(settings.log_level)

app = create_app(Services(settings))

# Expose the Flask server for gunicorn
server = app.server
