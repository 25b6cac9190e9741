import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")
import django  # noqa: E402

django.setup()

from django.conf import settings  # noqa: E402

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", "3"))
wsgi_app = "core.wsgi:application"

# Gunicorn's own stdout/stderr handlers are replaced by logconfig_dict
errorlog = "-"
accesslog = "-"
loglevel = settings.LOG_LEVEL.lower()
capture_output = True

# Same handlers and request_id filter as the Django process
logconfig_dict = settings.LOGGING
