"""WSGI config for salarybook project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "salarybook.settings")

application = get_wsgi_application()
