"""
WSGI config for license_portal project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'license_portal.settings')

application = get_wsgi_application()

# Vercel entry point
app = application
