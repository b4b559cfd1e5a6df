"""
ASGI config for the clinic project.

The API is plain HTTP; this entrypoint only exists so the project can be
served by an ASGI server such as uvicorn or daphne.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic.settings")

application = get_asgi_application()
