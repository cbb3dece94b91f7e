"""
ASGI config for the clinic project.

The API is plain HTTP; this exists for ASGI servers such as uvicorn.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic.settings")

application = get_asgi_application()
