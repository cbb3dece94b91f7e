"""
URL configuration for the student clinic backend.

Routes the Django admin and the API routes provided by the medical app.
OpenAPI documentation is exposed at ``/swagger/`` and ``/redoc/``.
Unknown paths answer with the API's JSON error envelope.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Student Clinic API",
    default_version='v1',
    description="Visit records, medicine inventory and medical certificates for the hostel clinic.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('medical.routers')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

handler404 = 'medical.exceptions.not_found'
handler500 = 'medical.exceptions.server_error'
