"""
URL configuration for the clinic project.

Routes the Django admin, the front-desk API, the Prometheus metrics
endpoint and the OpenAPI documentation at ``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Clinic Front-Desk API",
    default_version='v1',
    description="Patient registration, visits, lab tests and nurse management.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('django_prometheus.urls')),
    path('', include('frontdesk.routers')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
