"""
URL configuration for the hospital management API.

The `urlpatterns` list routes URLs to views.  The API itself lives under
``/api`` (see ``clinical.routers``); the liveness probe, Prometheus
metrics and the Django admin sit at the root.  OpenAPI documentation is
exposed at ``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

from clinical.views import health

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Hospital Management API",
    default_version='v1',
    description="Multi-tenant hospitals, admins, doctors, patients and prescriptions.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', health.health, name='health'),
    path('', include('django_prometheus.urls')),
    path('api/', include('clinical.routers')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
