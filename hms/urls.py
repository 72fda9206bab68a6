"""
URL configuration for the hms project.

The REST API lives under ``/api/`` (see ``clinic.routers``).  OpenAPI
documentation is exposed at ``/swagger/`` and ``/redoc/`` and Prometheus
metrics at ``/metrics``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

api_info = openapi.Info(
    title="Hospital Management API",
    default_version='v1',
    description="Patients, doctors, appointments, billing, pharmacy, beds, staff and chat.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('clinic.routers')),
    path('', include('django_prometheus.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
