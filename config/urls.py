"""
Root URL configuration for the Katello server.

    /health/         database and configuration probe
    /api/v1/         Katello API
    /api/schema/     OpenAPI document, rendered at /api/docs/
"""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from common.health import health_check

urlpatterns = [
    path("health/", health_check, name="health-check"),
    path("api/v1/", include("apps.configuration.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
]
