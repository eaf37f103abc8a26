"""
apps.configuration.views
~~~~~~~~~~~~~~~~~~~~~~~~~
Thin DRF view reporting what the running server is.

Endpoints
---------
GET    /status/   – Application name, version and mode

Configuration errors propagate to ``common.exceptions.custom_exception_handler``,
which answers 503.
"""
from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .serializers import StatusSerializer


class StatusView(APIView):
    """GET /status/ – identify the running server."""

    @extend_schema(
        summary="Server Status",
        description="Returns the application name, version and mode from the loaded configuration.",
        responses={
            200: StatusSerializer,
            503: OpenApiResponse(description="Configuration could not be loaded."),
        },
        tags=["Status"],
    )
    def get(self, request: Request) -> Response:
        config = services.katello_config()
        serializer = StatusSerializer({
            "name": config["app_name"],
            "version": config["katello_version"],
            "mode": config["app_mode"],
        })
        return Response(serializer.data)
