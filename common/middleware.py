"""
common.middleware
~~~~~~~~~~~~~~~~~
Request logging through structlog.

``request_id`` and ``environment`` are bound as context variables, so the
engine's own events (``config_loaded``, ``version_resolved``, ...) carry
them when a request triggers the first configuration load.  One
``http_request`` event closes every request; 5xx responses log at error
level.
"""
import time
import uuid

import structlog
from django.conf import settings

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class StructuredLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            environment=settings.KATELLO_ENV,
        )

        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        log = logger.error if response.status_code >= 500 else logger.info
        log(
            "http_request",
            method=request.method,
            path=request.path,
            status=response.status_code,
            duration_ms=elapsed_ms,
        )
        response[REQUEST_ID_HEADER] = request_id
        return response
