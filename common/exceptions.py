"""
common.exceptions
~~~~~~~~~~~~~~~~~
API error envelope.

Every error leaves the API as ``{"code": ..., "detail": ...}``.  Errors
raised by the configuration engine are reported as 503: the server cannot
answer anything while its configuration is broken.
"""
import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.configuration.engine import ConfigurationError

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Error with an HTTP status and a machine-readable code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "server_error"
    default_detail: str = "Internal server error."

    def __init__(self, detail: str | None = None, code: str | None = None) -> None:
        self.detail = detail or self.default_detail
        self.code = code or self.default_code

    def __str__(self) -> str:
        return self.detail


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "configuration_unavailable"
    default_detail = "Configuration could not be loaded."


def custom_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF ``EXCEPTION_HANDLER``.

    ``ConfigurationError`` becomes :class:`ServiceUnavailableError`;
    ``AppError`` is rendered as the envelope; anything else goes to DRF.
    """
    if isinstance(exc, ConfigurationError):
        logger.error("configuration_unavailable", error=str(exc), view=_view_name(context))
        exc = ServiceUnavailableError(str(exc))

    if isinstance(exc, AppError):
        return Response({"code": exc.code, "detail": exc.detail}, status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is None:
        logger.exception("unhandled_exception", exc_info=exc, view=_view_name(context))
    return response


def _view_name(context: dict) -> str | None:
    view = context.get("view")
    return type(view).__name__ if view is not None else None
