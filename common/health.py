"""
common.health
~~~~~~~~~~~~~
GET /health/ – lightweight liveness + readiness probe.

Returns:
    200  {"status": "ok", "db": "ok", "config": "ok"}  – everything healthy
    503  {"status": "degraded", "db": ..., "config": "error: <msg>"}
         – DB unreachable or configuration failed to load
"""
import structlog
from django.db import connection, OperationalError
from django.http import JsonResponse

from apps.configuration import services
from apps.configuration.engine import ConfigurationError

logger = structlog.get_logger(__name__)


def health_check(request):
    """Return service health including database and configuration status."""
    db_status = "ok"
    config_status = "ok"

    try:
        connection.ensure_connection()
    except OperationalError as exc:
        db_status = f"error: {exc}"
        logger.error("health_check_db_failure", error=str(exc))

    try:
        services.katello_config()
    except ConfigurationError as exc:
        config_status = f"error: {exc}"
        logger.error("health_check_config_failure", error=str(exc))

    healthy = db_status == "ok" and config_status == "ok"
    payload = {
        "status": "ok" if healthy else "degraded",
        "db": db_status,
        "config": config_status,
    }
    return JsonResponse(payload, status=200 if healthy else 503)
