"""Health check route handlers."""

import time
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from sufra.core.logging import get_logger
from sufra.db.session import check_database_health

router = APIRouter(prefix="/v1", tags=["health"])
_log = get_logger(__name__)

SERVICE_NAME = "sufra"

health_check_counter = Counter(
    "sufra_health_checks_total", "Total number of health checks", ["endpoint", "status"]
)
health_check_duration = Histogram(
    "sufra_health_check_duration_seconds", "Time spent on health checks", ["endpoint"]
)


def check_database_connection() -> dict[str, Any]:
    started = time.perf_counter()
    healthy = check_database_health()
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    return {
        "status": "healthy" if healthy else "unhealthy",
        "response_time_ms": elapsed_ms,
    }


@router.get(
    "/liveness",
    summary="Liveness probe",
    status_code=status.HTTP_200_OK,
)
def liveness_probe() -> JSONResponse:
    with health_check_duration.labels(endpoint="liveness").time():
        health_check_counter.labels(endpoint="liveness", status="success").inc()
        return JSONResponse(
            content={
                "status": "alive",
                "timestamp": datetime.now(tz=UTC).isoformat(),
                "service": SERVICE_NAME,
            }
        )


@router.get(
    "/health",
    summary="Health check",
    description="Reports database connectivity. Answers 503 when it is down.",
)
def health_check() -> JSONResponse:
    with health_check_duration.labels(endpoint="health").time():
        database = check_database_connection()
        healthy = database["status"] == "healthy"
        health_check_counter.labels(
            endpoint="health", status="success" if healthy else "failure"
        ).inc()
        if not healthy:
            _log.warning("Health check failed: database unavailable")
        return JSONResponse(
            status_code=(
                status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
            ),
            content={
                "status": "healthy" if healthy else "unhealthy",
                "timestamp": datetime.now(tz=UTC).isoformat(),
                "service": SERVICE_NAME,
                "checks": {"database": database},
            },
        )
