"""
Vigia - Health Router
=====================

Liveness check with a database round trip, plus process metrics.
"""

import os
import sqlite3
import time
from typing import Optional

import psutil
from fastapi import APIRouter, Depends

from vigia import __version__
from vigia.core.logger import logger
from vigia.api.dependencies import get_moderation
from vigia.api.models.base import APIResponse, HealthResponse, SystemHealth
from vigia.services.moderation import ModerationService


router = APIRouter(tags=["Health"])

# Track startup time
_start_time = time.time()


def _database_ok(service: ModerationService) -> bool:
    try:
        return service.db.ping()
    except sqlite3.Error as e:
        logger.warning("Health Check Database Failed", [
            ("Error", str(e)[:100]),
        ])
        return False


@router.get("/health", response_model=HealthResponse)
@router.get("/api/health", response_model=HealthResponse)
async def health_check(service: ModerationService = Depends(get_moderation)) -> HealthResponse:
    """
    Health check for load balancers and monitoring.

    Reports "degraded" instead of failing when the database is unreachable.
    """
    db_ok = _database_ok(service)
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=__version__,
        run_id=logger.run_id,
        database=db_ok,
    )


@router.get("/api/health/detailed", response_model=APIResponse[SystemHealth])
async def detailed_health(
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[SystemHealth]:
    """Uptime, memory, CPU and database file size."""
    process = psutil.Process(os.getpid())
    memory_mb = process.memory_info().rss / (1024 * 1024)
    cpu_percent = process.cpu_percent(interval=0.1)

    db_ok = _database_ok(service)
    db_size: Optional[float] = None
    db_path = service.db.db_path
    if db_path.exists():
        db_size = db_path.stat().st_size / (1024 * 1024)

    health = SystemHealth(
        status="healthy" if db_ok else "degraded",
        uptime_seconds=int(time.time() - _start_time),
        memory_mb=round(memory_mb, 2),
        cpu_percent=round(cpu_percent, 2),
        db_connected=db_ok,
        db_size_mb=round(db_size, 2) if db_size is not None else None,
    )

    logger.debug("Health Check (Detailed)", [
        ("Status", health.status),
        ("Memory", f"{health.memory_mb}MB"),
        ("CPU", f"{health.cpu_percent}%"),
    ])

    return APIResponse(data=health)


__all__ = ["router"]
