from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.db.session import SessionLocal

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)

Check = Callable[[], Awaitable[dict[str, Any]]]


async def _check_database() -> dict[str, Any]:
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("health_check_failed", check="database", error_type=type(exc).__name__)
        return {"status": "failed", "error": "database_unavailable"}
    return {"status": "ok"}


async def _check_schema() -> dict[str, Any]:
    try:
        async with SessionLocal() as session:
            revision = await session.scalar(text("SELECT version_num FROM alembic_version"))
    except Exception as exc:
        logger.warning("health_check_failed", check="schema", error_type=type(exc).__name__)
        return {"status": "failed", "error": "schema_unavailable"}
    if revision is None:
        return {"status": "failed", "error": "schema_not_migrated"}
    return {"status": "ok", "revision": revision}


async def _run_checks(checks: dict[str, Check]) -> tuple[bool, dict[str, dict[str, Any]]]:
    results = {name: await check() for name, check in checks.items()}
    return all(result.get("status") == "ok" for result in results.values()), results


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "live"}


@router.get("/health")
async def health() -> JSONResponse:
    healthy, results = await _run_checks({"database": _check_database, "schema": _check_schema})
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ok" if healthy else "degraded", "checks": results},
    )


@router.get("/ready")
async def ready() -> JSONResponse:
    # Schema drift is reported by /health; readiness only needs a reachable database.
    is_ready, results = await _run_checks({"database": _check_database})
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if is_ready else "not_ready", "checks": results},
    )
