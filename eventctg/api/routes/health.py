"""Liveness, root ping and metrics endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from eventctg.api.dependencies import get_database
from eventctg.core.database import DatabaseManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(database: DatabaseManager = Depends(get_database)):
    """Connect if needed and ping the document store."""

    try:
        await database.ping()
    except Exception as exc:  # noqa: BLE001
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": str(exc)},
        )
    return {"status": "ok"}


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Server is running!"


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
