"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    return {"status": "ok"}


@router.get("/db")
async def database_check(request: Request):
    try:
        async with request.app.state.db.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        reachable = True
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        reachable = False

    return {"database": "ok" if reachable else "unavailable"}
