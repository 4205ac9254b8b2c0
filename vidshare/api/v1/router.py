"""Aggregates all v1 API routers into a single router."""

from fastapi import APIRouter

from vidshare.api.v1.auth import router as auth_router
from vidshare.api.v1.comments import router as comments_router
from vidshare.api.v1.health import router as health_router
from vidshare.api.v1.likes import router as likes_router
from vidshare.api.v1.videos import router as videos_router
from vidshare.schemas.common import ErrorResponse

# Domain errors share one body shape; see vidshare.middleware.error_handler.
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 413, 503)
}

v1_router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)

v1_router.include_router(auth_router)
v1_router.include_router(health_router)
v1_router.include_router(videos_router)
v1_router.include_router(comments_router)
v1_router.include_router(likes_router)
