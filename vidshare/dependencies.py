"""FastAPI dependencies: repository, storage, services and the current user."""

import uuid

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.config import Settings
from vidshare.db.session import get_db
from vidshare.domain.ports import StoragePort
from vidshare.models.user import User
from vidshare.repositories.sql_repository import SqlRepository
from vidshare.services.video_service import VideoService
from vidshare.utils.security import decode_token

security_scheme = HTTPBearer(auto_error=False)


def get_repository(db: AsyncSession = Depends(get_db)) -> SqlRepository:
    return SqlRepository(db)


def get_storage(request: Request) -> StoragePort:
    return request.app.state.storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_video_service(
    repo: SqlRepository = Depends(get_repository),
    storage: StoragePort = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
) -> VideoService:
    return VideoService(
        repo,
        storage,
        max_upload_bytes=app_settings.max_upload_bytes,
        allowed_extensions=app_settings.ALLOWED_VIDEO_EXTENSIONS,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    repo: SqlRepository = Depends(get_repository),
) -> User:
    """Extract and validate JWT, return the authenticated User."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        payload = decode_token(credentials.credentials, expected_type="access")
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = await repo.get_user(uuid.UUID(payload["sub"]))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    repo: SqlRepository = Depends(get_repository),
) -> User | None:
    """Like get_current_user but returns None instead of raising."""
    if credentials is None:
        return None
    try:
        return await get_current_user(credentials, repo)
    except HTTPException:
        return None
