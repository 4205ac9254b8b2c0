"""Authentication API routes."""

import uuid

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from vidshare.config import settings
from vidshare.dependencies import get_current_user, get_repository
from vidshare.models.user import User
from vidshare.repositories.sql_repository import SqlRepository
from vidshare.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from vidshare.schemas.common import MessageResponse
from vidshare.services.auth_service import AuthService
from vidshare.utils.security import decode_token

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE = "refresh_token"
REFRESH_COOKIE_PATH = "/api/v1/auth"


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        httponly=True,
        secure=False,  # Set True in production with HTTPS
        samesite="lax",
        max_age=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS * 86400,
        path=REFRESH_COOKIE_PATH,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, repo: SqlRepository = Depends(get_repository)):
    service = AuthService(repo)
    await service.register_user(
        first_name=payload.first_name,
        last_name=payload.last_name,
        username=payload.username,
        password=payload.password,
        email=payload.email,
    )
    return await service.get_user_by_username(payload.username)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, response: Response, repo: SqlRepository = Depends(get_repository)):
    user, access, refresh = await AuthService(repo).login(payload.username, payload.password)
    _set_refresh_cookie(response, refresh)
    return TokenResponse(access_token=access)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request: Request,
    response: Response,
    repo: SqlRepository = Depends(get_repository),
):
    """Exchange the refresh-token cookie for a new access token."""
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No refresh token")

    try:
        payload = decode_token(token, expected_type="refresh")
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    result = await AuthService(repo).refresh_tokens(uuid.UUID(payload["sub"]))
    if not result:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    access, new_refresh = result
    _set_refresh_cookie(response, new_refresh)
    return TokenResponse(access_token=access)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    response: Response,
    user: User = Depends(get_current_user),
    repo: SqlRepository = Depends(get_repository),
):
    await AuthService(repo).delete_account(user.id)
    response.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH)
    return MessageResponse(message="Account deleted")
