"""Auth request/response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    # Field rules live in vidshare.domain.validators so every entry point
    # reports the same error kinds.
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    password: str = ""
    email: str = ""


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    username: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}
