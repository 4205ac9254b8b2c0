"""Authentication service — registration, login, token refresh, account removal."""

import logging
import uuid

from vidshare.domain.errors import InvalidCredentialsError
from vidshare.domain.ports import PersistencePort
from vidshare.domain.validators import validate_registration
from vidshare.models.user import User
from vidshare.utils.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repo: PersistencePort):
        self.repo = repo

    async def register_user(
        self,
        first_name: str,
        last_name: str,
        username: str,
        password: str,
        email: str,
    ) -> bool:
        """Validate, hash and persist a new user.

        Nothing is written unless every validation rule passes.
        """
        data = validate_registration(first_name, last_name, username, password, email)
        await self.repo.add_user(
            first_name=data.first_name,
            last_name=data.last_name,
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        logger.info("Registered user %s", data.username)
        return True

    async def login(self, username: str, password: str) -> tuple[User, str, str]:
        """Authenticate and return (user, access_token, refresh_token)."""
        user = await self.repo.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise InvalidCredentialsError("Account is disabled")

        return user, create_access_token(user.id, user.username), create_refresh_token(user.id)

    async def get_user_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.repo.get_user(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return await self.repo.get_user_by_username(username)

    async def refresh_tokens(self, user_id: uuid.UUID) -> tuple[str, str] | None:
        """Issue new token pair for an existing user."""
        user = await self.get_user_by_id(user_id)
        if not user or not user.is_active:
            return None
        return create_access_token(user.id, user.username), create_refresh_token(user.id)

    async def delete_account(self, user_id: uuid.UUID) -> list[str]:
        """Remove the user with their videos, comments and likes.

        Returns the storage refs of the removed videos; the files themselves
        are swept by the cleanup worker once the transaction has committed.
        """
        refs = await self.repo.delete_user(user_id)
        logger.info("Deleted user %s and %d videos", user_id, len(refs))
        return refs
