"""
User repository for database operations.

Provides async CRUD operations for the ``users`` table through the
persistence gateway.
"""

import structlog
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from api.src.errors import StoreError
from api.src.models.user import User, UserCreateRequest
from api.src.repositories.database import Database, store_errors

logger = structlog.get_logger(__name__)


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, db: Database):
        """
        Initialize user repository.

        Args:
            db: Persistence gateway
        """
        self.db = db

    @staticmethod
    def _to_user(row: Mapping[str, Any]) -> User:
        try:
            return User.model_validate(dict(row))
        except (ValidationError, TypeError, ValueError) as e:
            logger.error("user_row_invalid", error=str(e))
            raise StoreError("Failed to parse user record") from e

    async def list_users(self) -> List[User]:
        """
        List all users.

        Returns:
            List of users
        """
        with store_errors("Failed to fetch users", "user_list_failed"):
            rows = await self.db.fetch_all("SELECT id, name, email FROM users")

        return [self._to_user(row) for row in rows]

    async def create_user(self, request: UserCreateRequest) -> User:
        """
        Create a new user.

        Args:
            request: Validated create payload

        Returns:
            Created user
        """
        with store_errors("Failed to create user", "user_create_failed", email=request.email):
            row = await self.db.fetch_one(
                "INSERT INTO users (name, email) VALUES ($1, $2) RETURNING id",
                request.name,
                request.email
            )

        if row is None:
            logger.error("user_create_no_id", email=request.email)
            raise StoreError("Failed to create user")

        user = self._to_user({
            "id": row.get("id"),
            "name": request.name,
            "email": request.email
        })

        logger.info("user_created", user_id=user.id)
        return user

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None if not found
        """
        with store_errors("Failed to fetch user", "user_get_by_id_failed", user_id=user_id):
            row = await self.db.fetch_one(
                "SELECT id, name, email FROM users WHERE id = $1",
                user_id
            )

        if row is None:
            logger.debug("user_not_found", user_id=user_id)
            return None

        return self._to_user(row)

    async def delete_user(self, user_id: int) -> bool:
        """
        Delete user.

        Args:
            user_id: User ID

        Returns:
            True if deleted, False if not found
        """
        with store_errors("Failed to delete user", "user_delete_failed", user_id=user_id):
            affected = await self.db.execute("DELETE FROM users WHERE id = $1", user_id)

        deleted = affected > 0
        if deleted:
            logger.info("user_deleted", user_id=user_id)
        else:
            logger.debug("user_not_found", user_id=user_id)

        return deleted
