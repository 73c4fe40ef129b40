"""User domain service.

Credentials and sessions are handled outside duetrack; this service only maps
a caller's username to the user every other service is scoped to.
"""

from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.entities import User
from duetrack.domain.errors import (
    ConflictError,
    UnauthenticatedError,
    ValidationError,
    not_authenticated,
)


class UserService:
    """Service for creating and resolving users."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, username: str) -> int:
        """Create a new user.

        Args:
            username: Unique username

        Returns:
            User ID

        Raises:
            ValidationError: If username is empty
            ConflictError: If username already exists
        """
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username cannot be empty")
        if self.db.get_user_by_username(username) is not None:
            raise ConflictError(f"User '{username}' already exists")
        return self.db.create_user(username)

    def resolve_user(self, username: Optional[str]) -> User:
        """Resolve the current caller to a user.

        Raises:
            UnauthenticatedError: If no username is given or it is unknown
        """
        if not username or not username.strip():
            raise UnauthenticatedError(not_authenticated())
        user = self.db.get_user_by_username(username.strip())
        if user is None:
            raise UnauthenticatedError(not_authenticated())
        return user
