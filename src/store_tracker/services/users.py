"""User-related business logic."""

import logging
from dataclasses import dataclass
from typing import Protocol

from store_tracker.domain.errors import NotFoundError
from store_tracker.domain.models import NewUser, UserNames, UserRecord

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def find_by_national_id(self, national_id: int) -> UserRecord | None:
        """Return the user for a national id, if present."""

    def insert_user(self, user: NewUser) -> UserRecord:
        """Create a user with zero spend, raising ConflictError on duplicates."""

    def update_user_names(
        self, national_id: int, names: UserNames
    ) -> UserRecord | None:
        """Update name fields and return the updated user, if matched."""

    def delete_by_national_id(self, national_id: int) -> UserRecord | None:
        """Delete the user and return the removed record, if matched."""

    def list_users(self) -> list[UserRecord]:
        """Return all users in storage order."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository

    def create_user(self, user: NewUser) -> UserRecord:
        """Create a user with no money spent."""
        created = self.repository.insert_user(user)
        _logger.info("Created user: national_id=%s", created.national_id)
        return created

    def get_user(self, national_id: int) -> UserRecord:
        """Return the user or raise NotFoundError."""
        user = self.repository.find_by_national_id(national_id)
        if user is None:
            raise NotFoundError(national_id)
        return user

    def list_users(self) -> list[UserRecord]:
        """Return all users."""
        return self.repository.list_users()

    def update_user(self, national_id: int, names: UserNames) -> UserRecord:
        """Replace a user's names or raise NotFoundError."""
        updated = self.repository.update_user_names(national_id, names)
        if updated is None:
            _logger.warning("User not found for update: national_id=%s", national_id)
            raise NotFoundError(national_id)
        return updated

    def delete_user(self, national_id: int) -> None:
        """Delete a user, leaving their purchase records in place."""
        deleted = self.repository.delete_by_national_id(national_id)
        if deleted is None:
            _logger.warning("User not found for delete: national_id=%s", national_id)
            raise NotFoundError(national_id)
        _logger.info("Deleted user: national_id=%s", national_id)
