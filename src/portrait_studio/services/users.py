"""User registry business logic."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol

from portrait_studio.domain.models import UserRecord, UserStatus, UserSummary


class UserRepository(Protocol):
    """Persistence interface for user records."""

    def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user record, if present."""

    def save_user(self, record: UserRecord) -> None:
        """Insert or replace a user record."""

    def list_users(self) -> list[UserRecord]:
        """Return all users in insertion order."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class UserService:
    """Application service for user approval state."""

    repository: UserRepository
    now: Callable[[], datetime] = field(default=_utc_now)

    def get_status(self, user_id: str) -> UserStatus | None:
        """Return the user's status, or None for unknown users."""
        record = self.repository.get_user(user_id)
        return record.status if record else None

    def is_approved(self, user_id: str) -> bool:
        """Return true when the user may use gated actions."""
        return self.get_status(user_id) == UserStatus.APPROVED

    def ensure_pending(self, user_id: str, display_name: str | None) -> bool:
        """Create a pending record on first contact; return whether it was created."""
        if self.repository.get_user(user_id) is not None:
            return False
        self.repository.save_user(
            UserRecord(
                user_id=user_id,
                status=UserStatus.PENDING,
                display_name=display_name,
                requested_at=self.now(),
            )
        )
        return True

    def set_status(self, user_id: str, status: UserStatus) -> UserRecord:
        """Overwrite the user's status, creating the record if needed."""
        existing = self.repository.get_user(user_id)
        if existing is None:
            record = UserRecord(
                user_id=user_id,
                status=status,
                display_name=None,
                requested_at=self.now(),
            )
        else:
            record = replace(existing, status=status)
        self.repository.save_user(record)
        return record

    def list_by_status(self, status: UserStatus) -> list[UserSummary]:
        """Return users with the given status."""
        return [
            UserSummary(user_id=record.user_id, display_name=record.display_name)
            for record in self.repository.list_users()
            if record.status == status
        ]
