"""Domain models for the portrait studio bot."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class UserStatus(StrEnum):
    """Approval status of a bot user."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the registry."""

    user_id: str
    status: UserStatus
    display_name: str | None
    requested_at: datetime


@dataclass(frozen=True)
class UserSummary:
    """Minimal listing view of a user."""

    user_id: str
    display_name: str | None
