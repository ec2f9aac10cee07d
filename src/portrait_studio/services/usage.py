"""Daily generation quota tracking."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol


class UsageRepository(Protocol):
    """Persistence interface for per-day usage counters."""

    def get_count(self, day: date, user_id: str) -> int:
        """Return the count for a user on a day (0 when absent)."""

    def add_count(self, day: date, user_id: str, delta: int) -> int:
        """Add to a user's count for a day and return the new total."""


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class UsageService:
    """Reads and increments today's usage in UTC."""

    repository: UsageRepository
    today: Callable[[], date] = field(default=_utc_today)

    def get_count(self, user_id: str) -> int:
        """Return how many images the user generated today."""
        return self.repository.get_count(self.today(), user_id)

    def add_usage(self, user_id: str, delta: int) -> int:
        """Record generated images against today's count."""
        if delta < 0:
            raise ValueError("Usage delta must be non-negative")
        return self.repository.add_count(self.today(), user_id, delta)
