"""JSON file backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from portrait_studio.adapters.json_file_store import JsonFileStore
from portrait_studio.domain.models import UserRecord, UserStatus
from portrait_studio.services.users import UserRepository


@dataclass
class JsonUserRepository(UserRepository):
    """Stores ``{user_id: {status, username, requestedAt}}`` in one file."""

    store: JsonFileStore

    def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user record, if present."""
        row = self.store.read().get(user_id)
        if not isinstance(row, dict):
            return None
        return _to_record(user_id, row)

    def save_user(self, record: UserRecord) -> None:
        """Insert or replace the record for ``record.user_id``."""
        document = self.store.read()
        document[record.user_id] = {
            "status": record.status.value,
            "username": record.display_name,
            "requestedAt": record.requested_at.isoformat(),
        }
        self.store.write(document)

    def list_users(self) -> list[UserRecord]:
        """Return all users in file order."""
        return [
            _to_record(user_id, row)
            for user_id, row in self.store.read().items()
            if isinstance(row, dict)
        ]


def _to_record(user_id: str, row: dict) -> UserRecord:
    raw_requested_at = row.get("requestedAt")
    try:
        requested_at = datetime.fromisoformat(str(raw_requested_at))
    except ValueError:
        requested_at = datetime.fromtimestamp(0, tz=UTC)
    try:
        status = UserStatus(row.get("status"))
    except ValueError:
        status = UserStatus.PENDING
    return UserRecord(
        user_id=user_id,
        status=status,
        display_name=row.get("username"),
        requested_at=requested_at,
    )
