"""JSON file backed usage ledger."""

from dataclasses import dataclass
from datetime import date

from portrait_studio.adapters.json_file_store import JsonFileStore
from portrait_studio.services.usage import UsageRepository


@dataclass
class JsonUsageRepository(UsageRepository):
    """Stores ``{YYYY-MM-DD: {user_id: count}}`` in one file."""

    store: JsonFileStore

    def get_count(self, day: date, user_id: str) -> int:
        """Return the count for a user on a day."""
        counts = self.store.read().get(day.isoformat())
        if not isinstance(counts, dict):
            return 0
        return int(counts.get(user_id, 0))

    def add_count(self, day: date, user_id: str, delta: int) -> int:
        """Add ``delta`` to the day's count and return the new total."""
        document = self.store.read()
        key = day.isoformat()
        counts = document.get(key)
        if not isinstance(counts, dict):
            counts = {}
            document[key] = counts
        total = int(counts.get(user_id, 0)) + delta
        counts[user_id] = total
        self.store.write(document)
        return total
