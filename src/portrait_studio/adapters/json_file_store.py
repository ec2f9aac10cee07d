"""Single JSON document kept on local disk."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from portrait_studio.domain.errors import StorageUnreadableError

logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore:
    """Reads and rewrites one JSON object mapping stored at ``path``."""

    path: Path

    def ensure(self) -> None:
        """Create the document, or reset it when it is missing or malformed.

        Only called at startup. After that an unreadable document is an error.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.path.exists():
            try:
                self.read()
            except StorageUnreadableError:
                logger.warning(
                    "Resetting malformed JSON store", extra={"path": str(self.path)}
                )
            else:
                return
        self.write({})

    def read(self) -> dict[str, object]:
        """Return the stored mapping, or an empty one if the file is absent.

        Raises:
            StorageUnreadableError: the file cannot be read or is not a mapping.
        """
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            raise StorageUnreadableError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StorageUnreadableError(f"{self.path} does not hold a JSON object")
        return document

    def write(self, document: dict[str, object]) -> None:
        """Replace the stored mapping atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
