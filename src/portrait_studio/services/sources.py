"""Reference image sources."""

from typing import Protocol

FETCH_LIMIT = 6


class ImageSourceClient(Protocol):
    """Interface for fetching recent images posted by a handle."""

    async def fetch_images(self, handle: str, limit: int) -> list[str]:
        """Return up to ``limit`` image URLs, newest first.

        Raises SourceUnavailableError when the source can't be reached or
        returns an unexpected shape.
        """


def normalize_handle(raw: str) -> str:
    """Strip whitespace and a leading @ from a user-supplied handle."""
    return raw.strip().lstrip("@")
