"""Instagram image source using the public profile endpoint."""

from dataclasses import dataclass

import httpx

from portrait_studio.domain.errors import SourceUnavailableError
from portrait_studio.services.sources import ImageSourceClient


@dataclass
class DirectInstagramSourceClient(ImageSourceClient):
    """Reads recent posts from Instagram's public profile JSON.

    The endpoint is unofficial and frequently blocked.
    """

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "DirectInstagramSourceClient":
        """Create a client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient())

    async def fetch_images(self, handle: str, limit: int) -> list[str]:
        """Return display URLs of the handle's most recent posts."""
        try:
            response = await self.http_client.get(
                f"https://www.instagram.com/{handle}/",
                params={"__a": "1", "__d": "dis"},
                headers={"User-Agent": "Mozilla/5.0"},
                timeout=15,
            )
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(f"Instagram request failed: {exc}") from exc
        if not response.is_success:
            raise SourceUnavailableError("Instagram public endpoint blocked")
        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceUnavailableError("Instagram returned non-JSON data") from exc
        edges = _timeline_edges(payload)
        if edges is None:
            raise SourceUnavailableError("No media found")
        urls: list[str] = []
        for edge in edges[:limit]:
            node = edge.get("node") if isinstance(edge, dict) else None
            if not isinstance(node, dict):
                continue
            url = node.get("display_url") or node.get("thumbnail_src")
            if isinstance(url, str) and url:
                urls.append(url)
        return urls

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _timeline_edges(payload: object) -> list | None:
    graphql_user = _dig(payload, "graphql", "user")
    if graphql_user is None:
        pages = _dig(payload, "entry_data", "ProfilePage")
        if isinstance(pages, list) and pages:
            graphql_user = _dig(pages[0], "graphql", "user")
    edges = _dig(graphql_user, "edge_owner_to_timeline_media", "edges")
    return edges if isinstance(edges, list) else None


def _dig(value: object, *keys: str) -> object:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value
