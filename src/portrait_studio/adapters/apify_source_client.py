"""Instagram image source backed by an Apify actor."""

from dataclasses import dataclass

import httpx

from portrait_studio.domain.errors import SourceUnavailableError
from portrait_studio.services.sources import ImageSourceClient

_API_BASE = "https://api.apify.com/v2"
_IMAGE_KEYS = ("image", "display_url", "displayUrl", "imageUrl")


@dataclass
class ApifyImageSourceClient(ImageSourceClient):
    """Runs an Instagram scraper actor and reads image URLs from its dataset."""

    token: str | None
    actor: str
    http_client: httpx.AsyncClient
    wait_seconds: int = 120

    @classmethod
    def create(cls, token: str | None, actor: str) -> "ApifyImageSourceClient":
        """Create an Apify client with a managed httpx session."""
        return cls(token=token, actor=actor, http_client=httpx.AsyncClient())

    async def fetch_images(self, handle: str, limit: int) -> list[str]:
        """Run the actor for a handle and return image URLs."""
        if not self.token:
            raise SourceUnavailableError("Apify token not configured")
        try:
            dataset_id = await self._run_actor(handle, limit)
            items = await self._dataset_items(dataset_id)
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(f"Apify request failed: {exc}") from exc
        except ValueError as exc:
            raise SourceUnavailableError(
                f"Apify returned invalid JSON: {exc}"
            ) from exc
        return _extract_image_urls(items, limit)

    async def _run_actor(self, handle: str, limit: int) -> str:
        actor_id = self.actor.replace("/", "~")
        response = await self.http_client.post(
            f"{_API_BASE}/acts/{actor_id}/runs",
            params={"token": self.token, "waitForFinish": self.wait_seconds},
            json={"username": [handle], "resultsLimit": limit},
            timeout=self.wait_seconds + 30,
        )
        response.raise_for_status()
        run = response.json()
        dataset_id = None
        if isinstance(run, dict):
            data = run.get("data")
            if isinstance(data, dict):
                dataset_id = data.get("defaultDatasetId")
            dataset_id = dataset_id or run.get("defaultDatasetId")
        if not dataset_id:
            raise SourceUnavailableError(
                "Apify run did not return dataset id; check actor"
            )
        return str(dataset_id)

    async def _dataset_items(self, dataset_id: str) -> list[object]:
        response = await self.http_client.get(
            f"{_API_BASE}/datasets/{dataset_id}/items",
            params={"token": self.token},
            timeout=30,
        )
        response.raise_for_status()
        items = response.json()
        if not isinstance(items, list):
            raise SourceUnavailableError("Apify dataset returned unexpected data")
        return items

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _extract_image_urls(items: list[object], limit: int) -> list[str]:
    urls: list[str] = []
    for item in items:
        if len(urls) >= limit:
            break
        if not isinstance(item, dict):
            continue
        url = _item_image_url(item)
        if url:
            urls.append(url)
    return urls


def _item_image_url(item: dict) -> str | None:
    for key in _IMAGE_KEYS:
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    images = item.get("images")
    if isinstance(images, list) and images and isinstance(images[0], str):
        return images[0]
    return None
