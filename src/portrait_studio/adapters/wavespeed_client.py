"""Wavespeed Seedream v4 edit API client."""

from dataclasses import dataclass

import httpx

from portrait_studio.services.generation import GenerationClient


@dataclass
class WavespeedClient(GenerationClient):
    """Generation client backed by the Wavespeed REST API."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str | None, base_url: str) -> "WavespeedClient":
        """Create a Wavespeed client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def edit(
        self, *, base_image: str, ref_image: str, prompt: str, seed: int
    ) -> object:
        """Submit a synchronous Seedream edit and return the decoded JSON."""
        if not self.api_key:
            raise RuntimeError("Wavespeed key not configured")
        payload: dict[str, object] = {
            "enable_base64_output": False,
            "enable_sync_mode": True,
            "images": [ref_image],
            "mask_image_url": base_image,
            "prompt": prompt,
            "seed": seed,
        }
        response = await self.http_client.post(
            f"{self.base_url}/bytedance/seedream-v4/edit",
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=120,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
