"""Generation orchestration under the daily quota."""

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from portrait_studio.adapters.telegram_client import TelegramClient
from portrait_studio.domain.errors import (
    AuthorizationDeniedError,
    PreconditionUnmetError,
    QuotaExceededError,
)
from portrait_studio.domain.generation import (
    GenerationPlan,
    GenerationReport,
    extract_image_url,
)
from portrait_studio.services.sessions import SessionService
from portrait_studio.services.usage import UsageService
from portrait_studio.services.users import UserService

logger = logging.getLogger(__name__)

MAX_REFERENCES = 3
VARIATIONS_PER_REFERENCE = 2
_MAX_SEED = 2**31 - 1


class GenerationClient(Protocol):
    """Interface for the image editing backend."""

    async def edit(
        self, *, base_image: str, ref_image: str, prompt: str, seed: int
    ) -> object:
        """Submit one edit and return the raw decoded response."""


def _random_seed() -> int:
    return random.randint(0, _MAX_SEED)  # noqa: S311


@dataclass
class GenerationService:
    """Plans, gates and executes a user's generation batch."""

    client: GenerationClient
    user_service: UserService
    session_service: SessionService
    usage_service: UsageService
    telegram_client: TelegramClient
    daily_limit: int
    timeout_seconds: float = 120.0
    seed_factory: Callable[[], int] = field(default=_random_seed)

    def plan(self, user_id: str) -> GenerationPlan:
        """Validate preconditions and quota and return the batch plan."""
        if not self.user_service.is_approved(user_id):
            raise AuthorizationDeniedError(user_id)
        session = self.session_service.get(user_id)
        if session is None or not session.model_name:
            raise PreconditionUnmetError(
                "Set model name first with /model <Name> and upload base images."
            )
        if not session.base_images:
            raise PreconditionUnmetError("Upload at least one base image (model).")
        if not session.ref_images:
            raise PreconditionUnmetError(
                "Upload at least one reference image (style/pose) "
                "or use /fetch_instagram."
            )
        plan = GenerationPlan(
            model_name=session.model_name,
            base_image=session.base_images[0],
            references=tuple(session.ref_images[:MAX_REFERENCES]),
            variations_per_ref=VARIATIONS_PER_REFERENCE,
        )
        used = self.usage_service.get_count(user_id)
        if used + plan.total > self.daily_limit:
            raise QuotaExceededError(
                used=used, limit=self.daily_limit, requested=plan.total
            )
        return plan

    async def generate(self, user_id: str, chat_id: int | str) -> GenerationReport:
        """Run the user's batch, streaming results back as they arrive."""
        plan = self.plan(user_id)
        await self._notify(
            chat_id, f"Generating {plan.total} images (may take ~20-60s)..."
        )
        produced = 0
        for reference in plan.calls():
            image_url = await self._generate_one(user_id, chat_id, plan, reference)
            if image_url is None:
                continue
            produced += 1
            await self._deliver(chat_id, image_url, f"Result {produced}/{plan.total}")

        self.usage_service.add_usage(user_id, plan.total)
        self.session_service.clear(user_id)
        report = GenerationReport(requested=plan.total, produced=produced)
        logger.info(
            "Generation batch finished",
            extra={
                "user_id": user_id,
                "requested": report.requested,
                "produced": report.produced,
            },
        )
        await self._notify(
            chat_id,
            f"✅ Done: {report.produced} of {report.requested} images generated. "
            "Today's usage updated.",
        )
        return report

    async def _generate_one(
        self,
        user_id: str,
        chat_id: int | str,
        plan: GenerationPlan,
        reference: str,
    ) -> str | None:
        try:
            response = await asyncio.wait_for(
                self.client.edit(
                    base_image=plan.base_image,
                    ref_image=reference,
                    prompt=plan.prompt,
                    seed=self.seed_factory(),
                ),
                timeout=self.timeout_seconds,
            )
        except Exception:
            logger.exception("Generation call failed", extra={"user_id": user_id})
            await self._notify(chat_id, "⚠️ Error during generation. Try again later.")
            return None
        image_url = extract_image_url(response)
        if image_url is None:
            logger.warning(
                "No image URL in generation response",
                extra={"user_id": user_id, "response": response},
            )
            await self._notify(
                chat_id, "⚠️ Generation returned no image for one variation."
            )
        return image_url

    async def _notify(self, chat_id: int | str, text: str) -> None:
        try:
            await self.telegram_client.send_message(chat_id=chat_id, text=text)
        except Exception:
            logger.exception("sendMessage failed", extra={"chat_id": chat_id})

    async def _deliver(self, chat_id: int | str, image_url: str, caption: str) -> None:
        try:
            await self.telegram_client.send_photo(
                chat_id=chat_id, photo=image_url, caption=caption
            )
        except Exception:
            logger.exception("sendPhoto failed", extra={"chat_id": chat_id})
