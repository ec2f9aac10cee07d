"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse

from portrait_studio.api.telegram_models import TelegramUpdate
from portrait_studio.api.webhook import UpdateDispatcher
from portrait_studio.app_logging import configure_logging
from portrait_studio.containers import AppContainer
from portrait_studio.telegram_commands import telegram_commands

LIVENESS_TEXT = "Private portrait studio bot is alive"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            await state_container.telegram_client.set_my_commands(telegram_commands())
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        webhook_url = state_container.settings.webhook_url
        if webhook_url:
            try:
                await state_container.telegram_client.set_webhook(webhook_url)
                logger.info("Webhook set", extra={"webhook_url": webhook_url})
            except Exception:
                logger.exception(
                    "Failed to set webhook automatically",
                    extra={"webhook_url": webhook_url},
                )
        else:
            logger.warning("BASE_URL not configured; webhook must be set manually")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.dispatcher = UpdateDispatcher(container)

    @app.get("/", response_class=PlainTextResponse)
    async def liveness() -> str:
        """Plain-text liveness probe."""
        return LIVENESS_TEXT

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Accept a Telegram update and process it after responding."""
        dispatcher: UpdateDispatcher = request.app.state.dispatcher
        background_tasks.add_task(dispatcher.dispatch, update)
        return {"status": "ok"}

    return app
