"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from portrait_studio.adapters.apify_source_client import ApifyImageSourceClient
from portrait_studio.adapters.instagram_source_client import (
    DirectInstagramSourceClient,
)
from portrait_studio.adapters.json_file_store import JsonFileStore
from portrait_studio.adapters.json_usage_repository import JsonUsageRepository
from portrait_studio.adapters.json_user_repository import JsonUserRepository
from portrait_studio.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from portrait_studio.adapters.telegram_file_client import (
    HttpxTelegramFileClient,
    TelegramFileClient,
)
from portrait_studio.adapters.wavespeed_client import WavespeedClient
from portrait_studio.config import Settings, load_settings
from portrait_studio.services.approval import ApprovalService
from portrait_studio.services.commands import StartCommandHandler
from portrait_studio.services.generation import GenerationService
from portrait_studio.services.locks import UserLocks
from portrait_studio.services.sessions import InMemorySessionStore, SessionService
from portrait_studio.services.sources import ImageSourceClient
from portrait_studio.services.usage import UsageService
from portrait_studio.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    telegram_file_client: TelegramFileClient
    user_service: UserService
    usage_service: UsageService
    session_service: SessionService
    approval_service: ApprovalService
    generation_service: GenerationService
    image_source_client: ImageSourceClient
    start_command_handler: StartCommandHandler
    user_locks: UserLocks
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or load_settings()
    users_store = JsonFileStore(resolved_settings.data_dir / "users.json")
    usage_store = JsonFileStore(resolved_settings.data_dir / "usage.json")
    users_store.ensure()
    usage_store.ensure()

    user_service = UserService(JsonUserRepository(users_store))
    usage_service = UsageService(JsonUsageRepository(usage_store))
    session_service = SessionService(InMemorySessionStore())
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    telegram_file_client = HttpxTelegramFileClient.create(
        resolved_settings.telegram_bot_token
    )
    wavespeed_client = WavespeedClient.create(
        api_key=resolved_settings.wavespeed_api_key,
        base_url=resolved_settings.wavespeed_base_url,
    )
    image_source_client: ApifyImageSourceClient | DirectInstagramSourceClient
    if resolved_settings.image_source_provider == "apify":
        image_source_client = ApifyImageSourceClient.create(
            token=resolved_settings.apify_token,
            actor=resolved_settings.apify_actor,
        )
    else:
        image_source_client = DirectInstagramSourceClient.create()
    approval_service = ApprovalService(
        user_service=user_service,
        telegram_client=telegram_client,
        admin_id=resolved_settings.admin_id,
    )
    generation_service = GenerationService(
        client=wavespeed_client,
        user_service=user_service,
        session_service=session_service,
        usage_service=usage_service,
        telegram_client=telegram_client,
        daily_limit=resolved_settings.daily_limit,
        timeout_seconds=resolved_settings.generation_timeout_seconds,
    )
    start_handler = StartCommandHandler(user_service, telegram_client)

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()
        await wavespeed_client.close()
        await image_source_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        telegram_file_client=telegram_file_client,
        user_service=user_service,
        usage_service=usage_service,
        session_service=session_service,
        approval_service=approval_service,
        generation_service=generation_service,
        image_source_client=image_source_client,
        start_command_handler=start_handler,
        user_locks=UserLocks(),
        close_resources=close_resources,
    )
