"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pytest

from portrait_studio.adapters.telegram_client import TelegramClient
from portrait_studio.config import Settings
from portrait_studio.containers import AppContainer
from portrait_studio.domain.models import UserRecord
from portrait_studio.services.approval import ApprovalService
from portrait_studio.services.commands import StartCommandHandler
from portrait_studio.services.generation import GenerationClient, GenerationService
from portrait_studio.services.locks import UserLocks
from portrait_studio.services.sessions import InMemorySessionStore, SessionService
from portrait_studio.services.sources import ImageSourceClient
from portrait_studio.services.usage import UsageRepository, UsageService
from portrait_studio.services.users import UserRepository, UserService

TODAY = date(2026, 10, 18)
ADMIN_ID = "1000"


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)

    def get_user(self, user_id: str) -> UserRecord | None:
        return self.users.get(user_id)

    def save_user(self, record: UserRecord) -> None:
        self.users[record.user_id] = record

    def list_users(self) -> list[UserRecord]:
        return list(self.users.values())


@dataclass
class InMemoryUsageRepository(UsageRepository):
    """In-memory usage ledger for tests."""

    counts: dict[tuple[date, str], int] = field(default_factory=dict)

    def get_count(self, day: date, user_id: str) -> int:
        return self.counts.get((day, user_id), 0)

    def add_count(self, day: date, user_id: str, delta: int) -> int:
        total = self.counts.get((day, user_id), 0) + delta
        self.counts[(day, user_id)] = total
        return total


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records outgoing calls."""

    messages: list[tuple[str, str]] = field(default_factory=list)
    markups: list[dict | None] = field(default_factory=list)
    photos: list[tuple[str, str, str | None]] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    edits: list[tuple[str, int, str]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    webhook_url: str | None = None
    unreachable_chats: set[str] = field(default_factory=set)

    async def send_message(
        self, chat_id: int | str, text: str, reply_markup: dict | None = None
    ) -> None:
        if str(chat_id) in self.unreachable_chats:
            raise RuntimeError("Forbidden: bot was blocked by the user")
        self.messages.append((str(chat_id), text))
        self.markups.append(reply_markup)

    async def send_photo(
        self, chat_id: int | str, photo: str, caption: str | None = None
    ) -> None:
        self.photos.append((str(chat_id), photo, caption))

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def edit_message_text(
        self, chat_id: int | str, message_id: int, text: str
    ) -> None:
        self.edits.append((str(chat_id), message_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_webhook(self, url: str) -> None:
        self.webhook_url = url

    def texts_for(self, chat_id: int | str) -> list[str]:
        return [text for target, text in self.messages if target == str(chat_id)]


@dataclass
class FakeTelegramFileClient:
    """Fake Telegram file client that builds predictable URLs."""

    async def resolve_file_url(self, file_id: str) -> str:
        return f"https://files.test/{file_id}.jpg"


@dataclass
class FakeGenerationClient(GenerationClient):
    """Fake backend replaying queued responses or raising queued errors."""

    responses: list[object] = field(default_factory=list)
    calls: list[dict[str, object]] = field(default_factory=list)
    delay: float = 0.0

    async def edit(
        self, *, base_image: str, ref_image: str, prompt: str, seed: int
    ) -> object:
        self.calls.append(
            {
                "base_image": base_image,
                "ref_image": ref_image,
                "prompt": prompt,
                "seed": seed,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.responses:
            response = self.responses.pop(0)
        else:
            response = {
                "data": {"outputs": [f"https://cdn.test/result-{len(self.calls)}.png"]}
            }
        if isinstance(response, Exception):
            raise response
        return response


@dataclass
class FakeImageSourceClient(ImageSourceClient):
    """Fake image source returning fixed URLs or raising an error."""

    urls: list[str] = field(default_factory=list)
    error: Exception | None = None
    requests: list[tuple[str, int]] = field(default_factory=list)

    async def fetch_images(self, handle: str, limit: int) -> list[str]:
        self.requests.append((handle, limit))
        if self.error is not None:
            raise self.error
        return self.urls[:limit]


def make_settings(data_dir: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "telegram_bot_token": "test-token",
        "admin_id": ADMIN_ID,
        "wavespeed_api_key": "wavespeed-key",
        "data_dir": data_dir,
        "environment": "test",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path / "data")


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def usage_repository() -> InMemoryUsageRepository:
    return InMemoryUsageRepository()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def generation_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def image_source_client() -> FakeImageSourceClient:
    return FakeImageSourceClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    usage_repository: InMemoryUsageRepository,
    telegram_client: FakeTelegramClient,
    generation_client: FakeGenerationClient,
    image_source_client: FakeImageSourceClient,
) -> AppContainer:
    user_service = UserService(user_repository)
    usage_service = UsageService(usage_repository, today=lambda: TODAY)
    session_service = SessionService(InMemorySessionStore())
    approval_service = ApprovalService(
        user_service=user_service,
        telegram_client=telegram_client,
        admin_id=settings.admin_id,
    )
    generation_service = GenerationService(
        client=generation_client,
        user_service=user_service,
        session_service=session_service,
        usage_service=usage_service,
        telegram_client=telegram_client,
        daily_limit=settings.daily_limit,
        timeout_seconds=settings.generation_timeout_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        telegram_file_client=FakeTelegramFileClient(),
        user_service=user_service,
        usage_service=usage_service,
        session_service=session_service,
        approval_service=approval_service,
        generation_service=generation_service,
        image_source_client=image_source_client,
        start_command_handler=StartCommandHandler(user_service, telegram_client),
        user_locks=UserLocks(),
        close_resources=close_resources,
    )
