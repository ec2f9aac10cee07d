"""Tests for per-user serialization."""

import asyncio

import pytest

from portrait_studio.api.telegram_models import TelegramUpdate
from portrait_studio.api.webhook import UpdateDispatcher
from portrait_studio.domain.models import UserStatus
from portrait_studio.services.locks import UserLocks


def test_same_user_blocks_are_serialized() -> None:
    locks = UserLocks()
    events: list[str] = []

    async def work(name: str) -> None:
        async with locks.hold("42"):
            events.append(f"{name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{name}:end")

    async def scenario() -> None:
        await asyncio.gather(work("a"), work("b"))

    asyncio.run(scenario())

    assert events == ["a:start", "a:end", "b:start", "b:end"]


def test_different_users_do_not_block_each_other() -> None:
    locks = UserLocks()
    events: list[str] = []

    async def work(user_id: str) -> None:
        async with locks.hold(user_id):
            events.append(f"{user_id}:start")
            await asyncio.sleep(0.01)
            events.append(f"{user_id}:end")

    async def scenario() -> None:
        await asyncio.gather(work("1"), work("2"))

    asyncio.run(scenario())

    assert events[:2] == ["1:start", "2:start"]


def test_idle_user_locks_are_released() -> None:
    locks = UserLocks()
    sizes: list[int] = []

    async def work(user_id: str) -> None:
        async with locks.hold(user_id):
            sizes.append(len(locks))
            await asyncio.sleep(0.01)

    async def scenario() -> None:
        await asyncio.gather(work("1"), work("1"), work("2"))

    asyncio.run(scenario())

    assert max(sizes) == 2
    assert len(locks) == 0


def test_lock_is_released_when_block_raises() -> None:
    locks = UserLocks()

    async def failing() -> None:
        async with locks.hold("42"):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(failing())

    assert len(locks) == 0


def test_rapid_generate_commands_do_not_double_spend(
    container, generation_client
) -> None:
    generation_client.delay = 0.01
    container.user_service.set_status("42", UserStatus.APPROVED)
    container.session_service.set_model_name("42", "Aria")
    container.session_service.add_photo("42", "base")
    container.session_service.add_references("42", ["r1", "r2"])
    dispatcher = UpdateDispatcher(container)

    def generate_update(update_id: int) -> TelegramUpdate:
        return TelegramUpdate.model_validate(
            {
                "update_id": update_id,
                "message": {
                    "message_id": update_id,
                    "date": 1700000000,
                    "chat": {"id": 42, "type": "private"},
                    "from": {"id": 42, "is_bot": False, "first_name": "A"},
                    "text": "/generate",
                },
            }
        )

    async def scenario() -> None:
        await asyncio.gather(
            dispatcher.dispatch(generate_update(1)),
            dispatcher.dispatch(generate_update(2)),
        )

    asyncio.run(scenario())

    assert len(generation_client.calls) == 4
    assert container.usage_service.get_count("42") == 4
    texts = container.telegram_client.texts_for(42)
    assert "Set model name first" in texts[-1]
