"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of public bot commands (single source of truth)."""

    START = TelegramCommand("start", "Request access to the bot")
    MODEL = TelegramCommand("model", "Set the model name: /model <Name>")
    FETCH_INSTAGRAM = TelegramCommand(
        "fetch_instagram", "Add reference images from an Instagram handle"
    )
    GENERATE = TelegramCommand("generate", "Generate images from your session")
    STATUS = TelegramCommand("status", "Approval status and today's usage")


class AdminCommand(Enum):
    """Commands only the admin identity may run."""

    PENDING = TelegramCommand("pending", "List users awaiting approval")
    APPROVED = TelegramCommand("approved", "List approved users")


def telegram_commands() -> list[dict[str, str]]:
    """Return public commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]
