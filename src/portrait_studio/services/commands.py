"""Command handlers for Telegram updates."""

from dataclasses import dataclass

from portrait_studio.adapters.telegram_client import TelegramClient
from portrait_studio.services.approval import request_access_keyboard
from portrait_studio.services.users import UserService


@dataclass
class StartCommandHandler:
    """Handle the /start Telegram command."""

    user_service: UserService
    telegram_client: TelegramClient

    async def handle(self, user_id: str, chat_id: int) -> None:
        """Greet approved users, offer everyone else a Request Access button."""
        if self.user_service.is_approved(user_id):
            await self.telegram_client.send_message(
                chat_id=chat_id,
                text=(
                    "Welcome back! Set a model with /model <Name>, send base and "
                    "reference photos, then /generate."
                ),
            )
            return
        await self.telegram_client.send_message(
            chat_id=chat_id,
            text=(
                "🔒 This bot is private. "
                "Tap Request Access to ask the admin for permission."
            ),
            reply_markup=request_access_keyboard(chat_id),
        )
