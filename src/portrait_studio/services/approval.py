"""Admin approval workflow for access requests."""

import logging
from dataclasses import dataclass

from portrait_studio.adapters.telegram_client import TelegramClient
from portrait_studio.domain.models import UserStatus
from portrait_studio.services.users import UserService

logger = logging.getLogger(__name__)

REQUEST_ACTION = "request"
APPROVE_ACTION = "approve"
DENY_ACTION = "deny"
_SEPARATOR = "_"


@dataclass(frozen=True)
class CallbackRef:
    """The inline button press being handled."""

    query_id: str
    chat_id: int | None = None
    message_id: int | None = None


def callback_data(action: str, user_id: int | str) -> str:
    """Build button payloads in the format <action>_<user id>."""
    return f"{action}{_SEPARATOR}{user_id}"


def parse_callback_data(data: str) -> tuple[str, str | None]:
    """Split a button payload into action and target user id."""
    action, separator, target = data.partition(_SEPARATOR)
    if not separator or not target:
        return action, None
    return action, target


def request_access_keyboard(user_id: int | str) -> dict:
    return {
        "inline_keyboard": [
            [
                {
                    "text": "Request Access",
                    "callback_data": callback_data(REQUEST_ACTION, user_id),
                }
            ]
        ]
    }


def _decision_keyboard(user_id: str) -> dict:
    return {
        "inline_keyboard": [
            [
                {
                    "text": "✅ Approve",
                    "callback_data": callback_data(APPROVE_ACTION, user_id),
                },
                {
                    "text": "🚫 Deny",
                    "callback_data": callback_data(DENY_ACTION, user_id),
                },
            ]
        ]
    }


@dataclass
class ApprovalService:
    """Gates access behind decisions made by a single admin identity."""

    user_service: UserService
    telegram_client: TelegramClient
    admin_id: str

    def is_admin(self, user_id: int | str) -> bool:
        return str(user_id) == str(self.admin_id)

    async def request_access(
        self,
        user_id: str,
        display_name: str | None,
        callback: CallbackRef,
    ) -> bool:
        """Register the request and notify the admin; return whether it was new."""
        created = self.user_service.ensure_pending(user_id, display_name)
        await self.telegram_client.answer_callback_query(
            callback.query_id, text="Access request sent to admin."
        )
        await self.telegram_client.send_message(
            chat_id=user_id,
            text="✅ Request sent. You'll be notified when approved.",
        )
        await self.telegram_client.send_message(
            chat_id=self.admin_id,
            text=(
                "🆕 Access Request\n"
                f"User: @{display_name or 'unknown'}\n"
                f"Chat ID: {user_id}"
            ),
            reply_markup=_decision_keyboard(user_id),
        )
        logger.info(
            "Access requested", extra={"user_id": user_id, "new_request": created}
        )
        return created

    async def approve(
        self, actor_id: int | str, target_id: str | None, callback: CallbackRef
    ) -> bool:
        """Approve the target user when invoked by the admin."""
        return await self._decide(
            actor_id,
            target_id,
            callback,
            status=UserStatus.APPROVED,
            admin_ack="User approved.",
            user_text="✅ You have been approved! You can now use /model and /generate.",
            admin_text="Approved user {target_id}",
        )

    async def deny(
        self, actor_id: int | str, target_id: str | None, callback: CallbackRef
    ) -> bool:
        """Deny the target user when invoked by the admin."""
        return await self._decide(
            actor_id,
            target_id,
            callback,
            status=UserStatus.DENIED,
            admin_ack="User denied.",
            user_text="🚫 Your access request was denied by the admin.",
            admin_text="Denied user {target_id}",
        )

    async def _decide(  # noqa: PLR0913
        self,
        actor_id: int | str,
        target_id: str | None,
        callback: CallbackRef,
        *,
        status: UserStatus,
        admin_ack: str,
        user_text: str,
        admin_text: str,
    ) -> bool:
        if not self.is_admin(actor_id) or target_id is None:
            await self.telegram_client.answer_callback_query(callback.query_id)
            return False
        self.user_service.set_status(target_id, status)
        logger.info(
            "Access decision recorded",
            extra={"user_id": target_id, "status": status.value},
        )
        await self.telegram_client.answer_callback_query(
            callback.query_id, text=admin_ack
        )
        try:
            await self.telegram_client.send_message(chat_id=target_id, text=user_text)
        except Exception:
            logger.exception(
                "Failed to notify user of access decision",
                extra={"user_id": target_id},
            )
        if callback.chat_id is not None and callback.message_id is not None:
            await self.telegram_client.edit_message_text(
                chat_id=callback.chat_id,
                message_id=callback.message_id,
                text=admin_text.format(target_id=target_id),
            )
        return True
