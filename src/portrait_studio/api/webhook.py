"""Routing of Telegram updates to services."""

import logging
from dataclasses import dataclass

from portrait_studio.api.telegram_models import (
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
    TelegramUser,
)
from portrait_studio.containers import AppContainer
from portrait_studio.domain.errors import (
    AuthorizationDeniedError,
    PreconditionUnmetError,
    QuotaExceededError,
    SourceUnavailableError,
)
from portrait_studio.domain.models import UserStatus, UserSummary
from portrait_studio.domain.sessions import ImageRole
from portrait_studio.services.approval import (
    APPROVE_ACTION,
    DENY_ACTION,
    REQUEST_ACTION,
    CallbackRef,
    parse_callback_data,
)
from portrait_studio.services.sources import FETCH_LIMIT, normalize_handle
from portrait_studio.telegram_commands import AdminCommand, BotCommand

logger = logging.getLogger(__name__)

NOT_APPROVED_TEXT = "🔒 Not approved."


@dataclass
class UpdateDispatcher:
    """Handles one update at a time per sender."""

    container: AppContainer

    async def dispatch(self, update: TelegramUpdate) -> None:
        """Process an update; never raises."""
        sender = _extract_sender(update)
        if sender is None:
            return
        async with self.container.user_locks.hold(str(sender.id)):
            try:
                await self._route(update)
            except Exception as exc:
                logger.exception(
                    "Failed to handle update",
                    extra={"update_id": update.update_id, "user_id": sender.id},
                )
                await self._report_failure(update, exc)

    async def _route(self, update: TelegramUpdate) -> None:
        if update.callback_query:
            await self._handle_callback(update.callback_query)
            return
        message = update.message
        if message is None or message.from_user is None:
            return
        if message.photo:
            await self._handle_photo(message, message.from_user, message.photo)
            return
        if message.text:
            parsed = _parse_command(message.text)
            if parsed:
                command, args = parsed
                await self._handle_command(message, message.from_user, command, args)

    async def _handle_callback(self, callback: TelegramCallbackQuery) -> None:
        approval = self.container.approval_service
        ref = CallbackRef(
            query_id=callback.id,
            chat_id=callback.message.chat.id if callback.message else None,
            message_id=callback.message.message_id if callback.message else None,
        )
        action, target = parse_callback_data(callback.data or "")
        if action == REQUEST_ACTION:
            await approval.request_access(
                user_id=str(callback.from_user.id),
                display_name=callback.from_user.display_name or None,
                callback=ref,
            )
        elif action == APPROVE_ACTION:
            await approval.approve(callback.from_user.id, target, ref)
        elif action == DENY_ACTION:
            await approval.deny(callback.from_user.id, target, ref)
        else:
            await self.container.telegram_client.answer_callback_query(callback.id)

    async def _handle_command(  # noqa: PLR0911
        self,
        message: TelegramMessage,
        sender: TelegramUser,
        command: str,
        args: str,
    ) -> None:
        user_id = str(sender.id)
        chat_id = message.chat.id
        if command == BotCommand.START.value.command:
            await self.container.start_command_handler.handle(user_id, chat_id)
            return
        if command == BotCommand.STATUS.value.command:
            await self._reply(chat_id, self._format_status(user_id))
            return
        if command == BotCommand.MODEL.value.command:
            await self._handle_model(user_id, chat_id, args)
            return
        if command == BotCommand.FETCH_INSTAGRAM.value.command:
            await self._handle_fetch(user_id, chat_id, args)
            return
        if command == BotCommand.GENERATE.value.command:
            await self._handle_generate(user_id, chat_id)
            return
        if command == AdminCommand.PENDING.value.command:
            await self._handle_listing(user_id, chat_id, UserStatus.PENDING)
            return
        if command == AdminCommand.APPROVED.value.command:
            await self._handle_listing(user_id, chat_id, UserStatus.APPROVED)

    async def _handle_model(self, user_id: str, chat_id: int, args: str) -> None:
        if not self.container.user_service.is_approved(user_id):
            await self._reply(
                chat_id, "🔒 You are not approved yet. Tap Request Access first."
            )
            return
        if not args:
            await self._reply(chat_id, "Usage: /model <Model Name>")
            return
        self.container.session_service.set_model_name(user_id, args)
        await self._reply(
            chat_id,
            f"Model name set to: {args}. Now send base images (1-2), then "
            "reference images (1-3) or use /fetch_instagram <username>.",
        )

    async def _handle_fetch(self, user_id: str, chat_id: int, args: str) -> None:
        if not self.container.user_service.is_approved(user_id):
            await self._reply(chat_id, NOT_APPROVED_TEXT)
            return
        handle = normalize_handle(args.split()[0]) if args.split() else ""
        if not handle:
            await self._reply(chat_id, "Usage: /fetch_instagram <username>")
            return
        await self._reply(chat_id, f"Fetching recent images for @{handle}...")
        try:
            image_urls = await self.container.image_source_client.fetch_images(
                handle, FETCH_LIMIT
            )
        except SourceUnavailableError as exc:
            logger.warning(
                "Image source unavailable",
                extra={"user_id": user_id, "handle": handle, "error": str(exc)},
            )
            await self._reply(chat_id, f"Failed to fetch Instagram images: {exc}")
            return
        if not image_urls:
            await self._reply(chat_id, "No images found.")
            return
        self.container.session_service.add_references(user_id, image_urls)
        await self._reply(
            chat_id,
            f"Added {len(image_urls)} reference images from @{handle}. "
            "Send /generate when ready.",
        )

    async def _handle_generate(self, user_id: str, chat_id: int) -> None:
        try:
            await self.container.generation_service.generate(user_id, chat_id)
        except AuthorizationDeniedError:
            await self._reply(chat_id, NOT_APPROVED_TEXT)
        except PreconditionUnmetError as exc:
            await self._reply(chat_id, str(exc))
        except QuotaExceededError as exc:
            await self._reply(
                chat_id,
                f"⚠️ Daily limit exceeded. You have used {exc.used}/{exc.limit} "
                f"images today. This request would generate {exc.requested}.",
            )

    async def _handle_listing(
        self, user_id: str, chat_id: int, status: UserStatus
    ) -> None:
        if not self.container.approval_service.is_admin(user_id):
            return
        users = self.container.user_service.list_by_status(status)
        await self._reply(chat_id, _format_user_list(status, users))

    async def _handle_photo(
        self,
        message: TelegramMessage,
        sender: TelegramUser,
        photos: list[TelegramPhotoSize],
    ) -> None:
        user_id = str(sender.id)
        chat_id = message.chat.id
        if not self.container.user_service.is_approved(user_id):
            self.container.user_service.ensure_pending(
                user_id, sender.display_name or None
            )
            await self._reply(
                chat_id,
                "🔒 You're not approved yet. "
                "Tap Request Access or wait for admin approval.",
            )
            return
        photo = _select_largest_photo(photos)
        image_url = await self.container.telegram_file_client.resolve_file_url(
            photo.file_id
        )
        role, count = self.container.session_service.add_photo(user_id, image_url)
        if role is ImageRole.BASE:
            await self._reply(
                chat_id, f"✅ Base image added (total base images: {count})."
            )
            return
        await self._reply(
            chat_id,
            f"✅ Reference image added (total refs: {count}). "
            "Send /generate when ready.",
        )

    def _format_status(self, user_id: str) -> str:
        status = self.container.user_service.get_status(user_id)
        used = self.container.usage_service.get_count(user_id)
        limit = self.container.settings.daily_limit
        label = status.value if status else "none"
        return f"Status: {label}\nToday usage: {used}/{limit}"

    async def _reply(self, chat_id: int, text: str) -> None:
        await self.container.telegram_client.send_message(chat_id=chat_id, text=text)

    async def _report_failure(self, update: TelegramUpdate, exc: Exception) -> None:
        chat_id = _extract_chat_id(update)
        if chat_id is None:
            return
        try:
            await self._reply(
                chat_id,
                _format_error(
                    self.container, exc, "Something went wrong. Please try again."
                ),
            )
        except Exception:
            logger.exception("Failed to report error", extra={"chat_id": chat_id})


def _parse_command(text: str) -> tuple[str, str] | None:
    """Split '/command@bot args' into the command name and its argument string."""
    stripped = text.strip()
    if not stripped.startswith("/"):
        return None
    head, _, args = stripped.partition(" ")
    command = head[1:].split("@", maxsplit=1)[0].lower()
    if not command:
        return None
    return command, args.strip()


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _extract_sender(update: TelegramUpdate) -> TelegramUser | None:
    if update.callback_query:
        return update.callback_query.from_user
    if update.message:
        return update.message.from_user
    return None


def _extract_chat_id(update: TelegramUpdate) -> int | None:
    if update.message:
        return update.message.chat.id
    if update.callback_query:
        if update.callback_query.message:
            return update.callback_query.message.chat.id
        return update.callback_query.from_user.id
    return None


def _format_error(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _format_user_list(status: UserStatus, users: list[UserSummary]) -> str:
    if not users:
        return f"No {status.value} users."
    lines = [f"{status.value.capitalize()} users:"]
    for user in users:
        name = f" (@{user.display_name})" if user.display_name else ""
        lines.append(f"- {user.user_id}{name}")
    return "\n".join(lines)
