"""Response delivery: turns Response descriptors into Telegram API calls.

ResponsePublisher is the interface handlers depend on; TelegramPublisher
implements it on top of a python-telegram-bot Bot.

Transport outcomes that are not errors from the user's point of view are
absorbed here:
  - "message is not modified": the edit is a no-op
  - "message can't be edited" / "message to edit not found": send instead
  - HTML entity parse failure: retry as plain text
RetryAfter is always re-raised so flood control stays visible to the caller.

Functions:
  - build_markup: Keyboard -> InlineKeyboardMarkup (payloads fitted to 64 bytes)
"""

import logging
from typing import Any, Protocol

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import BadRequest, RetryAfter, TelegramError

from .callback_data import fit_callback_data
from .response import Context, Keyboard, Response

logger = logging.getLogger(__name__)

# Disable link previews in all messages to reduce visual noise
NO_LINK_PREVIEW = LinkPreviewOptions(is_disabled=True)

_NOT_MODIFIED = "message is not modified"
_EDIT_TARGET_GONE = ("message can't be edited", "message to edit not found")
_PARSE_ERROR = "can't parse entities"


class ResponsePublisher(Protocol):
    async def publish(self, context: Context, response: Response) -> None: ...

    async def edit_reply_markup(
        self, chat_id: int, message_id: int, keyboard: Keyboard
    ) -> None: ...

    async def answer_callback(
        self, callback_query_id: str, text: str | None = None
    ) -> None: ...

    async def delete_message(self, chat_id: int, message_id: int) -> None: ...


def build_markup(keyboard: Keyboard | None) -> InlineKeyboardMarkup | None:
    if keyboard is None:
        return None
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(
                    b.text, callback_data=fit_callback_data(b.callback_data)
                )
                for b in row
            ]
            for row in keyboard
        ]
    )


def _matches(exc: TelegramError, *needles: str) -> bool:
    message = str(exc).lower()
    return any(n in message for n in needles)


class TelegramPublisher:
    """ResponsePublisher backed by the Telegram Bot API."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def publish(self, context: Context, response: Response) -> None:
        markup = build_markup(response.keyboard)
        if response.edit and context.message_id is not None:
            if await self._edit(context.chat_id, context.message_id, response, markup):
                return
        await self._send(context.chat_id, response.text, reply_markup=markup)

    async def _edit(
        self,
        chat_id: int,
        message_id: int,
        response: Response,
        markup: InlineKeyboardMarkup | None,
    ) -> bool:
        """Edit in place. Returns False when the caller should send instead."""
        kwargs: dict[str, Any] = {
            "chat_id": chat_id,
            "message_id": message_id,
            "reply_markup": markup,
            "link_preview_options": NO_LINK_PREVIEW,
        }
        try:
            await self.bot.edit_message_text(
                response.text, parse_mode=ParseMode.HTML, **kwargs
            )
            return True
        except RetryAfter:
            raise
        except BadRequest as exc:
            if _matches(exc, _NOT_MODIFIED):
                return True
            if _matches(exc, *_EDIT_TARGET_GONE):
                logger.info(
                    "Message %d in chat %d can't be edited (%s), sending new",
                    message_id,
                    chat_id,
                    exc,
                )
                return False
            if not _matches(exc, _PARSE_ERROR):
                raise

        logger.warning("HTML rejected for message %d, editing as plain text", message_id)
        try:
            await self.bot.edit_message_text(response.text, **kwargs)
        except BadRequest as exc:
            if _matches(exc, _NOT_MODIFIED):
                return True
            if _matches(exc, *_EDIT_TARGET_GONE):
                return False
            raise
        return True

    async def _send(self, chat_id: int, text: str, **kwargs: Any) -> None:
        kwargs.setdefault("link_preview_options", NO_LINK_PREVIEW)
        try:
            await self.bot.send_message(
                chat_id=chat_id, text=text, parse_mode=ParseMode.HTML, **kwargs
            )
        except RetryAfter:
            raise
        except BadRequest as exc:
            if not _matches(exc, _PARSE_ERROR):
                raise
            logger.warning("HTML rejected for chat %d, sending as plain text", chat_id)
            await self.bot.send_message(chat_id=chat_id, text=text, **kwargs)

    async def edit_reply_markup(
        self, chat_id: int, message_id: int, keyboard: Keyboard
    ) -> None:
        try:
            await self.bot.edit_message_reply_markup(
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=build_markup(keyboard),
            )
        except BadRequest as exc:
            if _matches(exc, _NOT_MODIFIED):
                return
            if _matches(exc, *_EDIT_TARGET_GONE):
                logger.info("Can't replace buttons of message %d: %s", message_id, exc)
                return
            raise

    async def answer_callback(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        try:
            await self.bot.answer_callback_query(callback_query_id, text=text)
        except TelegramError as e:
            # Query too old or already answered; nothing left to do.
            logger.debug("Failed to answer callback %s: %s", callback_query_id, e)

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        try:
            await self.bot.delete_message(chat_id=chat_id, message_id=message_id)
        except BadRequest as e:
            logger.debug("Failed to delete message %d in %d: %s", message_id, chat_id, e)
