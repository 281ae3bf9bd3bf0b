"""Update dispatcher: classifies updates and routes them to one handler.

Callback queries are matched against an explicit route table built from the
handlers' keys. Routes are scanned in registration order and the first match
wins, so the table is validated when it is built: a prefix route must not be
a leading substring of any other route key, otherwise the later route could
never be reached. Text messages go to the first text handler whose
can_handle() accepts them.

Nothing matching is not an error: the update is dropped with a warning.
Handler exceptions are logged here and re-raised to the application error
handler, which keeps serving other updates.

Key class: Dispatcher.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

from telegram import Update

from .base import CallbackHandler, MessageHandler
from .response import Context

logger = logging.getLogger(__name__)


class Route(NamedTuple):
    key: str
    prefix: bool
    handler: CallbackHandler


def build_routes(handlers: Sequence[CallbackHandler]) -> tuple[Route, ...]:
    """Build the callback route table, rejecting keys that shadow each other."""
    routes = tuple(Route(h.key, h.prefix, h) for h in handlers)
    for i, route in enumerate(routes):
        for j, other in enumerate(routes):
            if i == j:
                continue
            if route.key == other.key:
                raise ValueError(
                    f"Duplicate callback key {route.key!r}: "
                    f"{route.handler.name} and {other.handler.name}"
                )
            if route.prefix and other.key.startswith(route.key):
                raise ValueError(
                    f"Callback prefix {route.key!r} ({route.handler.name}) "
                    f"shadows {other.key!r} ({other.handler.name})"
                )
    return routes


class Dispatcher:
    def __init__(
        self,
        callback_handlers: Sequence[CallbackHandler],
        message_handlers: Sequence[MessageHandler],
    ) -> None:
        self.routes = build_routes(callback_handlers)
        self.message_handlers = tuple(message_handlers)

    def match_callback(self, data: str) -> CallbackHandler | None:
        for route in self.routes:
            if route.handler.can_handle(data):
                return route.handler
        return None

    def match_message(self, context: Context, text: str) -> MessageHandler | None:
        for handler in self.message_handlers:
            if handler.can_handle(context, text):
                return handler
        return None

    async def dispatch(self, update: Update) -> None:
        """Route one Telegram update."""
        query = update.callback_query
        if query is not None:
            if query.data is None:
                logger.debug("Callback query %s without data", query.id)
                return
            message = query.message
            context = Context(
                chat_id=message.chat.id if message is not None else 0,
                message_id=message.message_id if message is not None else None,
                callback_query_id=query.id,
            )
            await self.dispatch_callback(context, query.data)
            return

        message = update.message
        if message is not None and message.text is not None:
            context = Context(chat_id=message.chat.id, message_id=message.message_id)
            await self.dispatch_message(context, message.text)
            return

        logger.debug("Update type not handled: %s", update.update_id)

    async def dispatch_callback(self, context: Context, data: str) -> None:
        handler = self.match_callback(data)
        if handler is None:
            logger.warning("No callback handler found for data: %r", data)
            return

        logger.info("Dispatching callback %r to %s", data, handler.name)
        try:
            await handler.handle(context, data)
        except Exception:
            logger.exception(
                "%s failed for callback %r (chat %d)",
                handler.name,
                data,
                context.chat_id,
            )
            raise

    async def dispatch_message(self, context: Context, text: str) -> None:
        handler = self.match_message(context, text)
        if handler is None:
            logger.warning(
                "No message handler found for message in chat %d: %r",
                context.chat_id,
                text,
            )
            return

        logger.info("Dispatching message to %s", handler.name)
        try:
            await handler.handle(context, text)
        except Exception:
            logger.exception(
                "%s failed for message in chat %d", handler.name, context.chat_id
            )
            raise
