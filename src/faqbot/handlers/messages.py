"""Text message handlers: /start, the browse button text, and search queries.

A text is a search query when it is a /search command (optionally addressed
as /search@BotName, as group chats send it) or when the chat is in search
mode (set by the Search button). The start command and the browse
text are never treated as queries, so a chat stuck in search mode can always
get back to the menu.

Replies to text are always new messages; the user's own message is never
edited.
"""

import logging

from ..knowledge_base import KnowledgeBase
from ..search_state import SearchModeStore, SearchStateStore
from ..slug_mapping import SlugMapper
from .base import MessageHandler
from .callback_data import CB_MAIN_MENU
from .publisher import ResponsePublisher
from .response import Button, Context, Response
from .search import render_results, search_prompt
from .texts import (
    BROWSE_FAQ_BUTTON,
    CMD_SEARCH,
    CMD_START,
    OPENING_MAIN_MENU,
    SEARCH_NOT_FOUND,
    WELCOME,
)

logger = logging.getLogger(__name__)


def _split_command(text: str) -> tuple[str, str]:
    """Split text into its command word and the rest.

    The command word loses any @BotName suffix group chats add, so
    "/search@FaqBot cards" gives ("/search", "cards"). Non-command text gives
    ("", text).
    """
    stripped = text.strip()
    if not stripped.startswith("/"):
        return "", stripped
    word, *rest = stripped.split(maxsplit=1)
    return word.split("@", 1)[0], rest[0] if rest else ""


def _is_menu_text(text: str) -> bool:
    command, rest = _split_command(text)
    if command:
        return command == CMD_START and not rest
    return rest == BROWSE_FAQ_BUTTON


class StartMessageHandler(MessageHandler):
    def __init__(
        self, publisher: ResponsePublisher, search_mode: SearchModeStore
    ) -> None:
        super().__init__(publisher)
        self.search_mode = search_mode

    def can_handle(self, context: Context, text: str) -> bool:
        return _is_menu_text(text)

    async def handle(self, context: Context, text: str) -> None:
        logger.info("Handling start/browse message in chat %d", context.chat_id)
        self.search_mode.clear(context.chat_id)
        command, _ = _split_command(text)
        body = WELCOME if command == CMD_START else OPENING_MAIN_MENU
        await self.publisher.publish(
            context,
            Response(body, [[Button(BROWSE_FAQ_BUTTON, CB_MAIN_MENU)]]),
        )


class SearchMessageHandler(MessageHandler):
    def __init__(
        self,
        publisher: ResponsePublisher,
        kb: KnowledgeBase,
        slugs: SlugMapper,
        search_state: SearchStateStore,
        search_mode: SearchModeStore,
        page_size: int,
    ) -> None:
        super().__init__(publisher)
        self.kb = kb
        self.slugs = slugs
        self.search_state = search_state
        self.search_mode = search_mode
        self.page_size = page_size

    def can_handle(self, context: Context, text: str) -> bool:
        command, rest = _split_command(text)
        if not (command or rest) or _is_menu_text(text):
            return False
        if command == CMD_SEARCH:
            return True
        return self.search_mode.is_awaiting(context.chat_id)

    async def handle(self, context: Context, text: str) -> None:
        command, query = _split_command(text)
        if command and command != CMD_SEARCH:
            query = text.strip()

        if not query:
            # Bare /search: wait for the query in the next message
            self.search_mode.set(context.chat_id)
            await self.publisher.publish(context, search_prompt(edit=False))
            return

        logger.info("Search query from chat %d: %r", context.chat_id, query)
        self.search_mode.clear(context.chat_id)

        if not self.kb.search(query, limit=1):
            await self.publisher.publish(context, Response(SEARCH_NOT_FOUND))
            return

        self.search_state.set(context.chat_id, query, self.page_size)
        await self.publisher.publish(
            context,
            render_results(self.kb, self.slugs, query, self.page_size, edit=False),
        )
