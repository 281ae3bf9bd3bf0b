"""Search callback handlers and the shared results page renderer.

Search state machine per chat:
  Idle --search_start--> AwaitingQuery --text--> ResultsShown(query, visible)
  ResultsShown --search_more--> ResultsShown(query, visible + page_size)
  ResultsShown --article, Back (search:<n>)--> ResultsShown(query, max(n, visible))

Only the query and the visible count are stored; every render re-runs the
search, so the page is rebuilt from the immutable catalog each time.

Units:
  - SearchStartHandler (search_start)
  - SearchMoreHandler (search_more)
  - SearchRestoreHandler (search:)
"""

import logging

from ..knowledge_base import KnowledgeBase
from ..search_state import SearchModeStore, SearchStateStore
from ..slug_mapping import SlugMapper
from .base import CallbackHandler
from .callback_data import (
    CB_MAIN_MENU,
    CB_SEARCH_MORE,
    CB_SEARCH_RESTORE,
    CB_SEARCH_START,
    WithSearchCursor,
    parse_search_restore,
    show_article_data,
)
from .publisher import ResponsePublisher
from .response import Button, Context, Response, chunk_rows
from .texts import (
    MAIN_MENU_BUTTON,
    MORE_BUTTON,
    NO_SEARCH_STATE,
    SEARCH_PROMPT,
    SEARCH_RESULTS_HEADER,
)

logger = logging.getLogger(__name__)


def search_prompt(edit: bool) -> Response:
    return Response(
        SEARCH_PROMPT, [[Button(MAIN_MENU_BUTTON, CB_MAIN_MENU)]], edit=edit
    )


def render_results(
    kb: KnowledgeBase,
    slugs: SlugMapper,
    query: str,
    visible: int,
    *,
    edit: bool,
) -> Response:
    """Build the results page showing the first ``visible`` matches of ``query``.

    Article buttons carry the clamped count so Back from an article restores
    this exact page. A More button is added while results remain hidden.
    """
    results = kb.search(query)
    total = len(results)
    shown = min(total, max(0, visible))
    origin = WithSearchCursor(shown)

    buttons = [
        Button(a.title, show_article_data(slugs.get_or_create_token(a.slug), origin))
        for a in results[:shown]
    ]
    keyboard = chunk_rows(buttons)
    if total > shown:
        keyboard.append([Button(MORE_BUTTON, CB_SEARCH_MORE)])
    keyboard.append([Button(MAIN_MENU_BUTTON, CB_MAIN_MENU)])

    logger.debug("Rendering %d/%d results for %r", shown, total, query)
    return Response(SEARCH_RESULTS_HEADER, keyboard, edit=edit)


class SearchStartHandler(CallbackHandler):
    key = CB_SEARCH_START

    def __init__(
        self, publisher: ResponsePublisher, search_mode: SearchModeStore
    ) -> None:
        super().__init__(publisher)
        self.search_mode = search_mode

    async def run(self, context: Context, data: str) -> str | None:
        logger.info("Search start requested in chat %d", context.chat_id)
        self.search_mode.set(context.chat_id)
        await self.publisher.publish(
            context, search_prompt(edit=context.message_id is not None)
        )
        return None


class _SearchPageHandler(CallbackHandler):
    def __init__(
        self,
        publisher: ResponsePublisher,
        kb: KnowledgeBase,
        slugs: SlugMapper,
        search_state: SearchStateStore,
    ) -> None:
        super().__init__(publisher)
        self.kb = kb
        self.slugs = slugs
        self.search_state = search_state

    async def _publish_page(self, context: Context, query: str, visible: int) -> None:
        response = render_results(
            self.kb,
            self.slugs,
            query,
            visible,
            edit=context.message_id is not None,
        )
        await self.publisher.publish(context, response)


class SearchMoreHandler(_SearchPageHandler):
    key = CB_SEARCH_MORE

    def __init__(
        self,
        publisher: ResponsePublisher,
        kb: KnowledgeBase,
        slugs: SlugMapper,
        search_state: SearchStateStore,
        page_size: int,
    ) -> None:
        super().__init__(publisher, kb, slugs, search_state)
        self.page_size = page_size

    async def run(self, context: Context, data: str) -> str | None:
        cursor = self.search_state.get(context.chat_id)
        if cursor is None:
            logger.info("Search more without state (chat %d)", context.chat_id)
            return None

        visible = cursor.visible_count + self.page_size
        self.search_state.set(context.chat_id, cursor.query, visible)
        logger.info(
            "Search more for chat %d: query=%r visible=%d",
            context.chat_id,
            cursor.query,
            visible,
        )
        await self._publish_page(context, cursor.query, visible)
        return None


class SearchRestoreHandler(_SearchPageHandler):
    key = CB_SEARCH_RESTORE
    prefix = True

    async def run(self, context: Context, data: str) -> str | None:
        requested = parse_search_restore(data)
        cursor = self.search_state.get(context.chat_id)
        if cursor is None:
            logger.info("No search state found for chat %d", context.chat_id)
            await self.publisher.publish(
                context,
                Response(NO_SEARCH_STATE, edit=context.message_id is not None),
            )
            return None

        if requested > cursor.visible_count:
            logger.info(
                "Increasing visible count for chat %d from %d to %d",
                context.chat_id,
                cursor.visible_count,
                requested,
            )
            self.search_state.set(context.chat_id, cursor.query, requested)

        await self._publish_page(context, cursor.query, requested)
        return None
