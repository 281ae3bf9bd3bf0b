"""Catalog browsing callback handlers.

Navigation path: main menu -> category -> subcategory -> article -> rating.
Every catalog slug placed on a button goes through SlugMapper, so payloads
stay within 64 bytes no matter how long the slugs are. Incoming tokens that
are no longer mapped are tried as literal slugs before giving up.

Units:
  - MainMenuHandler (main_menu)
  - CategoryHandler (cat:)
  - SubcategoryHandler (sub:)
  - ArticleHandler (show_art:)
  - RatingHandler (rate:)
  - IgnoreHandler (ignore)
"""

import html
import logging

from ..knowledge_base import KnowledgeBase
from ..search_state import SearchModeStore
from ..slug_mapping import SlugMapper
from .base import CallbackHandler
from .callback_data import (
    CB_CATEGORY,
    CB_IGNORE,
    CB_MAIN_MENU,
    CB_RATE,
    CB_SEARCH_START,
    CB_SHOW_ARTICLE,
    CB_SUBCATEGORY,
    RATE_DOWN,
    RATE_UP,
    Origin,
    Simple,
    WithParent,
    back_target,
    category_data,
    parse_category,
    parse_rate,
    parse_show_article,
    parse_subcategory,
    rate_data,
    show_article_data,
    subcategory_data,
)
from .publisher import ResponsePublisher
from .response import Button, Context, Keyboard, Response, chunk_rows
from .texts import (
    ARTICLE_NOT_FOUND,
    ARTICLES_HEADER,
    BACK_BUTTON,
    CATEGORY_NOT_FOUND,
    FEEDBACK_ACCEPTED_BUTTON,
    FEEDBACK_THANKS,
    HELPFUL_BUTTON,
    MAIN_MENU_BUTTON,
    MAIN_MENU_HEADER,
    NOT_HELPFUL_BUTTON,
    READ_MORE_SUFFIX,
    SEARCH_BUTTON,
    SUBCATEGORIES_HEADER,
    SUBCATEGORY_NOT_FOUND,
)

logger = logging.getLogger(__name__)

# Article body budget; leaves room for the title and HTML escaping within
# Telegram's 4096 char message limit.
MAX_ARTICLE_CONTENT = 3000

MAIN_MENU_ROW = [Button(MAIN_MENU_BUTTON, CB_MAIN_MENU)]


def format_article(title: str, content: str) -> str:
    if len(content) > MAX_ARTICLE_CONTENT:
        content = content[:MAX_ARTICLE_CONTENT] + READ_MORE_SUFFIX
    return f"<b>{html.escape(title)}</b>\n{html.escape(content)}"


def _not_found(context: Context, text: str) -> Response:
    return Response(text, [MAIN_MENU_ROW], edit=context.message_id is not None)


class MainMenuHandler(CallbackHandler):
    key = CB_MAIN_MENU

    def __init__(
        self,
        publisher: ResponsePublisher,
        kb: KnowledgeBase,
        slugs: SlugMapper,
        search_mode: SearchModeStore,
    ) -> None:
        super().__init__(publisher)
        self.kb = kb
        self.slugs = slugs
        self.search_mode = search_mode

    async def run(self, context: Context, data: str) -> str | None:
        logger.info("Main menu requested in chat %d", context.chat_id)
        self.search_mode.clear(context.chat_id)

        buttons = [
            Button(c.title, category_data(self.slugs.get_or_create_token(c.slug)))
            for c in self.kb.list_categories()
        ]
        keyboard = chunk_rows(buttons)
        keyboard.append([Button(SEARCH_BUTTON, CB_SEARCH_START)])
        keyboard.append(MAIN_MENU_ROW)

        await self.publisher.publish(
            context,
            Response(MAIN_MENU_HEADER, keyboard, edit=context.message_id is not None),
        )
        return None


class CategoryHandler(CallbackHandler):
    key = CB_CATEGORY
    prefix = True

    def __init__(
        self, publisher: ResponsePublisher, kb: KnowledgeBase, slugs: SlugMapper
    ) -> None:
        super().__init__(publisher)
        self.kb = kb
        self.slugs = slugs

    async def run(self, context: Context, data: str) -> str | None:
        cat_token = parse_category(data)
        cat_slug = self.slugs.resolve(cat_token)
        logger.info("Category selected: %s (chat %d)", cat_slug, context.chat_id)

        if self.kb.get_category(cat_slug) is None:
            logger.warning("Unknown category %r (chat %d)", cat_slug, context.chat_id)
            await self.publisher.publish(
                context, _not_found(context, CATEGORY_NOT_FOUND)
            )
            return None

        # Re-issue the token: an unmapped literal slug gets a proper one here
        cat_token = self.slugs.get_or_create_token(cat_slug)
        buttons = [
            Button(
                sub.title,
                subcategory_data(self.slugs.get_or_create_token(sub.slug), cat_token),
            )
            for sub in self.kb.list_subcategories(cat_slug)
        ]
        keyboard = chunk_rows(buttons)
        keyboard.append([Button(BACK_BUTTON, CB_MAIN_MENU)])
        keyboard.append(MAIN_MENU_ROW)

        await self.publisher.publish(
            context,
            Response(
                SUBCATEGORIES_HEADER, keyboard, edit=context.message_id is not None
            ),
        )
        return None


class SubcategoryHandler(CallbackHandler):
    key = CB_SUBCATEGORY
    prefix = True

    def __init__(
        self, publisher: ResponsePublisher, kb: KnowledgeBase, slugs: SlugMapper
    ) -> None:
        super().__init__(publisher)
        self.kb = kb
        self.slugs = slugs

    async def run(self, context: Context, data: str) -> str | None:
        sub_token, cat_token = parse_subcategory(data)
        sub_slug = self.slugs.resolve(sub_token)
        logger.info("Subcategory selected: %s (chat %d)", sub_slug, context.chat_id)

        if self.kb.get_subcategory(sub_slug) is None:
            logger.warning(
                "Unknown subcategory %r (chat %d)", sub_slug, context.chat_id
            )
            await self.publisher.publish(
                context, _not_found(context, SUBCATEGORY_NOT_FOUND)
            )
            return None

        sub_token = self.slugs.get_or_create_token(sub_slug)
        origin = WithParent(sub_token)
        buttons = [
            Button(
                a.title,
                show_article_data(self.slugs.get_or_create_token(a.slug), origin),
            )
            for a in self.kb.list_articles(sub_slug)
        ]
        keyboard = chunk_rows(buttons)
        back = category_data(cat_token) if cat_token else CB_MAIN_MENU
        keyboard.append([Button(BACK_BUTTON, back)])
        keyboard.append(MAIN_MENU_ROW)

        await self.publisher.publish(
            context,
            Response(ARTICLES_HEADER, keyboard, edit=context.message_id is not None),
        )
        return None


def _article_keyboard(token: str, origin: Origin) -> Keyboard:
    return [
        [
            Button(HELPFUL_BUTTON, rate_data(RATE_UP, token, origin)),
            Button(NOT_HELPFUL_BUTTON, rate_data(RATE_DOWN, token, origin)),
        ],
        [Button(BACK_BUTTON, back_target(origin))],
        MAIN_MENU_ROW,
    ]


class ArticleHandler(CallbackHandler):
    key = CB_SHOW_ARTICLE
    prefix = True

    def __init__(
        self, publisher: ResponsePublisher, kb: KnowledgeBase, slugs: SlugMapper
    ) -> None:
        super().__init__(publisher)
        self.kb = kb
        self.slugs = slugs

    async def run(self, context: Context, data: str) -> str | None:
        request = parse_show_article(data)
        slug = self.slugs.resolve(request.token)
        logger.info("Article requested: %s (chat %d)", slug, context.chat_id)

        article = self.kb.get_by_slug(slug)
        if article is None:
            return ARTICLE_NOT_FOUND

        token = self.slugs.get_or_create_token(article.slug)
        await self.publisher.publish(
            context,
            Response(
                format_article(article.title, article.content),
                _article_keyboard(token, request.origin),
                edit=context.message_id is not None,
            ),
        )
        return None


class RatingHandler(CallbackHandler):
    """Records feedback and swaps the article's rating row for a confirmation."""

    key = CB_RATE
    prefix = True

    def __init__(self, publisher: ResponsePublisher, slugs: SlugMapper) -> None:
        super().__init__(publisher)
        self.slugs = slugs

    async def run(self, context: Context, data: str) -> str | None:
        rating = parse_rate(data)
        slug = self.slugs.resolve(rating.token)
        logger.info(
            "USER_FEEDBACK: article %s rated as %s (chat %d)",
            slug,
            rating.direction,
            context.chat_id,
        )

        if context.message_id is not None:
            keyboard: Keyboard = [[Button(FEEDBACK_ACCEPTED_BUTTON, CB_IGNORE)]]
            if not isinstance(rating.origin, Simple):
                keyboard.append([Button(BACK_BUTTON, back_target(rating.origin))])
            keyboard.append(MAIN_MENU_ROW)
            await self.publisher.edit_reply_markup(
                context.chat_id, context.message_id, keyboard
            )
        return FEEDBACK_THANKS


class IgnoreHandler(CallbackHandler):
    key = CB_IGNORE

    async def run(self, context: Context, data: str) -> str | None:
        logger.debug("Ignore callback in chat %d", context.chat_id)
        return None
