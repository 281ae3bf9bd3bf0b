"""Telegram application wiring: the outer layer of faqbot.

Builds the state stores, handler units and dispatcher, and plugs them into a
python-telegram-bot Application. Every update goes through one TypeHandler
into Dispatcher.dispatch(); updates are processed concurrently, one chat at a
time by nature of the channel.

Core responsibilities:
  - build_dispatcher(): assemble stores + handlers in routing order.
  - create_bot(): Application with publisher, error handler and menu commands.
  - error_handler(): log handler failures and keep polling.

Key functions: build_dispatcher(), create_bot().
"""

import logging

from telegram import BotCommand, Update
from telegram.ext import Application, ContextTypes, TypeHandler

from .knowledge_base import KnowledgeBase
from .search_state import SearchModeStore, SearchStateStore
from .slug_mapping import SlugMapper
from .handlers.dispatcher import Dispatcher
from .handlers.messages import SearchMessageHandler, StartMessageHandler
from .handlers.navigation import (
    ArticleHandler,
    CategoryHandler,
    IgnoreHandler,
    MainMenuHandler,
    RatingHandler,
    SubcategoryHandler,
)
from .handlers.publisher import ResponsePublisher, TelegramPublisher
from .handlers.search import (
    SearchMoreHandler,
    SearchRestoreHandler,
    SearchStartHandler,
)
from .handlers.texts import BOT_COMMANDS

logger = logging.getLogger(__name__)

DISPATCHER_KEY = "dispatcher"


def build_dispatcher(
    publisher: ResponsePublisher,
    kb: KnowledgeBase,
    *,
    page_size: int,
    state_ttl: float | None = None,
    state_max_entries: int = 10_000,
    token_cache_size: int = 50_000,
) -> Dispatcher:
    """Create fresh stores and handler units bound to ``publisher``."""
    slugs = SlugMapper(token_cache_size)
    search_state = SearchStateStore(state_max_entries, state_ttl)
    search_mode = SearchModeStore(state_max_entries, state_ttl)

    callback_handlers = [
        MainMenuHandler(publisher, kb, slugs, search_mode),
        CategoryHandler(publisher, kb, slugs),
        SubcategoryHandler(publisher, kb, slugs),
        ArticleHandler(publisher, kb, slugs),
        RatingHandler(publisher, slugs),
        IgnoreHandler(publisher),
        SearchStartHandler(publisher, search_mode),
        SearchMoreHandler(publisher, kb, slugs, search_state, page_size),
        SearchRestoreHandler(publisher, kb, slugs, search_state),
    ]
    message_handlers = [
        StartMessageHandler(publisher, search_mode),
        SearchMessageHandler(
            publisher, kb, slugs, search_state, search_mode, page_size
        ),
    ]
    return Dispatcher(callback_handlers, message_handlers)


async def update_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    dispatcher: Dispatcher = context.application.bot_data[DISPATCHER_KEY]
    await dispatcher.dispatch(update)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log the failure; polling continues with the next update."""
    update_id = update.update_id if isinstance(update, Update) else None
    logger.error(
        "Error while handling update %s", update_id, exc_info=context.error
    )


async def post_init(application: Application) -> None:
    await application.bot.set_my_commands(
        [BotCommand(name, desc) for name, desc in BOT_COMMANDS]
    )
    logger.info("Registered %d bot commands", len(BOT_COMMANDS))


def create_bot(kb: KnowledgeBase) -> Application:
    from .config import config

    application = (
        Application.builder()
        .token(config.telegram_bot_token)
        .concurrent_updates(True)
        .post_init(post_init)
        .build()
    )

    application.bot_data[DISPATCHER_KEY] = build_dispatcher(
        TelegramPublisher(application.bot),
        kb,
        page_size=config.search_page_size,
        state_ttl=config.state_ttl,
        state_max_entries=config.state_max_entries,
        token_cache_size=config.token_cache_size,
    )
    application.add_handler(TypeHandler(Update, update_handler))
    application.add_error_handler(error_handler)
    return application
