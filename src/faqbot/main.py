"""Application entry point: Click CLI dispatcher and bot bootstrap.

The ``main()`` function invokes the Click command group defined in cli.py,
which dispatches to subcommands (run, check).
``run_bot()`` contains the actual bot startup logic, called by the ``run``
command after CLI flags have been applied to the environment.
"""

import logging
import os
import sys

import colorlog


class _ShortNameFilter(logging.Filter):
    """Strip 'faqbot.' and 'handlers.' prefixes, cap at 20 chars."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("faqbot.handlers."):
            name = name[len("faqbot.handlers.") :]
        elif name.startswith("faqbot."):
            name = name[len("faqbot.") :]
        record.short_name = name[:20]  # type: ignore[attr-defined]
        return True


def setup_logging(log_level: str) -> None:
    """Configure colored, compact logging for interactive CLI use."""
    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s %(levelname)-8s %(short_name)-20s %(message)s",
            datefmt="%H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
    )
    handler.addFilter(_ShortNameFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("faqbot").setLevel(numeric_level)
    for name in ("httpx", "httpcore", "telegram.ext"):
        logging.getLogger(name).setLevel(logging.WARNING)


def run_bot() -> None:
    """Start the bot. Called by the ``run`` Click command after env is set."""
    log_level = os.environ.get("FAQBOT_LOG_LEVEL", "INFO").upper()
    setup_logging(log_level)

    try:
        from .config import config
    except ValueError as e:
        from .utils import faqbot_dir

        env_path = faqbot_dir() / ".env"
        print(f"Error: {e}\n")
        print(f"Create {env_path} with the following content:\n")
        print("  TELEGRAM_BOT_TOKEN=your_bot_token_here")
        print("  FAQBOT_KB_FILE=/path/to/knowledge_base.json")
        print()
        print("Get your bot token from @BotFather on Telegram.")
        sys.exit(1)

    logger = logging.getLogger(__name__)

    from .knowledge_base import KnowledgeBase, KnowledgeBaseError

    # The catalog must be in memory before the first update is dispatched
    try:
        kb = KnowledgeBase.load(config.kb_file)
    except (KnowledgeBaseError, OSError):
        logger.critical("Failed to load knowledge base", exc_info=True)
        sys.exit(1)

    logger.info("Search page size: %d", config.search_page_size)
    logger.info("Starting Telegram bot...")
    from .bot import create_bot

    application = create_bot(kb)
    application.run_polling(allowed_updates=["message", "callback_query"])


def main() -> None:
    """Main entry point: dispatches via Click CLI group."""
    from .cli import cli

    cli()


if __name__ == "__main__":
    main()
