"""Application configuration: reads env vars and exposes a singleton.

Loads TELEGRAM_BOT_TOKEN, the knowledge base path, search page size and the
state store bounds from environment variables (with .env support).
.env loading priority: local .env (cwd) > $FAQBOT_DIR/.env (default ~/.faqbot).
The module-level `config` instance is imported lazily by main.py and bot.py;
handlers receive their settings through constructors.

Key class: Config (singleton instantiated as `config`).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .utils import env_float, env_int, faqbot_dir

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PAGE_SIZE = 6
DEFAULT_STATE_TTL = 24 * 60 * 60  # seconds
DEFAULT_STATE_MAX_ENTRIES = 10_000
DEFAULT_TOKEN_CACHE_SIZE = 50_000


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        self.config_dir = faqbot_dir()

        # Load .env: local (cwd) takes priority over config_dir
        # load_dotenv default override=False means first-loaded wins
        local_env = Path(".env")
        global_env = self.config_dir / ".env"
        if local_env.is_file():
            load_dotenv(local_env)
            logger.debug("Loaded env from %s", local_env.resolve())
        if global_env.is_file():
            load_dotenv(global_env)
            logger.debug("Loaded env from %s", global_env)

        self.telegram_bot_token: str = os.getenv("TELEGRAM_BOT_TOKEN") or ""
        if not self.telegram_bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        self.kb_file = Path(os.getenv("FAQBOT_KB_FILE") or "knowledge_base.json")
        self.search_page_size = env_int("SEARCH_PAGE_SIZE", DEFAULT_SEARCH_PAGE_SIZE)

        # Bounds for the in-memory navigation state
        self.state_ttl = env_float("FAQBOT_STATE_TTL", DEFAULT_STATE_TTL)
        self.state_max_entries = env_int(
            "FAQBOT_STATE_MAX_ENTRIES", DEFAULT_STATE_MAX_ENTRIES
        )
        self.token_cache_size = env_int(
            "FAQBOT_TOKEN_CACHE_SIZE", DEFAULT_TOKEN_CACHE_SIZE
        )

        logger.debug(
            "Config initialized: dir=%s, token=%s..., kb=%s, page_size=%d",
            self.config_dir,
            self.telegram_bot_token[:8],
            self.kb_file,
            self.search_page_size,
        )


config = Config()
