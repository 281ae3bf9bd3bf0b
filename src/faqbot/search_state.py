"""Per-chat search state: the pagination cursor and the search-mode flag.

SearchStateStore keeps the last query of each chat together with how many
results are currently shown. SearchModeStore remembers chats whose next
free-text message should be treated as a search query.

Both wrap KeyedTTLCache, so idle chats are forgotten after the TTL and the
number of tracked chats is bounded.
"""

import logging
from typing import NamedTuple

from .state_cache import KeyedTTLCache

logger = logging.getLogger(__name__)


class SearchCursor(NamedTuple):
    query: str
    visible_count: int


class SearchStateStore:
    """Last search query and visible result count, keyed by chat id."""

    def __init__(self, max_entries: int, ttl: float | None = None) -> None:
        self._cache: KeyedTTLCache[int, SearchCursor] = KeyedTTLCache(
            max_entries, ttl
        )

    def get(self, chat_id: int) -> SearchCursor | None:
        return self._cache.get(chat_id)

    def set(self, chat_id: int, query: str, visible_count: int) -> None:
        self._cache.set(chat_id, SearchCursor(query, visible_count))
        logger.debug(
            "Search cursor for chat %d: query=%r visible=%d",
            chat_id,
            query,
            visible_count,
        )

    def clear(self, chat_id: int) -> None:
        self._cache.pop(chat_id)


class SearchModeStore:
    """Chats awaiting a search query."""

    def __init__(self, max_entries: int, ttl: float | None = None) -> None:
        self._cache: KeyedTTLCache[int, bool] = KeyedTTLCache(max_entries, ttl)

    def is_awaiting(self, chat_id: int) -> bool:
        return bool(self._cache.get(chat_id))

    def set(self, chat_id: int, awaiting: bool = True) -> None:
        if awaiting:
            self._cache.set(chat_id, True)
        else:
            self._cache.pop(chat_id)

    def clear(self, chat_id: int) -> None:
        self._cache.pop(chat_id)
