"""Callback data constants and payload codec for inline keyboards.

Defines all CB_* prefixes used for routing callback queries, plus typed
encoders/decoders for the payloads that carry arguments. Telegram limits
callback data to 64 bytes; every payload goes through fit_callback_data()
before it is put on a button.

Payload formats:
  - main_menu, ignore, search_more, search_start (exact)
  - cat:<catToken>
  - sub:<subToken>[:<catToken>]
  - show_art:<artToken>[<origin>]
  - rate:<up|down>:<artToken>[<origin>]
  - search:<visibleCount>

An article's origin decides where Back leads:
  - Simple: no suffix, back to the main menu
  - WithParent: ":<subToken>", back to that subcategory
  - WithSearchCursor: ":search:<count>", back to the restored search page
"""

from dataclasses import dataclass
from typing import Literal

# Exact payloads
CB_MAIN_MENU = "main_menu"
CB_IGNORE = "ignore"
CB_SEARCH_MORE = "search_more"
CB_SEARCH_START = "search_start"

# Prefixed payloads
CB_CATEGORY = "cat:"  # cat:<catToken>
CB_SUBCATEGORY = "sub:"  # sub:<subToken>[:<catToken>]
CB_SHOW_ARTICLE = "show_art:"  # show_art:<artToken>[<origin>]
CB_RATE = "rate:"  # rate:<up|down>:<artToken>[<origin>]
CB_SEARCH_RESTORE = "search:"  # search:<visibleCount>

SEPARATOR = ":"
SEARCH_MARKER = "search"
MAX_CALLBACK_BYTES = 64

RATE_UP = "up"
RATE_DOWN = "down"
RateDirection = Literal["up", "down"]


class PayloadError(ValueError):
    """Raised when callback data does not match its prefix's format."""


@dataclass(frozen=True)
class Simple:
    """Article opened without navigation context."""


@dataclass(frozen=True)
class WithParent:
    """Article opened from a subcategory listing."""

    sub_token: str


@dataclass(frozen=True)
class WithSearchCursor:
    """Article opened from a search results page showing ``count`` results."""

    count: int


Origin = Simple | WithParent | WithSearchCursor


@dataclass(frozen=True)
class ShowArticle:
    token: str
    origin: Origin


@dataclass(frozen=True)
class Rate:
    direction: RateDirection
    token: str
    origin: Origin


def fit_callback_data(data: str) -> str:
    """Truncate ``data`` to the Telegram limit at a character boundary."""
    raw = data.encode("utf-8")
    if len(raw) <= MAX_CALLBACK_BYTES:
        return data
    return raw[:MAX_CALLBACK_BYTES].decode("utf-8", errors="ignore")


def _parse_count(raw: str) -> int:
    # ASCII digits only; isdigit() alone also accepts "²"
    if not (raw.isascii() and raw.isdigit()):
        raise PayloadError(f"Invalid result count: {raw!r}")
    return int(raw)


def _split(data: str, prefix: str) -> list[str]:
    return [p for p in data[len(prefix) :].split(SEPARATOR) if p]


# --- Origin ---


def decode_origin(parts: list[str]) -> Origin:
    """Decode the trailing context parts that follow an article token."""
    if not parts:
        return Simple()
    if parts[0] == SEARCH_MARKER:
        if len(parts) != 2:
            raise PayloadError(f"Malformed search context: {parts!r}")
        return WithSearchCursor(_parse_count(parts[1]))
    if len(parts) != 1:
        raise PayloadError(f"Unexpected trailing parts: {parts!r}")
    return WithParent(parts[0])


def encode_origin(origin: Origin) -> str:
    match origin:
        case WithParent(sub_token=sub_token):
            return f"{SEPARATOR}{sub_token}"
        case WithSearchCursor(count=count):
            return f"{SEPARATOR}{SEARCH_MARKER}{SEPARATOR}{count}"
        case _:
            return ""


def back_target(origin: Origin) -> str:
    """Callback data for the Back button of an article opened from ``origin``."""
    match origin:
        case WithParent(sub_token=sub_token):
            return subcategory_data(sub_token)
        case WithSearchCursor(count=count):
            return search_restore_data(count)
        case _:
            return CB_MAIN_MENU


# --- Encoders ---


def category_data(cat_token: str) -> str:
    return fit_callback_data(f"{CB_CATEGORY}{cat_token}")


def subcategory_data(sub_token: str, cat_token: str | None = None) -> str:
    data = f"{CB_SUBCATEGORY}{sub_token}"
    if cat_token:
        data += f"{SEPARATOR}{cat_token}"
    return fit_callback_data(data)


def show_article_data(token: str, origin: Origin) -> str:
    return fit_callback_data(f"{CB_SHOW_ARTICLE}{token}{encode_origin(origin)}")


def rate_data(direction: RateDirection, token: str, origin: Origin) -> str:
    return fit_callback_data(
        f"{CB_RATE}{direction}{SEPARATOR}{token}{encode_origin(origin)}"
    )


def search_restore_data(count: int) -> str:
    return fit_callback_data(f"{CB_SEARCH_RESTORE}{count}")


# --- Decoders ---


def parse_category(data: str) -> str:
    parts = _split(data, CB_CATEGORY)
    if len(parts) != 1:
        raise PayloadError(f"Malformed category payload: {data!r}")
    return parts[0]


def parse_subcategory(data: str) -> tuple[str, str | None]:
    parts = _split(data, CB_SUBCATEGORY)
    if not 1 <= len(parts) <= 2:
        raise PayloadError(f"Malformed subcategory payload: {data!r}")
    return parts[0], parts[1] if len(parts) == 2 else None


def parse_show_article(data: str) -> ShowArticle:
    parts = _split(data, CB_SHOW_ARTICLE)
    if not parts:
        raise PayloadError(f"Missing article token: {data!r}")
    return ShowArticle(parts[0], decode_origin(parts[1:]))


def parse_rate(data: str) -> Rate:
    parts = _split(data, CB_RATE)
    if len(parts) < 2:
        raise PayloadError(f"Malformed rate payload: {data!r}")
    direction = parts[0]
    if direction == RATE_UP:
        return Rate(RATE_UP, parts[1], decode_origin(parts[2:]))
    if direction == RATE_DOWN:
        return Rate(RATE_DOWN, parts[1], decode_origin(parts[2:]))
    raise PayloadError(f"Unknown rating direction: {direction!r}")


def parse_search_restore(data: str) -> int:
    return _parse_count(data[len(CB_SEARCH_RESTORE) :])
