"""Transport-neutral request context and response descriptor.

Handlers never talk to Telegram objects directly: they receive a Context and
hand a Response to the publisher, which turns it into a send or an edit.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple


@dataclass(frozen=True)
class Context:
    """Where an inbound event came from.

    message_id is the message that may be edited (absent: send a new one).
    callback_query_id is set only for button presses.
    """

    chat_id: int
    message_id: int | None = None
    callback_query_id: str | None = None


class Button(NamedTuple):
    text: str
    callback_data: str


Keyboard = list[list[Button]]


@dataclass(frozen=True)
class Response:
    text: str
    keyboard: Keyboard | None = None
    edit: bool = False


def chunk_rows(buttons: Sequence[Button], per_row: int = 2) -> Keyboard:
    """Lay out buttons in rows of ``per_row``."""
    return [list(buttons[i : i + per_row]) for i in range(0, len(buttons), per_row)]