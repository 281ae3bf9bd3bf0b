"""Handler contracts shared by every callback and text unit.

A callback unit declares its route key and whether the key is matched
exactly or as a prefix. Subclasses implement ``run()``; ``handle()`` wraps it
so the button press is acknowledged exactly once on every exit path, using
the toast text ``run()`` returns (None for a silent acknowledgment).
Malformed payloads surface as PayloadError and are acknowledged with
"Invalid data".

Text units implement ``can_handle(context, text)`` and ``handle()``.
"""

import logging
from abc import ABC, abstractmethod

from .callback_data import PayloadError
from .publisher import ResponsePublisher
from .response import Context
from .texts import INVALID_DATA

logger = logging.getLogger(__name__)


class CallbackHandler(ABC):
    """Unit selected by callback data."""

    key: str
    prefix: bool = False

    def __init__(self, publisher: ResponsePublisher) -> None:
        self.publisher = publisher

    @property
    def name(self) -> str:
        return type(self).__name__

    def can_handle(self, data: str) -> bool:
        if self.prefix:
            return data.startswith(self.key)
        return data == self.key

    async def handle(self, context: Context, data: str) -> None:
        toast: str | None = None
        try:
            toast = await self.run(context, data)
        except PayloadError as e:
            logger.warning("%s: bad payload %r (%s)", self.name, data, e)
            toast = INVALID_DATA
        finally:
            if context.callback_query_id:
                await self.publisher.answer_callback(context.callback_query_id, toast)

    @abstractmethod
    async def run(self, context: Context, data: str) -> str | None:
        """Perform the transition. Returns toast text for the acknowledgment."""


class MessageHandler(ABC):
    """Unit selected by the text of an incoming message."""

    def __init__(self, publisher: ResponsePublisher) -> None:
        self.publisher = publisher

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def can_handle(self, context: Context, text: str) -> bool: ...

    @abstractmethod
    async def handle(self, context: Context, text: str) -> None: ...
