"""Shared prompt text read by every comparison column."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PromptStore:
    """Holds the one prompt all columns compare.

    The prompt input is the only writer; columns only read `text`.
    """

    def __init__(self, text: str = ""):
        self._text = text
        self._listeners: list[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    def update(self, text: str) -> None:
        """Replace the prompt and notify subscribers."""
        self._text = text
        for listener in list(self._listeners):
            listener(text)

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register `listener` for updates; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
