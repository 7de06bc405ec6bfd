from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    text: str
    level: str = "warning"  # info | warning | error


class Notifier:
    """Collects user-facing warnings for the UI layer to display.

    While silenced, warnings are only logged. Batch actions silence the
    notifier for their duration so a fleet reload does not spam the user.
    """

    def __init__(self) -> None:
        self._pending: List[Notification] = []
        self._silent = False

    @property
    def silent(self) -> bool:
        return self._silent

    def warn(self, text: str) -> Optional[Notification]:
        logger.warning(text)
        if self._silent:
            return None
        note = Notification(text=text)
        self._pending.append(note)
        return note

    def info(self, text: str) -> Optional[Notification]:
        logger.info(text)
        if self._silent:
            return None
        note = Notification(text=text, level="info")
        self._pending.append(note)
        return note

    @contextmanager
    def silenced(self) -> Iterator["Notifier"]:
        previous = self._silent
        self._silent = True
        try:
            yield self
        finally:
            self._silent = previous

    def drain(self) -> List[Notification]:
        items = list(self._pending)
        self._pending.clear()
        return items

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)
