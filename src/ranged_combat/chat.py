from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatMessage:
    """A chat card describing an action an actor took.

    Attributes:
        actor_id: Id of the actor the card is posted for.
        image: Icon shown on the card.
        description: Human-readable text, e.g. "Guard reloads their Crossbow."
        action_label: Kind of action spent, e.g. "Interact".
        action_cost_label: Number of actions as text, or "" when the cost is not fixed.
        timestamp: Monotonic timestamp when the message was created.
    """

    actor_id: str
    image: str
    description: str
    action_label: str
    action_cost_label: str = ""
    timestamp: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class FloatyText:
    """Short transient text shown above a token, e.g. "Loaded (2/3)"."""

    actor_id: str
    text: str
    highlight: bool = False


class ChatLog:
    """In-memory chat sink with a finite history."""

    def __init__(self, capacity: int = 500) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._messages: List[ChatMessage] = []

    def post(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        if len(self._messages) > self._capacity:
            del self._messages[0:len(self._messages) - self._capacity]
        logger.debug("Chat: %s", message.description)
        return message

    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    @property
    def last(self) -> Optional[ChatMessage]:
        return self._messages[-1] if self._messages else None

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._messages)


class FloatyTextLog:
    """Collects floaty texts until the rendering layer drains them."""

    def __init__(self) -> None:
        self._texts: List[FloatyText] = []

    def show(self, floaty: FloatyText) -> None:
        self._texts.append(floaty)

    def drain(self) -> List[FloatyText]:
        items = list(self._texts)
        self._texts.clear()
        return items

    def texts(self) -> List[FloatyText]:
        return list(self._texts)
