from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Type, TypeVar

from .models.actor import Actor, Token
from .models.weapon import WeaponConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReloadEvent:
    """Published once a reload of ``weapon`` has been staged for ``actor``."""

    actor: Actor
    token: Token
    weapon: WeaponConfig


E = TypeVar("E")
Listener = Callable[[E], None]


class EventBus:
    """Dispatches ranged combat events to listeners registered for their type.

    Listeners run in registration order. A failing listener is logged and the
    remaining ones still run.
    """

    def __init__(self) -> None:
        self._listeners: Dict[type, List[Callable]] = {}

    def subscribe(self, event_type: Type[E], listener: Listener) -> Listener:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.setdefault(event_type, []).append(listener)
        logger.debug("Subscribed %s to %s", getattr(listener, "__name__", listener), event_type.__name__)
        return listener

    def unsubscribe(self, event_type: Type[E], listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, event_type: type) -> List[Callable]:
        return list(self._listeners.get(event_type, []))

    def publish(self, event: object) -> int:
        """Deliver ``event`` and return how many listeners received it."""
        listeners = self.listeners(type(event))
        logger.debug("Publishing %s to %d listeners", type(event).__name__, len(listeners))
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %s failed on %s", getattr(listener, "__name__", listener), type(event).__name__)
        return len(listeners)


_bus = EventBus()


def get_event_bus() -> EventBus:
    """Return the process-wide bus used when no bus is passed explicitly."""
    return _bus
