from __future__ import annotations

import logging
from typing import Callable, List

from .models.weapon import WeaponConfig
from .updates import PendingUpdates

logger = logging.getLogger(__name__)

ReloadHook = Callable[[WeaponConfig, PendingUpdates], None]


class ReloadHooks:
    """Callbacks run after every successful reload, in registration order.

    Hooks add weapon-specific side effects (feat bonuses and the like) by
    staging further updates in the same batch as the reload. A hook raising a
    ReloadWarning refuses the whole reload.
    """

    def __init__(self) -> None:
        self._hooks: List[ReloadHook] = []

    def register(self, hook: ReloadHook) -> ReloadHook:
        if not callable(hook):
            raise TypeError("hook must be callable")
        self._hooks.append(hook)
        logger.debug("Registered reload hook %s", getattr(hook, "__name__", hook))
        return hook

    def unregister(self, hook: ReloadHook) -> None:
        if hook in self._hooks:
            self._hooks.remove(hook)

    def run(self, weapon: WeaponConfig, updates: PendingUpdates) -> None:
        for hook in list(self._hooks):
            hook(weapon, updates)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._hooks)
