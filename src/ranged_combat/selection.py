from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol, Sequence

from .exceptions import NoWeaponAvailable
from .models.actor import Actor
from .models.ammunition import AmmunitionStack
from .models.weapon import WeaponConfig
from .updates import PendingUpdates

logger = logging.getLogger(__name__)

WeaponPredicate = Callable[[WeaponConfig], bool]
WeaponChooser = Callable[[Actor, Sequence[WeaponConfig]], Optional[WeaponConfig]]
AmmunitionFilter = Callable[[WeaponConfig, AmmunitionStack], bool]


class AmmunitionSelector(Protocol):
    """Asks the user which stack to load; returns None when they decline."""

    def select(
        self,
        actor: Actor,
        weapon: WeaponConfig,
        updates: PendingUpdates,
        no_ammunition_message: str,
        prompt: str,
        replace: bool,
    ) -> Optional[AmmunitionStack]:
        ...


def first_weapon(actor: Actor, candidates: Sequence[WeaponConfig]) -> Optional[WeaponConfig]:
    return candidates[0] if candidates else None


def get_weapons(actor: Actor, predicate: WeaponPredicate) -> List[WeaponConfig]:
    return [w for w in actor.iter_weapons() if predicate(w)]


def get_weapon(
    actor: Actor,
    predicate: WeaponPredicate,
    no_match_message: str,
    preferred: Optional[WeaponPredicate] = None,
    chooser: WeaponChooser = first_weapon,
) -> Optional[WeaponConfig]:
    """
    Pick one of the actor's weapons matching ``predicate``.

    Weapons matching ``preferred`` win when there are any. With several
    candidates left the chooser decides, and may return None to cancel.
    Raises NoWeaponAvailable when nothing matches.
    """
    candidates = get_weapons(actor, predicate)
    if not candidates:
        raise NoWeaponAvailable(no_match_message)
    if preferred is not None:
        preferred_candidates = [w for w in candidates if preferred(w)]
        if preferred_candidates:
            candidates = preferred_candidates
    if len(candidates) == 1:
        return candidates[0]
    return chooser(actor, candidates)


class FirstAvailableAmmunitionSelector:
    """Selects the first compatible stack that still has rounds left.

    The choice is staged as the weapon's new ammunition selection.
    """

    def __init__(self, compatible: Optional[AmmunitionFilter] = None) -> None:
        self._compatible = compatible or (lambda weapon, stack: True)

    def select(
        self,
        actor: Actor,
        weapon: WeaponConfig,
        updates: PendingUpdates,
        no_ammunition_message: str,
        prompt: str,
        replace: bool,
    ) -> Optional[AmmunitionStack]:
        for stack in actor.inventory:
            if replace and stack.id == weapon.ammunition_id:
                continue
            if updates.staged_quantity(stack) < 1 or not self._compatible(weapon, stack):
                continue
            updates.select_ammunition(weapon, stack)
            logger.info("Selected %s for %s", stack.name, weapon.name)
            return stack
        logger.info(no_ammunition_message)
        return None
