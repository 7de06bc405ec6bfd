from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..chat import ChatMessage
from ..exceptions import NotLoaded, RecordInvariantError, ReloadWarning
from ..loaded import loaded_record
from ..models.actor import Actor, Token
from ..models.ammunition import LoadedAmmunition
from ..models.records import CapacityLoaded, Record, SimpleLoaded
from ..models.weapon import WeaponConfig
from ..selection import get_weapon
from ..updates import PendingUpdates

if TYPE_CHECKING:
    from ..context import CombatServices

logger = logging.getLogger(__name__)


def set_loaded_chamber(
    actor: Actor,
    weapon: WeaponConfig,
    ammo: Optional[LoadedAmmunition],
    updates: PendingUpdates,
    record: Optional[Record] = None,
) -> Optional[Record]:
    """
    Select the chamber that fires next, but only when none is selected yet.

    ``record`` is the weapon's current loaded record, defaulting to the one on
    the actor; pass the staged record when it was just created or updated.
    The chamber holding ``ammo`` is chosen, or the first loaded chamber when
    ``ammo`` is None or not loaded.
    """
    if not weapon.is_capacity:
        return record
    if record is None:
        record = loaded_record(actor, weapon)
    if record is None:
        return None

    if isinstance(record, CapacityLoaded):
        if record.selected is not None:
            return record
        target = record.entry_for(ammo.source_id) if ammo is not None else None
        if target is None:
            target = record.ammunition[0]
        logger.debug("Selecting %s chamber of %s", target.name, weapon.name)
        return updates.update(record, selected_source_id=target.source_id)

    if isinstance(record, SimpleLoaded):
        if record.chamber_selected:
            return record
        return updates.update(record, chamber_selected=True)

    raise RecordInvariantError(f"{weapon.name} has no chambers to select")


def advance_chamber(actor: Actor, weapon: WeaponConfig, updates: PendingUpdates) -> Record:
    """Rotate to the next loaded chamber in load order, wrapping around."""
    record = loaded_record(actor, weapon)
    if record is None:
        raise NotLoaded(f"{weapon.name} is not loaded.")

    if isinstance(record, SimpleLoaded):
        if record.chamber_selected:
            return record
        return updates.update(record, chamber_selected=True)

    if not isinstance(record, CapacityLoaded):
        raise RecordInvariantError(f"{weapon.name} has no chambers to select")

    entries = record.ammunition
    current = record.selected
    if current is None:
        target = entries[0]
    else:
        index = next(i for i, e in enumerate(entries) if e.source_id == current.source_id)
        target = entries[(index + 1) % len(entries)]
    if current is not None and target.source_id == current.source_id:
        return record
    logger.debug("Advancing %s to %s chamber", weapon.name, target.name)
    return updates.update(record, selected_source_id=target.source_id)


def next_chamber(services: "CombatServices", token: Optional[Token], weapon: Optional[WeaponConfig] = None) -> bool:
    """Interact to bring the next loaded chamber of a chambered weapon into firing position."""
    if token is None:
        return False
    actor = token.actor
    try:
        if weapon is None:
            weapon = get_weapon(
                actor,
                lambda w: w.is_capacity,
                "You have no weapons with multiple chambers.",
                lambda w: loaded_record(actor, w) is not None,
                services.weapon_chooser,
            )
        if weapon is None:
            return False
        updates = services.new_updates(actor)
        advance_chamber(actor, weapon, updates)
    except ReloadWarning as warning:
        services.notifier.warn(str(warning))
        return False

    updates.chat(
        ChatMessage(
            actor_id=actor.id,
            image=services.settings.chat.reload_image,
            description=f"{token.name} selects the next chamber of their {weapon.name}.",
            action_label=services.settings.chat.action_label,
            action_cost_label="1",
        )
    )
    updates.handle_updates()
    return True
