from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..chat import ChatMessage
from ..exceptions import NotLoaded, RecordInvariantError, ReloadWarning
from ..loaded import build_loaded_name, loaded_record
from ..models.actor import Actor, Token
from ..models.ammunition import LoadedAmmunition
from ..models.records import CapacityLoaded, ChamberCocked, RecordKind, SimpleLoaded, SingleLoaded
from ..models.weapon import WeaponConfig
from ..selection import get_weapon
from ..updates import PendingUpdates

if TYPE_CHECKING:
    from ..context import CombatServices

logger = logging.getLogger(__name__)


def return_to_stack(actor: Actor, ammo: LoadedAmmunition, updates: PendingUpdates) -> bool:
    """Put one round back into the stack it came from.

    Falls back to any stack of the same source; a round with no stack left
    is discarded.
    """
    stack = actor.inventory.get(ammo.id) or actor.inventory.find_by_source(ammo.source_id)
    if stack is None:
        logger.info("No stack of %s left on %s; discarding unloaded round", ammo.name, actor.name)
        return False
    updates.adjust_quantity(stack, 1)
    return True


def is_loaded(actor: Actor, weapon: WeaponConfig) -> bool:
    return (
        loaded_record(actor, weapon) is not None
        or actor.record_for(RecordKind.CONJURED_ROUND, weapon.id) is not None
    )


def unload_ammunition(
    actor: Actor,
    weapon: WeaponConfig,
    updates: PendingUpdates,
    source_id: Optional[str] = None,
    restore: bool = True,
) -> Optional[LoadedAmmunition]:
    """
    Remove one round from the weapon and return what was removed.

    - A conjured round simply disappears.
    - A cocked repeating weapon is decocked; the round stays in the magazine.
    - Capacity weapons give up one round of ``source_id`` (default: the most
      recently added ammunition) and drop the record at zero chambers.
    - Tracked rounds go back to their stack unless ``restore`` is False, as
      when a reload swaps the ammunition of a single-round weapon and the
      old round is ejected.

    Raises NotLoaded when there is nothing to unload.
    """
    conjured = actor.record_for(RecordKind.CONJURED_ROUND, weapon.id)
    if conjured is not None:
        updates.delete(conjured)
        logger.debug("Dismissed conjured round from %s", weapon.name)
        return None

    record = loaded_record(actor, weapon)
    if record is None:
        raise NotLoaded(f"{weapon.name} is not loaded.")

    if isinstance(record, ChamberCocked):
        updates.delete(record)
        return None

    if isinstance(record, SingleLoaded):
        updates.delete(record)
        if restore:
            return_to_stack(actor, record.ammunition, updates)
        return record.ammunition

    if isinstance(record, CapacityLoaded):
        entry = record.entry_for(source_id) if source_id else record.ammunition[-1]
        if entry is None:
            raise NotLoaded(f"{weapon.name} has no rounds of that ammunition loaded.")
        chambers = record.loaded_chambers - 1
        if chambers == 0:
            updates.delete(record)
        else:
            ammunition = tuple(
                e.with_quantity(e.quantity - 1) if e.source_id == entry.source_id else e
                for e in record.ammunition
                if e.source_id != entry.source_id or e.quantity > 1
            )
            selected = record.selected_source_id
            if selected is not None and all(e.source_id != selected for e in ammunition):
                selected = None
            updates.update(
                record,
                name=build_loaded_name(record.base_name, ammunition, chambers, record.capacity),
                loaded_chambers=chambers,
                ammunition=ammunition,
                selected_source_id=selected,
            )
        if restore:
            return_to_stack(actor, entry, updates)
        return entry.with_quantity(1)

    if isinstance(record, SimpleLoaded):
        if record.loaded_chambers is None or record.loaded_chambers <= 1:
            updates.delete(record)
        else:
            chambers = record.loaded_chambers - 1
            updates.update(
                record,
                name=f"{record.base_name} ({chambers}/{record.capacity})",
                loaded_chambers=chambers,
            )
        return None

    raise RecordInvariantError(f"Unexpected loaded record on {weapon.name}: {record!r}")


def unload(services: "CombatServices", token: Optional[Token], weapon: Optional[WeaponConfig] = None) -> bool:
    """Interact to take one round out of a loaded weapon."""
    if token is None:
        return False
    actor = token.actor
    try:
        if weapon is None:
            weapon = get_weapon(
                actor,
                lambda w: w.requires_loading and is_loaded(actor, w),
                "You have no loaded weapons.",
                chooser=services.weapon_chooser,
            )
        if weapon is None:
            return False
        updates = services.new_updates(actor)
        ammo = unload_ammunition(actor, weapon, updates)
    except ReloadWarning as warning:
        services.notifier.warn(str(warning))
        return False

    description = f"{token.name} unloads their {weapon.name}"
    description = f"{description} ({ammo.name})." if ammo is not None else f"{description}."
    updates.chat(
        ChatMessage(
            actor_id=actor.id,
            image=services.settings.chat.reload_image,
            description=description,
            action_label=services.settings.chat.action_label,
            action_cost_label="1",
        )
    )
    updates.handle_updates()
    logger.info("%s unloaded %s", actor.name, weapon.name)
    return True
