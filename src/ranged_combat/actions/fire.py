from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..exceptions import EmptyMagazine, NoChamberSelected, NoMagazine, NotLoaded, RecordInvariantError, ReloadWarning
from ..loaded import build_loaded_name, loaded_record
from ..models.actor import Actor, Token
from ..models.ammunition import LoadedAmmunition
from ..models.records import CapacityLoaded, ChamberCocked, MagazineLoaded, RecordKind, SimpleLoaded, SingleLoaded
from ..models.weapon import WeaponConfig
from ..updates import PendingUpdates

if TYPE_CHECKING:
    from ..context import CombatServices

logger = logging.getLogger(__name__)


def _fire_repeating(actor: Actor, weapon: WeaponConfig, updates: PendingUpdates) -> Optional[LoadedAmmunition]:
    magazine = actor.record_for(RecordKind.MAGAZINE_LOADED, weapon.id)
    if not isinstance(magazine, MagazineLoaded):
        raise NoMagazine(f"{weapon.name} has no magazine loaded!")
    if magazine.remaining < 1:
        raise EmptyMagazine(f"{weapon.name}'s magazine is empty!")
    cocked = loaded_record(actor, weapon)
    if not isinstance(cocked, ChamberCocked):
        raise NotLoaded(f"{weapon.name} is not loaded!")
    updates.delete(cocked)
    updates.update(magazine, remaining=magazine.remaining - 1)
    return magazine.ammunition


def _fire_capacity(weapon: WeaponConfig, record: CapacityLoaded, updates: PendingUpdates) -> LoadedAmmunition:
    if weapon.is_capacity:
        entry = record.selected
        if entry is None:
            raise NoChamberSelected(f"{weapon.name} has no loaded chamber selected!")
    else:
        entry = record.ammunition[0]

    chambers = record.loaded_chambers - 1
    if chambers == 0:
        updates.delete(record)
    else:
        ammunition = tuple(
            e.with_quantity(e.quantity - 1) if e.source_id == entry.source_id else e
            for e in record.ammunition
            if e.source_id != entry.source_id or e.quantity > 1
        )
        updates.update(
            record,
            name=build_loaded_name(record.base_name, ammunition, chambers, record.capacity),
            loaded_chambers=chambers,
            ammunition=ammunition,
            selected_source_id=None,
        )
    return entry.with_quantity(1)


def consume_loaded_round(
    actor: Actor,
    weapon: WeaponConfig,
    updates: PendingUpdates,
    advanced: bool,
) -> Optional[LoadedAmmunition]:
    """
    Stage the consumption of one loaded round when ``weapon`` is fired.

    Returns the ammunition fired when it is tracked, else None. Raises a
    ReloadWarning when the weapon cannot fire.
    """
    if advanced and weapon.is_repeating:
        return _fire_repeating(actor, weapon, updates)

    conjured = actor.record_for(RecordKind.CONJURED_ROUND, weapon.id)
    if conjured is not None and not weapon.capacity:
        updates.delete(conjured)
        return None

    record = loaded_record(actor, weapon)
    if record is None:
        raise NotLoaded(f"{weapon.name} is not loaded!")

    if isinstance(record, CapacityLoaded):
        return _fire_capacity(weapon, record, updates)

    if isinstance(record, SingleLoaded):
        updates.delete(record)
        return record.ammunition

    if isinstance(record, SimpleLoaded):
        if weapon.is_capacity and not record.chamber_selected:
            raise NoChamberSelected(f"{weapon.name} has no loaded chamber selected!")
        if record.loaded_chambers is None or record.loaded_chambers <= 1:
            updates.delete(record)
        else:
            chambers = record.loaded_chambers - 1
            updates.update(
                record,
                name=f"{record.base_name} ({chambers}/{record.capacity})",
                loaded_chambers=chambers,
                chamber_selected=False,
            )
        return None

    if isinstance(record, ChamberCocked):
        updates.delete(record)
        return None

    raise RecordInvariantError(f"Unexpected loaded record on {weapon.name}: {record!r}")


def fire(services: "CombatServices", token: Optional[Token], weapon: WeaponConfig) -> bool:
    """Spend one loaded round of ``weapon`` for an attack; False when it cannot fire."""
    if token is None:
        return False
    if not weapon.requires_loading:
        return True
    actor = token.actor
    updates = services.new_updates(actor)
    try:
        fired = consume_loaded_round(actor, weapon, updates, services.settings.use_advanced_ammunition(actor))
    except ReloadWarning as warning:
        services.notifier.warn(str(warning))
        return False
    updates.handle_updates()
    logger.info("%s fired %s%s", actor.name, weapon.name, f" ({fired.name})" if fired else "")
    return True
