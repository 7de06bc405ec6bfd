from __future__ import annotations

from typing import Optional, Sequence

from .exceptions import AlreadyFullyLoaded
from .models.actor import Actor
from .models.ammunition import LoadedAmmunition
from .models.records import CapacityLoaded, RecordKind, SimpleLoaded, SingleLoaded
from .models.weapon import WeaponConfig


def loaded_record(actor: Actor, weapon: WeaponConfig):
    return actor.record_for(RecordKind.LOADED, weapon.id)


def is_fully_loaded(actor: Actor, weapon: WeaponConfig) -> bool:
    """A capacity weapon is full when every chamber is loaded; any other
    weapon is full as soon as it has a loaded record.
    """
    record = loaded_record(actor, weapon)
    if record is None:
        return False
    if weapon.capacity and not weapon.is_repeating:
        return getattr(record, "loaded_chambers", None) == weapon.capacity
    return True


def check_fully_loaded(actor: Actor, weapon: WeaponConfig) -> None:
    if is_fully_loaded(actor, weapon):
        raise AlreadyFullyLoaded(f"{weapon.name} is already fully loaded.")


def loaded_count(actor: Actor, weapon: WeaponConfig, source_id: Optional[str] = None) -> int:
    """Number of rounds in the weapon, optionally only those of ``source_id``."""
    record = loaded_record(actor, weapon)
    if record is None:
        return 0
    if isinstance(record, CapacityLoaded):
        return sum(a.quantity for a in record.ammunition if source_id is None or a.source_id == source_id)
    if isinstance(record, SingleLoaded):
        return 1 if source_id is None or record.ammunition.source_id == source_id else 0
    if isinstance(record, SimpleLoaded) and record.loaded_chambers is not None:
        return record.loaded_chambers if source_id is None else 0
    return 1 if source_id is None else 0


def describe_ammunition(ammunition: Sequence[LoadedAmmunition]) -> str:
    return ", ".join(a.name if a.quantity == 1 else f"{a.name} x{a.quantity}" for a in ammunition)


def build_loaded_name(
    base_name: str,
    ammunition: Sequence[LoadedAmmunition],
    loaded_chambers: int,
    capacity: int,
) -> str:
    """E.g. "Loaded (Pepperbox) (Silver Round x2, Round) (3/4)"."""
    return f"{base_name} ({describe_ammunition(ammunition)}) ({loaded_chambers}/{capacity})"
