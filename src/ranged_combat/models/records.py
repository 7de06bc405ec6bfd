from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from ..exceptions import RecordInvariantError
from .ammunition import LoadedAmmunition


class RecordKind(str, Enum):
    LOADED = "loaded"
    MAGAZINE_LOADED = "magazine-loaded"
    CONJURED_ROUND = "conjured-round"


def new_record_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass(frozen=True)
class Record:
    """Common shape of every per-weapon record held by an actor."""

    kind: ClassVar[RecordKind]

    record_id: str
    weapon_id: str
    name: str
    image: str

    def evolve(self, **changes) -> "Record":
        return replace(self, **changes)


@dataclass(frozen=True)
class SimpleLoaded(Record):
    """Presence-only loaded state used when ammunition is not tracked.

    Capacity weapons additionally count their loaded chambers.
    """

    kind: ClassVar[RecordKind] = RecordKind.LOADED

    base_name: str = ""
    loaded_chambers: Optional[int] = None
    capacity: Optional[int] = None
    chamber_selected: bool = False

    def __post_init__(self) -> None:
        if self.capacity is None:
            return
        if self.loaded_chambers is None or not 1 <= self.loaded_chambers <= self.capacity:
            raise RecordInvariantError(
                f"{self.name}: loaded chambers {self.loaded_chambers} outside 1..{self.capacity}"
            )


@dataclass(frozen=True)
class CapacityLoaded(Record):
    """Advanced loaded state of a multi-chamber weapon.

    ``ammunition`` keeps one entry per source, in the order first loaded, and
    the entry quantities always add up to ``loaded_chambers``.
    """

    kind: ClassVar[RecordKind] = RecordKind.LOADED

    base_name: str = ""
    loaded_chambers: int = 0
    capacity: int = 0
    ammunition: Tuple[LoadedAmmunition, ...] = ()
    selected_source_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not 1 <= self.loaded_chambers <= self.capacity:
            raise RecordInvariantError(
                f"{self.name}: loaded chambers {self.loaded_chambers} outside 1..{self.capacity}"
            )
        total = sum(a.quantity for a in self.ammunition)
        if total != self.loaded_chambers:
            raise RecordInvariantError(
                f"{self.name}: ammunition count {total} does not match {self.loaded_chambers} loaded chambers"
            )
        if any(a.quantity < 1 for a in self.ammunition):
            raise RecordInvariantError(f"{self.name}: empty ammunition entry")
        if self.selected_source_id is not None and self.entry_for(self.selected_source_id) is None:
            raise RecordInvariantError(f"{self.name}: selected chamber holds no ammunition")

    def entry_for(self, source_id: str) -> Optional[LoadedAmmunition]:
        for entry in self.ammunition:
            if entry.source_id == source_id:
                return entry
        return None

    @property
    def selected(self) -> Optional[LoadedAmmunition]:
        if self.selected_source_id is None:
            return None
        return self.entry_for(self.selected_source_id)


@dataclass(frozen=True)
class SingleLoaded(Record):
    """Advanced loaded state of a single-round weapon."""

    kind: ClassVar[RecordKind] = RecordKind.LOADED

    ammunition: Optional[LoadedAmmunition] = None

    def __post_init__(self) -> None:
        if self.ammunition is None or self.ammunition.quantity != 1:
            raise RecordInvariantError(f"{self.name}: a single-round weapon holds exactly one round")


@dataclass(frozen=True)
class ChamberCocked(Record):
    """A repeating weapon has a round from its magazine chambered."""

    kind: ClassVar[RecordKind] = RecordKind.LOADED


@dataclass(frozen=True)
class MagazineLoaded(Record):
    kind: ClassVar[RecordKind] = RecordKind.MAGAZINE_LOADED

    remaining: int = 0
    capacity: int = 0
    ammunition: Optional[LoadedAmmunition] = None

    def __post_init__(self) -> None:
        if self.remaining < 0:
            raise RecordInvariantError(f"{self.name}: magazine remaining cannot be negative")
        if self.capacity and self.remaining > self.capacity:
            raise RecordInvariantError(f"{self.name}: magazine holds more than its capacity")


@dataclass(frozen=True)
class ConjuredRound(Record):
    """A temporary round that replaces normal loading until it is used."""

    kind: ClassVar[RecordKind] = RecordKind.CONJURED_ROUND


LoadedStateRecord = Union[SimpleLoaded, CapacityLoaded, SingleLoaded, ChamberCocked]
AnyRecord = Union[SimpleLoaded, CapacityLoaded, SingleLoaded, ChamberCocked, MagazineLoaded, ConjuredRound]
