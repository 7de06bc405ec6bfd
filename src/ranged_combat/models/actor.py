from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .ammunition import AmmunitionInventory, AmmunitionStack
from .records import Record, RecordKind
from .weapon import WeaponConfig


@dataclass
class Actor:
    """
    An actor carrying ranged weapons, ammunition stacks and weapon records.

    ``advanced_ammunition`` overrides the configured tracking mode when set.
    """

    id: str
    name: str
    has_player_owner: bool = False
    weapons: Dict[str, WeaponConfig] = field(default_factory=dict)
    inventory: AmmunitionInventory = field(default_factory=AmmunitionInventory)
    records: Dict[str, Record] = field(default_factory=dict)
    advanced_ammunition: Optional[bool] = None

    def add_weapon(self, weapon: WeaponConfig) -> WeaponConfig:
        self.weapons[weapon.id] = weapon
        return weapon

    def add_ammunition(self, stack: AmmunitionStack) -> AmmunitionStack:
        return self.inventory.add(stack)

    def weapon(self, weapon_id: str) -> WeaponConfig:
        try:
            return self.weapons[weapon_id]
        except KeyError:
            raise KeyError(f"{self.name} has no weapon '{weapon_id}'") from None

    def iter_weapons(self) -> Iterable[WeaponConfig]:
        return list(self.weapons.values())

    def record_for(self, kind: RecordKind, weapon_id: str) -> Optional[Record]:
        for record in self.records.values():
            if record.kind == kind and record.weapon_id == weapon_id:
                return record
        return None

    def records_for(self, weapon_id: str) -> List[Record]:
        return [r for r in self.records.values() if r.weapon_id == weapon_id]

    def selected_ammunition(self, weapon: WeaponConfig) -> Optional[AmmunitionStack]:
        return self.inventory.get(weapon.ammunition_id)


@dataclass
class Token:
    id: str
    name: str
    actor: Actor
