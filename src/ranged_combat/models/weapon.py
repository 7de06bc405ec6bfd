from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class WeaponConfig:
    """Reload semantics of a single weapon, read once per action.

    - ``capacity`` of None means a single-round weapon.
    - ``is_capacity`` marks chambered (revolver style) weapons whose chambers
      are fired in turn from a selected chamber.
    - ``is_repeating`` weapons are fed from a magazine and only need cocking.
    - ``ammunition_id`` is the inventory stack currently selected for loading.
    """

    id: str
    name: str
    requires_loading: bool = True
    capacity: Optional[int] = None
    is_repeating: bool = False
    is_capacity: bool = False
    reload_action_cost: int = 1
    ammunition_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.capacity is not None and self.capacity < 1:
            raise ValueError(f"capacity must be positive or None, got {self.capacity}")
        if self.is_capacity and not self.capacity:
            raise ValueError(f"Chambered weapon {self.name} needs a capacity")

    def with_ammunition(self, stack_id: Optional[str]) -> "WeaponConfig":
        return replace(self, ammunition_id=stack_id)
