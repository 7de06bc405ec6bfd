from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class AmmunitionStack:
    """A consumable stack of ammunition owned by an actor's inventory.

    ``source_id`` identifies the kind of ammunition and stays stable across
    duplicated stacks, while ``id`` identifies this particular stack.
    """

    id: str
    source_id: str
    name: str
    image: str = ""
    quantity: int = 0

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"Stack quantity cannot be negative: {self.quantity}")


@dataclass(frozen=True)
class LoadedAmmunition:
    """Snapshot of ammunition sitting in a weapon.

    ``quantity`` counts chambers for capacity weapons; single-round weapons
    always hold exactly one.
    """

    name: str
    image: str
    id: str
    source_id: str
    quantity: int = 1

    @classmethod
    def from_stack(cls, stack: AmmunitionStack, quantity: int = 1) -> "LoadedAmmunition":
        return cls(
            name=stack.name,
            image=stack.image,
            id=stack.id,
            source_id=stack.source_id,
            quantity=quantity,
        )

    def with_quantity(self, quantity: int) -> "LoadedAmmunition":
        return LoadedAmmunition(
            name=self.name,
            image=self.image,
            id=self.id,
            source_id=self.source_id,
            quantity=quantity,
        )


class AmmunitionInventory:
    """
    The actor's ammunition stacks keyed by stack id.

    Stacks are never created or destroyed by weapon actions; reloading and
    unloading only move quantity in and out of them.
    """

    def __init__(self) -> None:
        self._stacks: Dict[str, AmmunitionStack] = {}

    def add(self, stack: AmmunitionStack) -> AmmunitionStack:
        existing = self._stacks.get(stack.id)
        if existing:
            existing.quantity += stack.quantity
            logger.debug("Merged %d x %s into stack %s (total=%d)", stack.quantity, stack.name, stack.id, existing.quantity)
            return existing
        self._stacks[stack.id] = stack
        logger.debug("Added stack %s: %d x %s", stack.id, stack.quantity, stack.name)
        return stack

    def get(self, stack_id: Optional[str]) -> Optional[AmmunitionStack]:
        if stack_id is None:
            return None
        return self._stacks.get(stack_id)

    def find_by_source(self, source_id: str) -> Optional[AmmunitionStack]:
        for stack in self._stacks.values():
            if stack.source_id == source_id:
                return stack
        return None

    def quantity(self, stack_id: str) -> int:
        stack = self._stacks.get(stack_id)
        return stack.quantity if stack else 0

    def adjust(self, stack_id: str, delta: int) -> int:
        """
        Change a stack's quantity by ``delta`` and return the new quantity.

        Raises ValueError for unknown stacks or when the result would be negative.
        """
        stack = self._stacks.get(stack_id)
        if stack is None:
            raise ValueError(f"Stack not in inventory: {stack_id}")
        new_quantity = stack.quantity + delta
        if new_quantity < 0:
            raise ValueError(f"Not enough {stack.name} in stack {stack_id}: {stack.quantity} + {delta}")
        stack.quantity = new_quantity
        logger.debug("Stack %s quantity %+d -> %d", stack_id, delta, new_quantity)
        return new_quantity

    def __iter__(self) -> Iterator[AmmunitionStack]:
        return iter(list(self._stacks.values()))

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._stacks)
