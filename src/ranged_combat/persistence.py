from __future__ import annotations

import logging
from typing import Protocol, Sequence

from .models.actor import Actor
from .updates import AdjustQuantity, Command, CreateRecord, DeleteRecord, SelectAmmunition, UpdateRecord

logger = logging.getLogger(__name__)


class Persistence(Protocol):
    """Applies a batch of staged commands to an actor's stored state."""

    def apply(self, actor: Actor, commands: Sequence[Command]) -> None:
        ...


class InMemoryPersistence:
    """Applies commands directly to the in-memory Actor model."""

    def __init__(self) -> None:
        self.flush_count = 0

    def apply(self, actor: Actor, commands: Sequence[Command]) -> None:
        for cmd in commands:
            if isinstance(cmd, CreateRecord):
                actor.records[cmd.record.record_id] = cmd.record
            elif isinstance(cmd, UpdateRecord):
                if cmd.record.record_id not in actor.records:
                    raise KeyError(f"Cannot update missing record '{cmd.record.name}' on {actor.name}")
                actor.records[cmd.record.record_id] = cmd.record
            elif isinstance(cmd, DeleteRecord):
                if actor.records.pop(cmd.record.record_id, None) is None:
                    logger.debug("Record '%s' already gone from %s", cmd.record.name, actor.name)
            elif isinstance(cmd, AdjustQuantity):
                actor.inventory.adjust(cmd.stack_id, cmd.delta)
            elif isinstance(cmd, SelectAmmunition):
                weapon = actor.weapon(cmd.weapon_id)
                actor.weapons[weapon.id] = weapon.with_ammunition(cmd.stack_id)
            else:
                raise TypeError(f"Unknown command: {cmd!r}")
        self.flush_count += 1
        logger.debug("Flushed %d commands for %s", len(commands), actor.name)
