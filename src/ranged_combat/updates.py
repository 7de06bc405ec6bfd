from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from .chat import ChatMessage, FloatyText
from .models.actor import Actor
from .models.ammunition import AmmunitionStack
from .models.records import Record
from .models.weapon import WeaponConfig

if TYPE_CHECKING:
    from .chat import ChatLog, FloatyTextLog
    from .persistence import Persistence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateRecord:
    record: Record


@dataclass(frozen=True)
class UpdateRecord:
    record: Record


@dataclass(frozen=True)
class DeleteRecord:
    record: Record


@dataclass(frozen=True)
class AdjustQuantity:
    stack_id: str
    delta: int


@dataclass(frozen=True)
class SelectAmmunition:
    weapon_id: str
    stack_id: Optional[str]


Command = Union[CreateRecord, UpdateRecord, DeleteRecord, AdjustQuantity, SelectAmmunition]


class PendingUpdates:
    """
    Accumulates the mutations of one logical action against a single actor.

    Staging is pure bookkeeping: nothing touches the actor until
    handle_updates() hands the commands to the persistence collaborator and
    the notifications to their sinks.
    """

    def __init__(
        self,
        actor: Actor,
        persistence: "Persistence",
        chat_log: Optional["ChatLog"] = None,
        floaty_log: Optional["FloatyTextLog"] = None,
    ) -> None:
        self.actor = actor
        self._persistence = persistence
        self._chat_log = chat_log
        self._floaty_log = floaty_log
        self._commands: List[Command] = []
        self._chat: List[ChatMessage] = []
        self._floaty: List[FloatyText] = []

    @property
    def commands(self) -> List[Command]:
        return list(self._commands)

    @property
    def chat_messages(self) -> List[ChatMessage]:
        return list(self._chat)

    @property
    def floaty_texts(self) -> List[FloatyText]:
        return list(self._floaty)

    def is_empty(self) -> bool:
        return not (self._commands or self._chat or self._floaty)

    def _created_index(self, record_id: str) -> Optional[int]:
        for i, cmd in enumerate(self._commands):
            if isinstance(cmd, CreateRecord) and cmd.record.record_id == record_id:
                return i
        return None

    def create(self, record: Record) -> Record:
        self._commands.append(CreateRecord(record))
        logger.debug("Staged create %s '%s' for weapon %s", record.kind.value, record.name, record.weapon_id)
        return record

    def update(self, record: Record, **changes) -> Record:
        """Stage a new version of ``record`` and return it.

        Updating a record created earlier in the same batch rewrites the
        pending creation instead.
        """
        updated = record.evolve(**changes)
        index = self._created_index(record.record_id)
        if index is not None:
            self._commands[index] = CreateRecord(updated)
        else:
            self._commands.append(UpdateRecord(updated))
        logger.debug("Staged update of '%s': %s", record.name, sorted(changes))
        return updated

    def delete(self, record: Record) -> None:
        index = self._created_index(record.record_id)
        if index is not None:
            del self._commands[index]
        else:
            self._commands.append(DeleteRecord(record))
        logger.debug("Staged delete of '%s'", record.name)

    def adjust_quantity(self, stack: AmmunitionStack, delta: int) -> int:
        """Stage a quantity change and return the quantity the stack will have."""
        new_quantity = self.staged_quantity(stack) + delta
        if new_quantity < 0:
            raise ValueError(f"Cannot take {-delta} from {stack.name}: only {self.staged_quantity(stack)} left")
        self._commands.append(AdjustQuantity(stack.id, delta))
        logger.debug("Staged %s quantity %+d -> %d", stack.name, delta, new_quantity)
        return new_quantity

    def staged_quantity(self, stack: AmmunitionStack) -> int:
        delta = sum(c.delta for c in self._commands if isinstance(c, AdjustQuantity) and c.stack_id == stack.id)
        return stack.quantity + delta

    def select_ammunition(self, weapon: WeaponConfig, stack: Optional[AmmunitionStack]) -> WeaponConfig:
        stack_id = stack.id if stack else None
        self._commands.append(SelectAmmunition(weapon.id, stack_id))
        logger.debug("Staged ammunition selection %s for %s", stack_id, weapon.name)
        return weapon.with_ammunition(stack_id)

    def floaty_text(self, text: str, highlight: bool = False) -> None:
        self._floaty.append(FloatyText(actor_id=self.actor.id, text=text, highlight=highlight))

    def chat(self, message: ChatMessage) -> None:
        self._chat.append(message)

    def checkpoint(self) -> Tuple[List[Command], List[ChatMessage], List[FloatyText]]:
        """Snapshot the staged state so a refused step can be rolled back."""
        return list(self._commands), list(self._chat), list(self._floaty)

    def rollback(self, checkpoint: Tuple[List[Command], List[ChatMessage], List[FloatyText]]) -> None:
        commands, chat, floaty = checkpoint
        dropped = len(self._commands) - len(commands)
        self._commands[:] = commands
        self._chat[:] = chat
        self._floaty[:] = floaty
        logger.debug("Rolled back batch for %s (%d commands dropped)", self.actor.name, dropped)

    def handle_updates(self) -> None:
        """Flush staged commands and notifications, then reset the batch."""
        if self._commands:
            self._persistence.apply(self.actor, list(self._commands))
            logger.info("Applied %d updates to %s", len(self._commands), self.actor.name)
        if self._chat_log is not None:
            for message in self._chat:
                self._chat_log.post(message)
        if self._floaty_log is not None:
            for floaty in self._floaty:
                self._floaty_log.show(floaty)
        self._commands.clear()
        self._chat.clear()
        self._floaty.clear()
