from __future__ import annotations

from dataclasses import dataclass, field

from .chat import ChatLog, FloatyTextLog
from .events import EventBus, get_event_bus
from .hooks import ReloadHooks
from .models.actor import Actor
from .notifications import Notifier
from .persistence import InMemoryPersistence, Persistence
from .selection import AmmunitionSelector, FirstAvailableAmmunitionSelector, WeaponChooser, first_weapon
from .settings import RangedCombatSettings
from .updates import PendingUpdates


@dataclass
class CombatServices:
    """
    The collaborators every ranged combat action works through.

    Passed explicitly to each action instead of being looked up globally.
    """

    settings: RangedCombatSettings = field(default_factory=RangedCombatSettings)
    persistence: Persistence = field(default_factory=InMemoryPersistence)
    chat_log: ChatLog = field(default_factory=ChatLog)
    floaty_log: FloatyTextLog = field(default_factory=FloatyTextLog)
    notifier: Notifier = field(default_factory=Notifier)
    ammunition_selector: AmmunitionSelector = field(default_factory=FirstAvailableAmmunitionSelector)
    weapon_chooser: WeaponChooser = first_weapon
    hooks: ReloadHooks = field(default_factory=ReloadHooks)
    events: EventBus = field(default_factory=get_event_bus)

    def new_updates(self, actor: Actor) -> PendingUpdates:
        return PendingUpdates(actor, self.persistence, self.chat_log, self.floaty_log)
