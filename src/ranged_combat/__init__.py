"""Ammunition loading state machine for ranged weapons.

Tracks what a weapon holds (chambers, magazines, ammunition identity) and
stages reload, unload, fire and chamber-selection transitions as batches of
updates applied by a persistence collaborator.
"""

from .actions import fire, next_chamber, perform_reload, reload, reload_all, unload, unload_ammunition
from .context import CombatServices
from .exceptions import RangedCombatError, ReloadWarning
from .loaded import check_fully_loaded, is_fully_loaded
from .models import Actor, AmmunitionStack, Token, WeaponConfig
from .settings import RangedCombatSettings
from .updates import PendingUpdates

__all__ = [
    "fire",
    "next_chamber",
    "perform_reload",
    "reload",
    "reload_all",
    "unload",
    "unload_ammunition",
    "CombatServices",
    "RangedCombatError",
    "ReloadWarning",
    "check_fully_loaded",
    "is_fully_loaded",
    "Actor",
    "AmmunitionStack",
    "Token",
    "WeaponConfig",
    "RangedCombatSettings",
    "PendingUpdates",
]

__version__ = "0.1.0"
