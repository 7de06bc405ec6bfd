from __future__ import annotations


class RangedCombatError(Exception):
    """Base exception for the ranged combat ammunition system."""


class ReloadWarning(RangedCombatError):
    """A refused action that is reported to the user, never fatal.

    Raised before anything is staged for the weapon, so catching it leaves
    the actor untouched.
    """


class NoWeaponAvailable(ReloadWarning):
    """Raised when no weapon satisfies the requested predicate."""


class NotReloadable(ReloadWarning):
    """Raised when reloading a weapon that does not need to be loaded."""


class NoMagazine(ReloadWarning):
    """Raised when a repeating weapon has no magazine loaded."""


class EmptyMagazine(ReloadWarning):
    """Raised when a repeating weapon's magazine has no rounds remaining."""


class AlreadyLoaded(ReloadWarning):
    """Raised when a repeating weapon is already cocked."""


class AlreadyFullyLoaded(ReloadWarning):
    """Raised when every chamber of the weapon is already loaded."""


class AlreadyLoadedSame(ReloadWarning):
    """Raised when a single-round weapon already holds the selected ammunition."""


class NoAmmunitionSelected(ReloadWarning):
    """Raised when no ammunition is selected and the user declined to pick one."""


class AmmunitionExhausted(ReloadWarning):
    """Raised when the selected stack is empty and no replacement was picked."""


class NotLoaded(ReloadWarning):
    """Raised when unloading or firing a weapon that holds nothing."""


class NoChamberSelected(ReloadWarning):
    """Raised when firing a chambered weapon without a selected chamber."""


class TemplateNotFound(RangedCombatError):
    """Raised when a record template is missing from the configuration."""


class RecordInvariantError(RangedCombatError):
    """Raised when a loaded-state record would violate its counters."""
