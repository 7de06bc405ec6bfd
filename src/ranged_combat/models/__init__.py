from .actor import Actor, Token
from .ammunition import AmmunitionInventory, AmmunitionStack, LoadedAmmunition
from .records import (
    AnyRecord,
    CapacityLoaded,
    ChamberCocked,
    ConjuredRound,
    LoadedStateRecord,
    MagazineLoaded,
    Record,
    RecordKind,
    SimpleLoaded,
    SingleLoaded,
    new_record_id,
)
from .weapon import WeaponConfig

__all__ = [
    "Actor",
    "Token",
    "AmmunitionInventory",
    "AmmunitionStack",
    "LoadedAmmunition",
    "AnyRecord",
    "CapacityLoaded",
    "ChamberCocked",
    "ConjuredRound",
    "LoadedStateRecord",
    "MagazineLoaded",
    "Record",
    "RecordKind",
    "SimpleLoaded",
    "SingleLoaded",
    "new_record_id",
    "WeaponConfig",
]
