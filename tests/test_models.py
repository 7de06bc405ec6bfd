import pytest

from ranged_combat.exceptions import RecordInvariantError
from ranged_combat.loaded import build_loaded_name
from ranged_combat.models import AmmunitionInventory, AmmunitionStack, CapacityLoaded, WeaponConfig
from ranged_combat.models.ammunition import LoadedAmmunition


def entry(source_id, quantity):
    return LoadedAmmunition(name=source_id.title(), image="", id=source_id, source_id=source_id, quantity=quantity)


def test_capacity_record_enforces_counts():
    with pytest.raises(RecordInvariantError):
        CapacityLoaded(
            record_id="r", weapon_id="w", name="n", image="", loaded_chambers=2, capacity=3, ammunition=(entry("round", 1),)
        )
    with pytest.raises(RecordInvariantError):
        CapacityLoaded(
            record_id="r", weapon_id="w", name="n", image="", loaded_chambers=4, capacity=3, ammunition=(entry("round", 4),)
        )
    with pytest.raises(RecordInvariantError):
        CapacityLoaded(
            record_id="r",
            weapon_id="w",
            name="n",
            image="",
            loaded_chambers=1,
            capacity=3,
            ammunition=(entry("round", 1),),
            selected_source_id="silver",
        )


def test_build_loaded_name():
    name = build_loaded_name("Loaded (Pepperbox)", (entry("silver", 2), entry("round", 1)), 3, 4)
    assert name == "Loaded (Pepperbox) (Silver x2, Round) (3/4)"


def test_weapon_config_validation():
    with pytest.raises(ValueError):
        WeaponConfig(id="w", name="Broken", capacity=0)
    with pytest.raises(ValueError):
        WeaponConfig(id="w", name="Revolver", is_capacity=True)


def test_inventory_adjust_and_lookup():
    inventory = AmmunitionInventory()
    inventory.add(AmmunitionStack(id="a", source_id="round", name="Round", quantity=2))
    inventory.add(AmmunitionStack(id="a", source_id="round", name="Round", quantity=3))

    assert inventory.quantity("a") == 5
    assert inventory.find_by_source("round").id == "a"
    assert inventory.adjust("a", -5) == 0
    with pytest.raises(ValueError):
        inventory.adjust("a", -1)
    with pytest.raises(ValueError):
        inventory.adjust("missing", 1)
    with pytest.raises(ValueError):
        AmmunitionStack(id="b", source_id="round", name="Round", quantity=-1)
