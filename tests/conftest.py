import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from ranged_combat.context import CombatServices  # noqa: E402
from ranged_combat.events import EventBus  # noqa: E402
from ranged_combat.models import Actor, AmmunitionStack, Token, WeaponConfig  # noqa: E402
from ranged_combat.settings import RangedCombatSettings  # noqa: E402


@pytest.fixture()
def services():
    return CombatServices(settings=RangedCombatSettings(), events=EventBus())


def make_actor(actor_id="hero", name="Hero", advanced=True, player=True, stacks=(), weapons=()):
    actor = Actor(id=actor_id, name=name, has_player_owner=player, advanced_ammunition=advanced)
    for stack in stacks:
        actor.add_ammunition(stack)
    for weapon in weapons:
        actor.add_weapon(weapon)
    return actor


def rounds(quantity=5, stack_id="rounds", source_id="round", name="Round"):
    return AmmunitionStack(id=stack_id, source_id=source_id, name=name, image="round.webp", quantity=quantity)


def silver(quantity=3):
    return AmmunitionStack(id="silver", source_id="silver-round", name="Silver Round", image="silver.webp", quantity=quantity)


@pytest.fixture()
def pistol_setup():
    pistol = WeaponConfig(id="pistol", name="Pistol", ammunition_id="rounds")
    actor = make_actor(stacks=[rounds(5), silver(3)], weapons=[pistol])
    return actor, Token(id="t-hero", name="Hero", actor=actor)


@pytest.fixture()
def pepperbox_setup():
    pepperbox = WeaponConfig(
        id="pepperbox",
        name="Pepperbox",
        capacity=3,
        is_capacity=True,
        ammunition_id="rounds",
    )
    actor = make_actor(stacks=[rounds(10), silver(3)], weapons=[pepperbox])
    return actor, Token(id="t-hero", name="Hero", actor=actor)
