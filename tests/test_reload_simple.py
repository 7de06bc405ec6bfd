from conftest import make_actor, rounds
from ranged_combat.actions import reload
from ranged_combat.loaded import is_fully_loaded
from ranged_combat.models import RecordKind, SimpleLoaded, Token, WeaponConfig


def setup_simple(weapon):
    actor = make_actor(advanced=False, stacks=[rounds(5)], weapons=[weapon])
    return actor, Token("t", "Guard", actor)


def test_simple_reload_creates_presence_record(services):
    crossbow = WeaponConfig(id="crossbow", name="Crossbow", ammunition_id="rounds")
    actor, token = setup_simple(crossbow)

    assert reload(services, token, crossbow)

    record = actor.record_for(RecordKind.LOADED, "crossbow")
    assert isinstance(record, SimpleLoaded)
    assert record.name == "Loaded (Crossbow)"
    assert record.loaded_chambers is None
    assert actor.inventory.quantity("rounds") == 5
    assert services.chat_log.last.description == "Guard reloads their Crossbow."


def test_simple_reload_is_idempotent(services):
    crossbow = WeaponConfig(id="crossbow", name="Crossbow")
    actor, token = setup_simple(crossbow)
    reload(services, token, crossbow)
    before = dict(actor.records)

    assert not reload(services, token, crossbow)

    assert actor.records == before
    assert len(services.chat_log.messages()) == 1
    assert services.notifier.drain()[0].text == "Crossbow is already fully loaded."


def test_simple_capacity_counts_chambers(services):
    musket = WeaponConfig(id="musket", name="Double-barreled Musket", capacity=2)
    actor, token = setup_simple(musket)

    reload(services, token, musket)
    record = actor.record_for(RecordKind.LOADED, "musket")
    assert record.name == "Loaded (Double-barreled Musket) (1/2)"
    assert not record.chamber_selected

    reload(services, token, musket)
    record = actor.record_for(RecordKind.LOADED, "musket")
    assert record.loaded_chambers == 2
    assert record.name == "Loaded (Double-barreled Musket) (2/2)"
    assert [f.text for f in services.floaty_log.texts()] == [
        "Loaded (Double-barreled Musket) (1/2)",
        "Loaded (Double-barreled Musket) (2/2)",
    ]
    assert all(f.highlight for f in services.floaty_log.texts())
    assert is_fully_loaded(actor, musket)

    assert not reload(services, token, musket)
    assert actor.record_for(RecordKind.LOADED, "musket").loaded_chambers == 2


def test_simple_chambered_weapon_selects_chamber(services):
    revolver = WeaponConfig(id="revolver", name="Revolver", capacity=3, is_capacity=True)
    actor, token = setup_simple(revolver)

    reload(services, token, revolver)

    assert actor.record_for(RecordKind.LOADED, "revolver").chamber_selected


def test_npc_tracking_mode_comes_from_settings(services):
    crossbow = WeaponConfig(id="crossbow", name="Crossbow", ammunition_id="rounds")
    actor = make_actor(advanced=None, player=False, stacks=[rounds(5)], weapons=[crossbow])

    reload(services, Token("t", "Guard", actor), crossbow)

    assert isinstance(actor.record_for(RecordKind.LOADED, "crossbow"), SimpleLoaded)
    assert actor.inventory.quantity("rounds") == 5
