import pytest

from conftest import make_actor, rounds
from ranged_combat.chat import ChatMessage
from ranged_combat.models import SimpleLoaded, WeaponConfig
from ranged_combat.updates import AdjustQuantity, CreateRecord, DeleteRecord, UpdateRecord


def simple_record(record_id="r1"):
    return SimpleLoaded(
        record_id=record_id,
        weapon_id="musket",
        name="Loaded (Musket) (1/2)",
        image="",
        base_name="Loaded (Musket)",
        loaded_chambers=1,
        capacity=2,
    )


def test_staging_does_not_touch_actor(services):
    actor = make_actor(stacks=[rounds(3)])
    updates = services.new_updates(actor)

    updates.create(simple_record())
    updates.adjust_quantity(actor.inventory.get("rounds"), -2)
    updates.floaty_text("Loaded", True)

    assert actor.records == {}
    assert actor.inventory.quantity("rounds") == 3
    assert updates.staged_quantity(actor.inventory.get("rounds")) == 1
    assert services.floaty_log.texts() == []

    updates.handle_updates()

    assert "r1" in actor.records
    assert actor.inventory.quantity("rounds") == 1
    assert [f.text for f in services.floaty_log.texts()] == ["Loaded"]
    assert updates.is_empty()


def test_update_of_pending_creation_rewrites_it(services):
    actor = make_actor()
    updates = services.new_updates(actor)
    record = updates.create(simple_record())

    updated = updates.update(record, loaded_chambers=2, name="Loaded (Musket) (2/2)")

    assert updates.commands == [CreateRecord(updated)]
    updates.handle_updates()
    assert actor.records["r1"].loaded_chambers == 2


def test_delete_of_pending_creation_drops_it(services):
    actor = make_actor()
    updates = services.new_updates(actor)
    record = updates.create(simple_record())

    updates.delete(record)

    assert updates.commands == []


def test_update_and_delete_of_stored_record(services):
    actor = make_actor()
    record = simple_record()
    actor.records[record.record_id] = record
    updates = services.new_updates(actor)

    updated = updates.update(record, loaded_chambers=2)
    updates.delete(updated)

    assert [type(c) for c in updates.commands] == [UpdateRecord, DeleteRecord]
    updates.handle_updates()
    assert actor.records == {}


def test_adjust_below_zero_is_rejected(services):
    actor = make_actor(stacks=[rounds(1)])
    updates = services.new_updates(actor)
    stack = actor.inventory.get("rounds")
    updates.adjust_quantity(stack, -1)

    with pytest.raises(ValueError):
        updates.adjust_quantity(stack, -1)
    assert updates.commands == [AdjustQuantity("rounds", -1)]


def test_select_ammunition_and_chat_flush(services):
    pistol = WeaponConfig(id="pistol", name="Pistol")
    actor = make_actor(stacks=[rounds(1)], weapons=[pistol])
    updates = services.new_updates(actor)

    selected = updates.select_ammunition(pistol, actor.inventory.get("rounds"))
    updates.chat(ChatMessage(actor_id=actor.id, image="", description="Hero reloads.", action_label="Interact"))

    assert selected.ammunition_id == "rounds"
    assert actor.weapon("pistol").ammunition_id is None
    assert services.chat_log.messages() == []

    updates.handle_updates()

    assert actor.weapon("pistol").ammunition_id == "rounds"
    assert services.chat_log.last.description == "Hero reloads."
    assert services.persistence.flush_count == 1


def test_empty_batch_does_not_flush(services):
    updates = services.new_updates(make_actor())
    updates.handle_updates()
    assert services.persistence.flush_count == 0


def test_rollback_restores_rewritten_and_dropped_commands(services):
    actor = make_actor(stacks=[rounds(3)])
    updates = services.new_updates(actor)
    record = updates.create(simple_record())
    updates.floaty_text("Loaded", True)
    checkpoint = updates.checkpoint()

    updates.update(record, loaded_chambers=2, name="Loaded (Musket) (2/2)")
    updates.delete(simple_record("r2"))
    updates.adjust_quantity(actor.inventory.get("rounds"), -1)
    updates.floaty_text("Jammed")
    updates.rollback(checkpoint)

    assert updates.commands == [CreateRecord(record)]
    assert [f.text for f in updates.floaty_texts] == ["Loaded"]
    assert updates.staged_quantity(actor.inventory.get("rounds")) == 3
