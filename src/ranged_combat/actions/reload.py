from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from ..chat import ChatMessage
from ..events import ReloadEvent
from ..exceptions import (
    AlreadyLoaded,
    AlreadyLoadedSame,
    AmmunitionExhausted,
    EmptyMagazine,
    NoAmmunitionSelected,
    NoMagazine,
    NotReloadable,
    RecordInvariantError,
    ReloadWarning,
)
from ..loaded import build_loaded_name, check_fully_loaded, is_fully_loaded, loaded_record
from ..models.actor import Actor, Token
from ..models.ammunition import AmmunitionStack, LoadedAmmunition
from ..models.records import (
    CapacityLoaded,
    ChamberCocked,
    MagazineLoaded,
    RecordKind,
    SimpleLoaded,
    SingleLoaded,
    new_record_id,
)
from ..models.weapon import WeaponConfig
from ..selection import get_weapon, get_weapons
from ..updates import PendingUpdates
from .chamber import set_loaded_chamber
from .unload import unload_ammunition

if TYPE_CHECKING:
    from ..context import CombatServices

logger = logging.getLogger(__name__)


def _requires_loading(weapon: WeaponConfig) -> bool:
    return weapon.requires_loading


def reload(services: "CombatServices", token: Optional[Token], weapon: Optional[WeaponConfig] = None) -> bool:
    """
    Reload one of the token's weapons, prompting for the weapon when none is given.

    Refusals are reported through the notifier and leave the actor untouched.
    Returns True when a reload was applied.
    """
    if token is None:
        return False
    actor = token.actor
    try:
        if weapon is None:
            weapon = get_weapon(
                actor,
                _requires_loading,
                "You have no reloadable weapons.",
                lambda w: not is_fully_loaded(actor, w),
                services.weapon_chooser,
            )
        if weapon is None:
            return False
        updates = services.new_updates(actor)
        perform_reload(services, actor, token, weapon, updates)
    except ReloadWarning as warning:
        services.notifier.warn(str(warning))
        return False

    updates.handle_updates()
    return True


def reload_all(services: "CombatServices", tokens: Iterable[Token]) -> int:
    """
    Reload every reloadable weapon of every token not owned by a player.

    Warnings are silenced for the duration and a refused weapon does not stop
    the others. Each actor's batch is flushed on its own, so actors already
    processed keep their reloads if a later one fails. Returns the number of
    weapons reloaded.
    """
    reloaded = 0
    with services.notifier.silenced():
        for token in tokens:
            actor = token.actor
            if actor.has_player_owner:
                continue

            updates = services.new_updates(actor)
            for weapon in get_weapons(actor, _requires_loading):
                if is_fully_loaded(actor, weapon):
                    continue
                checkpoint = updates.checkpoint()
                try:
                    perform_reload(services, actor, token, weapon, updates)
                    reloaded += 1
                except ReloadWarning as warning:
                    # A hook may refuse after the reload itself was staged
                    updates.rollback(checkpoint)
                    services.notifier.warn(str(warning))

            updates.handle_updates()
    logger.info("Reloaded %d NPC weapons", reloaded)
    return reloaded


def perform_reload(
    services: "CombatServices",
    actor: Actor,
    token: Token,
    weapon: WeaponConfig,
    updates: PendingUpdates,
) -> None:
    """Stage a single reload of ``weapon`` into ``updates``.

    Raises a ReloadWarning when the reload is refused. The weapon checks run
    before anything is staged; a reload hook that refuses may leave staged
    changes behind, which callers roll back or discard with the batch.
    """
    if not weapon.requires_loading:
        raise NotReloadable(f"{weapon.name} does not need to be reloaded.")

    if services.settings.use_advanced_ammunition(actor):
        if weapon.is_repeating:
            _cock_repeating(services, actor, token, weapon, updates)
        else:
            if weapon.capacity:
                check_fully_loaded(actor, weapon)
                ammo = get_ammunition(services, actor, weapon, updates)
                _load_chamber(services, actor, token, weapon, ammo, updates)
            else:
                ammo = get_ammunition(services, actor, weapon, updates)
                _load_single(services, actor, token, weapon, ammo, updates)

            # Remove one piece of ammunition from the stack
            updates.adjust_quantity(ammo, -1)
    else:
        _reload_simple(services, actor, token, weapon, updates)

    services.hooks.run(weapon, updates)
    services.events.publish(ReloadEvent(actor=actor, token=token, weapon=weapon))
    logger.info("%s reloaded %s", actor.name, weapon.name)


def _cock_repeating(
    services: "CombatServices",
    actor: Actor,
    token: Token,
    weapon: WeaponConfig,
    updates: PendingUpdates,
) -> None:
    # Only the magazine needs rounds left; the round itself is consumed on firing
    magazine = actor.record_for(RecordKind.MAGAZINE_LOADED, weapon.id)
    if not isinstance(magazine, MagazineLoaded):
        raise NoMagazine(f"{weapon.name} has no magazine loaded!")
    if magazine.remaining < 1:
        raise EmptyMagazine(f"{weapon.name}'s magazine is empty!")
    if loaded_record(actor, weapon) is not None:
        raise AlreadyLoaded(f"{weapon.name} is already loaded.")

    template = services.settings.template(RecordKind.LOADED)
    updates.create(
        ChamberCocked(
            record_id=new_record_id(),
            weapon_id=weapon.id,
            name=f"{template.name} ({weapon.name})",
            image=template.image,
        )
    )
    post_reload_to_chat(services, token, weapon, updates)


def _load_chamber(
    services: "CombatServices",
    actor: Actor,
    token: Token,
    weapon: WeaponConfig,
    ammo: AmmunitionStack,
    updates: PendingUpdates,
) -> None:
    loaded = loaded_record(actor, weapon)
    if loaded is not None and not isinstance(loaded, CapacityLoaded):
        raise RecordInvariantError(f"{weapon.name} carries a loaded record without ammunition tracking")

    entry = LoadedAmmunition.from_stack(ammo)
    if loaded is not None:
        existing = loaded.entry_for(ammo.source_id)
        if existing is not None:
            ammunition = tuple(
                e.with_quantity(e.quantity + 1) if e.source_id == ammo.source_id else e
                for e in loaded.ammunition
            )
        else:
            ammunition = loaded.ammunition + (entry,)
        chambers = loaded.loaded_chambers + 1
        record = updates.update(
            loaded,
            name=build_loaded_name(loaded.base_name, ammunition, chambers, loaded.capacity),
            loaded_chambers=chambers,
            ammunition=ammunition,
        )
        updates.floaty_text(f"{loaded.base_name} {ammo.name} {chambers}/{loaded.capacity}", True)
    else:
        template = services.settings.template(RecordKind.LOADED)
        base_name = f"{template.name} ({weapon.name})"
        ammunition = (entry,)
        record = updates.create(
            CapacityLoaded(
                record_id=new_record_id(),
                weapon_id=weapon.id,
                name=build_loaded_name(base_name, ammunition, 1, weapon.capacity),
                image=template.image,
                base_name=base_name,
                loaded_chambers=1,
                capacity=weapon.capacity,
                ammunition=ammunition,
            )
        )

    # If no chamber is selected yet, the one just loaded is
    if weapon.is_capacity:
        set_loaded_chamber(actor, weapon, entry, updates, record=record)

    post_reload_to_chat(services, token, weapon, updates, ammo.name)


def _load_single(
    services: "CombatServices",
    actor: Actor,
    token: Token,
    weapon: WeaponConfig,
    ammo: AmmunitionStack,
    updates: PendingUpdates,
) -> None:
    loaded = loaded_record(actor, weapon)
    conjured = actor.record_for(RecordKind.CONJURED_ROUND, weapon.id)
    if conjured is None and isinstance(loaded, SingleLoaded) and loaded.ammunition.source_id == ammo.source_id:
        raise AlreadyLoadedSame(f"{weapon.name} is already loaded with {ammo.name}.")

    # Loading over a conjured round uses it up; a real round is ejected
    if conjured is not None:
        updates.delete(conjured)
        if loaded is not None:
            updates.delete(loaded)
    elif loaded is not None:
        unload_ammunition(actor, weapon, updates, restore=False)

    template = services.settings.template(RecordKind.LOADED)
    updates.create(
        SingleLoaded(
            record_id=new_record_id(),
            weapon_id=weapon.id,
            name=f"{template.name} ({weapon.name}) ({ammo.name})",
            image=template.image,
            ammunition=LoadedAmmunition.from_stack(ammo),
        )
    )
    post_reload_to_chat(services, token, weapon, updates, ammo.name)


def _reload_simple(
    services: "CombatServices",
    actor: Actor,
    token: Token,
    weapon: WeaponConfig,
    updates: PendingUpdates,
) -> None:
    check_fully_loaded(actor, weapon)

    loaded = loaded_record(actor, weapon)
    if loaded is not None and not isinstance(loaded, SimpleLoaded):
        raise RecordInvariantError(f"{weapon.name} carries a loaded record with ammunition tracking")

    template = services.settings.template(RecordKind.LOADED)
    base_name = f"{template.name} ({weapon.name})"
    if weapon.capacity:
        if loaded is not None:
            chambers = loaded.loaded_chambers + 1
            text = f"{loaded.base_name} ({chambers}/{loaded.capacity})"
            record = updates.update(loaded, name=text, loaded_chambers=chambers)
        else:
            text = f"{base_name} (1/{weapon.capacity})"
            record = updates.create(
                SimpleLoaded(
                    record_id=new_record_id(),
                    weapon_id=weapon.id,
                    name=text,
                    image=template.image,
                    base_name=base_name,
                    loaded_chambers=1,
                    capacity=weapon.capacity,
                )
            )
        updates.floaty_text(text, True)

        if weapon.is_capacity:
            set_loaded_chamber(actor, weapon, None, updates, record=record)
    else:
        updates.create(
            SimpleLoaded(
                record_id=new_record_id(),
                weapon_id=weapon.id,
                name=base_name,
                image=template.image,
                base_name=base_name,
            )
        )
    post_reload_to_chat(services, token, weapon, updates)


def get_ammunition(
    services: "CombatServices",
    actor: Actor,
    weapon: WeaponConfig,
    updates: PendingUpdates,
) -> AmmunitionStack:
    """
    Return the stack to load from, prompting for another one when nothing is
    selected or the selected stack is empty.

    Raises NoAmmunitionSelected or AmmunitionExhausted when the prompt is declined.
    """
    selector = services.ammunition_selector
    stack = actor.selected_ammunition(weapon)
    if stack is None:
        chosen = selector.select(
            actor,
            weapon,
            updates,
            f"You have no equipped ammunition compatible with {weapon.name}.",
            f"You have no ammunition selected for your {weapon.name}. Select the ammunition to load.",
            False,
        )
        if chosen is None or updates.staged_quantity(chosen) < 1:
            raise NoAmmunitionSelected(f"You have no ammunition selected for your {weapon.name}.")
        return chosen

    if updates.staged_quantity(stack) < 1:
        chosen = selector.select(
            actor,
            weapon,
            updates,
            f"Not enough ammunition to reload {weapon.name}.",
            f"Your selected ammunition for your {weapon.name} is empty. Select new ammunition to load.",
            True,
        )
        if chosen is None or updates.staged_quantity(chosen) < 1:
            raise AmmunitionExhausted(f"Not enough ammunition to reload {weapon.name}.")
        return chosen

    return stack


def post_reload_to_chat(
    services: "CombatServices",
    token: Token,
    weapon: WeaponConfig,
    updates: PendingUpdates,
    ammunition_name: Optional[str] = None,
) -> ChatMessage:
    chat = services.settings.chat
    description = f"{token.name} reloads their {weapon.name}"
    if ammunition_name:
        description = f"{description} with {ammunition_name}."
    else:
        description = f"{description}."

    cost = weapon.reload_action_cost
    message = ChatMessage(
        actor_id=token.actor.id,
        image=chat.reload_image,
        description=description,
        action_label=chat.action_label,
        action_cost_label=str(cost) if cost <= chat.max_displayed_action_cost else "",
    )
    updates.chat(message)
    return message
