from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Dict, Optional

import yaml

from .exceptions import TemplateNotFound
from .models.actor import Actor
from .models.records import RecordKind

logger = logging.getLogger(__name__)


@dataclass
class AmmunitionSettings:
    advanced_for_players: bool = True
    advanced_for_npcs: bool = False


@dataclass
class ChatSettings:
    reload_image: str = "icons/actions/reload-ammunition.webp"
    action_label: str = "Interact"
    max_displayed_action_cost: int = 3


@dataclass(frozen=True)
class RecordTemplate:
    """Blank record source: the display name and image new records start from."""

    name: str
    image: str = ""


def _default_templates() -> Dict[str, RecordTemplate]:
    return {
        RecordKind.LOADED.value: RecordTemplate("Loaded"),
        RecordKind.MAGAZINE_LOADED.value: RecordTemplate("Magazine Loaded"),
        RecordKind.CONJURED_ROUND.value: RecordTemplate("Conjured Round"),
    }


@dataclass
class RangedCombatSettings:
    ammunition: AmmunitionSettings = field(default_factory=AmmunitionSettings)
    chat: ChatSettings = field(default_factory=ChatSettings)
    templates: Dict[str, RecordTemplate] = field(default_factory=_default_templates)

    def use_advanced_ammunition(self, actor: Actor) -> bool:
        """Whether ammunition identity and stack consumption are tracked for ``actor``."""
        if actor.advanced_ammunition is not None:
            return actor.advanced_ammunition
        if actor.has_player_owner:
            return self.ammunition.advanced_for_players
        return self.ammunition.advanced_for_npcs

    def template(self, kind: RecordKind) -> RecordTemplate:
        try:
            return self.templates[kind.value]
        except KeyError:
            raise TemplateNotFound(f"No record template configured for '{kind.value}'") from None

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: dict) -> "RangedCombatSettings":
        ammunition = AmmunitionSettings(**data.get("ammunition", {}))
        chat = ChatSettings(**data.get("chat", {}))
        templates = {
            str(kind): RecordTemplate(name=str(raw["name"]), image=str(raw.get("image", "")))
            for kind, raw in (data.get("templates") or {}).items()
        }
        return cls(ammunition=ammunition, chat=chat, templates=templates)

    def to_dict(self) -> dict:
        return {
            "ammunition": dataclasses.asdict(self.ammunition),
            "chat": dataclasses.asdict(self.chat),
            "templates": {k: dataclasses.asdict(t) for k, t in self.templates.items()},
        }

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "RangedCombatSettings":
        """Load settings from built-in defaults and optional user override file.

        If user_path is provided and exists, overlay values onto defaults.
        """
        try:
            with resources.files("ranged_combat.config").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = cls().to_dict()

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls._from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved settings to %s", path)
