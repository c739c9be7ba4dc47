# src/tidy_todo/preferences.py

"""
User preferences (appearance + feedback switches).

Stored as a flat JSON object. Loading is best-effort: unknown keys are
ignored and malformed values fall back to their defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from enum import StrEnum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AccentColor(StrEnum):
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
    RAINBOW = "rainbow"
    GOLD = "gold"


class FontSize(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"

    @property
    def multiplier(self) -> float:
        return _FONT_MULTIPLIERS[self]


_FONT_MULTIPLIERS = {
    FontSize.SMALL: 0.8,
    FontSize.MEDIUM: 1.0,
    FontSize.LARGE: 1.2,
    FontSize.EXTRA_LARGE: 1.4,
}


@dataclass(slots=True)
class Preferences:
    dark_mode: bool = False
    particles_enabled: bool = True
    animation_speed: float = 1.0
    particle_count: int = 20
    sound_enabled: bool = True
    haptic_enabled: bool = True
    celebration_enabled: bool = True
    accent_color: AccentColor = AccentColor.BLUE
    font_size: FontSize = FontSize.MEDIUM

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["accent_color"] = self.accent_color.value
        data["font_size"] = self.font_size.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Preferences:
        prefs = cls()
        for f in fields(cls):
            if f.name in data:
                try:
                    setattr(prefs, f.name, _coerce(f.name, data[f.name], getattr(prefs, f.name)))
                except (TypeError, ValueError):
                    logger.warning("Ignoring bad preference %s=%r", f.name, data[f.name])
        return prefs

    def set(self, name: str, raw: Any) -> None:
        """Set one preference from a loose value (e.g. text typed by the user)."""
        if name not in {f.name for f in fields(self)}:
            raise KeyError(name)
        setattr(self, name, _coerce(name, raw, getattr(self, name)))


def _coerce(name: str, raw: Any, current: Any) -> Any:
    if isinstance(current, StrEnum):
        return type(current)(str(raw).strip().lower())
    if isinstance(current, bool):
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in {"1", "true", "yes", "y", "on"}:
            return True
        if text in {"0", "false", "no", "n", "off"}:
            return False
        raise ValueError(f"{name}: not a boolean: {raw!r}")
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    return raw


class PreferencesStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read preferences from %s; using defaults", self._path)
            return Preferences()
        if not isinstance(data, dict):
            logger.warning("Preferences file %s is not an object; using defaults", self._path)
            return Preferences()
        return Preferences.from_dict(data)

    def save(self, prefs: Preferences) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(prefs.to_dict(), ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        logger.debug("Saved preferences to %s", self._path)

    def reset(self) -> Preferences:
        prefs = Preferences()
        self.save(prefs)
        return prefs
