"""Theme-driven layout profiles.

A free-form theme string ("goblin lair", "sunken temple") resolves to one of a
handful of base dungeon types. Each type carries the knobs the generation
stages read: how densely rooms are packed, how many loop corridors get added,
how often rooms turn special and which features they favour.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .tiles import Difficulty, DoorType, FeatureKind


@dataclass(frozen=True)
class LayoutProfile:
    room_density: float
    extra_connections: float
    special_chance: float
    feature_chance: float
    open_door_chance: float
    feature_weights: Dict[FeatureKind, float]


def _weights(trap, treasure, encounter, altar, lair) -> Dict[FeatureKind, float]:
    return {
        FeatureKind.TRAP: trap,
        FeatureKind.TREASURE: treasure,
        FeatureKind.ENCOUNTER: encounter,
        FeatureKind.ALTAR: altar,
        FeatureKind.LAIR: lair,
    }


# Feature biases carried over from the content team's tables
_RELIGIOUS = _weights(0.15, 0.25, 0.2, 0.35, 0.05)
_MILITARY = _weights(0.3, 0.1, 0.25, 0.05, 0.3)
_ORGANIC = _weights(0.1, 0.05, 0.35, 0.05, 0.45)
_ARCANE = _weights(0.25, 0.25, 0.2, 0.2, 0.1)
_WILD = _weights(0.15, 0.15, 0.3, 0.05, 0.35)

LAYOUT_PROFILES: Dict[str, LayoutProfile] = {
    "dungeon": LayoutProfile(0.40, 0.25, 0.15, 0.55, 0.2, _ARCANE),
    "cave": LayoutProfile(0.45, 0.35, 0.10, 0.50, 0.4, _ORGANIC),
    "ruin": LayoutProfile(0.40, 0.20, 0.15, 0.55, 0.3, _ARCANE),
    "fortress": LayoutProfile(0.36, 0.18, 0.20, 0.60, 0.1, _MILITARY),
    "tower": LayoutProfile(0.34, 0.20, 0.20, 0.55, 0.2, _ARCANE),
    "temple": LayoutProfile(0.36, 0.22, 0.30, 0.60, 0.2, _RELIGIOUS),
    "lair": LayoutProfile(0.42, 0.30, 0.15, 0.65, 0.3, _WILD),
}

# (keywords, type); first match wins
_THEME_KEYWORDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("cave", "grotto"), "cave"),
    (("ruin", "crypt"), "ruin"),
    (("fort", "keep", "citadel"), "fortress"),
    (("tower", "spire"), "tower"),
    (("temple", "cathedral"), "temple"),
    (("lair", "den"), "lair"),
)

# Multipliers keyed by difficulty
ROOM_DENSITY_MULTIPLIER = {
    Difficulty.EASY: 0.8,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 1.2,
    Difficulty.DEADLY: 1.35,
}
LOOP_MULTIPLIER = {
    Difficulty.EASY: 0.6,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 1.3,
    Difficulty.DEADLY: 1.6,
}
TRAP_SCALAR = {
    Difficulty.EASY: 0.7,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 1.2,
    Difficulty.DEADLY: 1.4,
}
RECOMMENDED_LEVEL = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 5,
    Difficulty.HARD: 10,
    Difficulty.DEADLY: 15,
}
DOOR_TYPE_WEIGHTS: Dict[Difficulty, Dict[DoorType, float]] = {
    Difficulty.EASY: {DoorType.NORMAL: 0.85, DoorType.LOCKED: 0.10, DoorType.SECRET: 0.05},
    Difficulty.MEDIUM: {DoorType.NORMAL: 0.70, DoorType.LOCKED: 0.20, DoorType.SECRET: 0.10},
    Difficulty.HARD: {DoorType.NORMAL: 0.55, DoorType.LOCKED: 0.30, DoorType.SECRET: 0.15},
    Difficulty.DEADLY: {DoorType.NORMAL: 0.40, DoorType.LOCKED: 0.38, DoorType.SECRET: 0.22},
}
LOCK_DC_BONUS = {
    Difficulty.EASY: 0,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 4,
    Difficulty.DEADLY: 6,
}


def resolve_dungeon_type(theme: str | None) -> str:
    if not theme:
        return "dungeon"
    norm = theme.lower()
    for keywords, dungeon_type in _THEME_KEYWORDS:
        if any(k in norm for k in keywords):
            return dungeon_type
    return "dungeon"


def get_layout_profile(theme: str | None) -> Tuple[str, LayoutProfile]:
    dungeon_type = resolve_dungeon_type(theme)
    return dungeon_type, LAYOUT_PROFILES[dungeon_type]


__all__ = [
    "LayoutProfile",
    "LAYOUT_PROFILES",
    "ROOM_DENSITY_MULTIPLIER",
    "LOOP_MULTIPLIER",
    "TRAP_SCALAR",
    "RECOMMENDED_LEVEL",
    "DOOR_TYPE_WEIGHTS",
    "LOCK_DC_BONUS",
    "resolve_dungeon_type",
    "get_layout_profile",
]
