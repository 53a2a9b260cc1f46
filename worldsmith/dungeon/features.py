"""Room roles and thematic features.

Roles come from the spanning tree: the room nearest the origin is the entry
and the room the most tree hops away is the level's far end (exit on the
final level, stairwell otherwise). Features are then scattered onto every
non-entry room from the theme's weight table.
"""
from __future__ import annotations
from typing import Dict, Any, List, Sequence

from .connectivity import Edge, hop_distances
from .layout import Feature, Room
from .profiles import TRAP_SCALAR, LayoutProfile
from .tiles import Difficulty, FeatureKind, RoomType

FEATURE_DESCRIPTIONS = {
    FeatureKind.TRAP: "Hidden pressure plate trap",
    FeatureKind.TREASURE: "Stashed valuables",
    FeatureKind.ENCOUNTER: "Active inhabitants",
    FeatureKind.ALTAR: "Ritual focal point",
    FeatureKind.LAIR: "Nest or lair markings",
}

ROOM_DESCRIPTIONS = {
    RoomType.ENTRY: "The entrance to the dungeon",
    RoomType.EXIT: "An exit from the dungeon",
    RoomType.STAIRWELL: "Stairs descend to the level below",
    RoomType.SPECIAL: "A chamber of unusual significance",
    RoomType.CHAMBER: "An unremarkable chamber",
}

LARGE_ROOM_AREA = 80


def _manhattan(a, b) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def entry_index(rooms: Sequence[Room]) -> int:
    return min(range(len(rooms)), key=lambda i: (_manhattan(rooms[i].center, (0, 0)), i))


def far_index(rooms: Sequence[Room], tree: Sequence[Edge], entry: int) -> int:
    hops = hop_distances(len(rooms), tree, entry)
    origin = rooms[entry].center
    candidates = [i for i in range(len(rooms)) if i != entry]
    return max(candidates, key=lambda i: (hops.get(i, -1), _manhattan(rooms[i].center, origin), -i))


def assign_roles(rooms: List[Room], tree: Sequence[Edge], is_final: bool, rng, profile: LayoutProfile) -> None:
    if not rooms:
        return
    for r in rooms:
        r.type = RoomType.CHAMBER
    entry = entry_index(rooms)
    rooms[entry].type = RoomType.ENTRY
    if len(rooms) > 1:
        rooms[far_index(rooms, tree, entry)].type = RoomType.EXIT if is_final else RoomType.STAIRWELL
    special_cap = len(rooms) // 4
    specials = 0
    for r in rooms:
        if r.type != RoomType.CHAMBER:
            continue
        if specials < special_cap and rng.random() < profile.special_chance:
            r.type = RoomType.SPECIAL
            specials += 1
    for r in rooms:
        r.description = ROOM_DESCRIPTIONS[r.type]


def feature_weights(profile: LayoutProfile, difficulty: Difficulty) -> Dict[FeatureKind, float]:
    weights = dict(profile.feature_weights)
    weights[FeatureKind.TRAP] = weights[FeatureKind.TRAP] * TRAP_SCALAR[difficulty]
    return weights


def _roll_feature(rng, weights: Dict[FeatureKind, float]) -> Feature:
    kinds = list(weights)
    kind = rng.choices(kinds, weights=[weights[k] for k in kinds])[0]
    return Feature(kind, kind.value, FEATURE_DESCRIPTIONS[kind])


def scatter_features(rooms: List[Room], rng, profile: LayoutProfile, difficulty: Difficulty,
                     metrics: Dict[str, Any]) -> None:
    """Roll features for every non-entry room; special rooms always get one."""
    weights = feature_weights(profile, difficulty)
    for r in rooms:
        if r.type == RoomType.ENTRY:
            continue
        rolls = 2 if r.area > LARGE_ROOM_AREA else 1
        for _ in range(rolls):
            if rng.random() < profile.feature_chance:
                r.features.append(_roll_feature(rng, weights))
        if r.type == RoomType.SPECIAL and not r.features:
            r.features.append(_roll_feature(rng, weights))
        metrics['features_placed'] = metrics.get('features_placed', 0) + len(r.features)
