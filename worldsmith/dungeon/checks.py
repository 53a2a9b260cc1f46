"""Structural checks over a finished ``DungeonDetail``.

Used by ``scripts/diagnose_seeds.py``; works only from the output document
(the grid is gone by then), so every check rebuilds what it needs from rooms,
corridors and doors.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Set, Tuple

from .layout import DungeonDetail, Level
from .rooms import FOOTPRINT_PAD
from .tiles import RoomType


def overlapping_rooms(level: Level, pad: int = 1) -> List[Tuple[str, str]]:
    out = []
    for i, a in enumerate(level.rooms):
        for b in level.rooms[i + 1:]:
            if a.padded_intersects(b, pad):
                out.append((a.id, b.id))
    return out


def unreachable_rooms(level: Level) -> List[str]:
    """Rooms a breadth-first walk over corridors from the entry never reaches."""
    entries = level.rooms_of_type(RoomType.ENTRY)
    if not entries:
        return [r.id for r in level.rooms]
    adj: Dict[str, Set[str]] = {r.id: set() for r in level.rooms}
    for c in level.corridors:
        a, b = c.connects
        adj[a].add(b)
        adj[b].add(a)
    seen = {entries[0].id}
    q = deque(seen)
    while q:
        cur = q.popleft()
        for nxt in adj[cur]:
            if nxt not in seen:
                seen.add(nxt)
                q.append(nxt)
    return [r.id for r in level.rooms if r.id not in seen]


def role_errors(level: Level, is_final: bool) -> List[str]:
    errors = []
    if not level.rooms:
        return errors
    counts = {t: len(level.rooms_of_type(t)) for t in RoomType}
    if counts[RoomType.ENTRY] != 1:
        errors.append(f"expected 1 entry room, found {counts[RoomType.ENTRY]}")
    if len(level.rooms) > 1:
        far, other = (RoomType.EXIT, RoomType.STAIRWELL) if is_final else (RoomType.STAIRWELL, RoomType.EXIT)
        if counts[far] != 1:
            errors.append(f"expected 1 {far.value} room, found {counts[far]}")
        if counts[other]:
            errors.append(f"unexpected {other.value} room")
    return errors


def door_errors(level: Level) -> List[str]:
    """Junctions without a door record, and doors not between a room and a corridor."""
    errors = []
    doors = {(d.x, d.y): d for d in level.doors}
    corridor_cells = set()
    for c in level.corridors:
        corridor_cells.update(c.path)
        for cell in (c.path[1], c.path[-2]):
            if cell not in doors:
                errors.append(f"{c.id}: junction {cell} has no door")
    for (x, y), d in doors.items():
        neighbours = [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]
        if not any(level.room(d.room_id).contains(nx, ny) for nx, ny in neighbours):
            errors.append(f"{d.id}: not adjacent to room {d.room_id}")
        if not any(n in corridor_cells and not level.room(d.room_id).contains(*n) for n in neighbours):
            errors.append(f"{d.id}: no adjacent corridor cell")
    return errors


def corridor_errors(level: Level) -> List[str]:
    errors = []
    for c in level.corridors:
        for (x1, y1), (x2, y2) in zip(c.path, c.path[1:]):
            if abs(x1 - x2) + abs(y1 - y2) != 1:
                errors.append(f"{c.id}: path not orthogonal at {(x1, y1)}")
                break
        a, b = (level.room(rid) for rid in c.connects)
        if not a.contains(*c.path[0]) or not b.contains(*c.path[-1]):
            errors.append(f"{c.id}: endpoints not on connected rooms")
    return errors


def analyze(detail: DungeonDetail) -> Dict[str, object]:
    """Per-level issue lists plus an overall ``ok`` flag."""
    levels = []
    last = len(detail.levels) - 1
    for level in detail.levels:
        issues = {
            "overlapping_rooms": overlapping_rooms(level, pad=FOOTPRINT_PAD),
            "unreachable_rooms": unreachable_rooms(level),
            "role_errors": role_errors(level, level.level_index == last),
            "door_errors": door_errors(level),
            "corridor_errors": corridor_errors(level),
        }
        levels.append({"level_index": level.level_index, "rooms": len(level.rooms), "issues": issues})
    ok = all(not v for lvl in levels for v in lvl["issues"].values())
    return {"levels": levels, "ok": ok}
