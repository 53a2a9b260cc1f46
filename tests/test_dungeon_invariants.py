"""Dungeon generation invariant tests.

Invariants covered:
1. Padded room rectangles never intersect on a level.
2. Every room is reachable from the entry room over corridors.
3. Exactly one entry per level and one exit on the final level.
4. Door-junction completeness: every corridor/room junction has a door and
   every door sits between its room and a corridor cell.
5. Corridor paths are orthogonal and only enter rooms at their endpoints.
"""

from __future__ import annotations

import pytest

from worldsmith.dungeon import DungeonGenerationParams, generate_dungeon
from worldsmith.dungeon.checks import analyze

from tests.dungeon_test_utils import (
    bfs_rooms,
    corridor_cells,
    neighbours,
    padded_overlap,
    room_at,
    rooms_of,
)

CASES = [
    (101, {}),
    (202, {"difficulty": "easy"}),
    (303, {"difficulty": "deadly", "theme": "goblin lair"}),
    (404, {"grid_width": 80, "grid_height": 40, "theme": "crystal cave"}),
    (505, {"min_room_size": 3, "max_room_size": 5, "theme": "temple"}),
    (606, {"grid_width": 30, "grid_height": 60, "difficulty": "hard", "theme": "fortress"}),
]


def gen(seed, overrides):
    return generate_dungeon(DungeonGenerationParams(**overrides), seed=seed)


@pytest.mark.structure
@pytest.mark.parametrize("seed,overrides", CASES)
def test_rooms_never_overlap(seed, overrides):
    level = gen(seed, overrides).levels[0]
    for i, a in enumerate(level.rooms):
        assert 0 <= a.x and a.x + a.width <= level.width
        assert 0 <= a.y and a.y + a.height <= level.height
        for b in level.rooms[i + 1:]:
            assert not padded_overlap(a, b, pad=1), f"{a.id} overlaps {b.id}"


@pytest.mark.structure
@pytest.mark.parametrize("seed,overrides", CASES)
def test_all_rooms_reachable(seed, overrides):
    level = gen(seed, overrides).levels[0]
    entries = rooms_of(level, "entry")
    assert len(entries) == 1
    assert bfs_rooms(level, entries[0].id) == {r.id for r in level.rooms}


@pytest.mark.structure
@pytest.mark.parametrize("seed,overrides", CASES)
def test_single_entry_and_exit(seed, overrides):
    level = gen(seed, overrides).levels[0]
    assert len(rooms_of(level, "entry")) == 1
    assert len(rooms_of(level, "exit")) == 1
    assert rooms_of(level, "stairwell") == []


@pytest.mark.structure
@pytest.mark.parametrize("seed,overrides", CASES)
def test_door_junction_completeness(seed, overrides):
    level = gen(seed, overrides).levels[0]
    doors = {(d.x, d.y): d for d in level.doors}
    assert len(doors) == len(level.doors), "two doors share a cell"
    cells = corridor_cells(level)
    # every junction has a door
    for c in level.corridors:
        assert c.path[1] in doors and c.path[-2] in doors
        assert {doors[c.path[1]].id, doors[c.path[-2]].id} <= set(c.doors)
    # every corridor cell touching a room interior is a door
    for x, y in cells:
        if room_at(level, x, y) is not None:
            continue
        if any(room_at(level, nx, ny) is not None for nx, ny in neighbours(x, y)):
            assert (x, y) in doors, f"corridor cell {(x, y)} meets a room without a door"
    # every door has its room on one side and a corridor on another
    for (x, y), door in doors.items():
        adjacent_rooms = {room_at(level, nx, ny).id for nx, ny in neighbours(x, y) if room_at(level, nx, ny)}
        assert adjacent_rooms == {door.room_id}
        assert any((nx, ny) in cells and room_at(level, nx, ny) is None for nx, ny in neighbours(x, y))


@pytest.mark.structure
@pytest.mark.parametrize("seed,overrides", CASES)
def test_corridor_paths_orthogonal_and_clean(seed, overrides):
    level = gen(seed, overrides).levels[0]
    for c in level.corridors:
        a_id, b_id = c.connects
        assert room_at(level, *c.path[0]).id == a_id
        assert room_at(level, *c.path[-1]).id == b_id
        for (x1, y1), (x2, y2) in zip(c.path, c.path[1:]):
            assert abs(x1 - x2) + abs(y1 - y2) == 1
        for x, y in c.path[1:-1]:
            assert room_at(level, x, y) is None, f"{c.id} cuts through a room at {(x, y)}"
            assert 0 <= x < level.width and 0 <= y < level.height


@pytest.mark.structure
@pytest.mark.parametrize("seed,overrides", CASES)
def test_structural_checks_pass(seed, overrides):
    assert analyze(gen(seed, overrides))["ok"] is True


@pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
def test_default_scenario_room_band(seed):
    detail = generate_dungeon(
        DungeonGenerationParams(
            grid_width=50, grid_height=50, num_levels=1, min_room_size=2, max_room_size=10, difficulty="medium"
        ),
        seed=seed,
    )
    assert len(detail.levels) == 1
    level = detail.levels[0]
    assert 8 <= len(level.rooms) <= 15
    assert len(rooms_of(level, "entry")) == 1
    assert len(rooms_of(level, "exit")) == 1
    assert bfs_rooms(level, rooms_of(level, "entry")[0].id) == {r.id for r in level.rooms}


def test_tiny_grid_degrades_to_empty_level():
    detail = generate_dungeon(
        DungeonGenerationParams(grid_width=5, grid_height=5, min_room_size=8, max_room_size=10), seed=9
    )
    level = detail.levels[0]
    assert level.rooms == [] and level.corridors == [] and level.doors == []
    assert level.stats["rooms_placed"] == 0
    assert level.stats["placement_shortfall"] == level.stats["rooms_target"]
    assert detail.to_dict()["structure"]["entry_point"] is None
    assert detail.to_dict()["structure"]["exit_points"] == []


def test_single_room_level_has_entry_only():
    # 12x12 fits exactly one 6x6 room
    detail = generate_dungeon(
        DungeonGenerationParams(grid_width=12, grid_height=12, min_room_size=6, max_room_size=6), seed=4
    )
    level = detail.levels[0]
    assert len(level.rooms) == 1
    assert level.rooms[0].type.value == "entry"
    assert level.corridors == [] and level.doors == []
    assert level.rooms[0].features == []
