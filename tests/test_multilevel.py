import pytest

from worldsmith.dungeon import DungeonGenerationParams, RoomType, generate_dungeon
from worldsmith.dungeon.pipeline import level_name, link_levels

from tests.dungeon_test_utils import rooms_of


@pytest.fixture()
def three_levels():
    return generate_dungeon(DungeonGenerationParams(num_levels=3, theme="haunted crypt"), seed=777)


def test_roles_across_levels(three_levels):
    levels = three_levels.levels
    assert [lvl.level_index for lvl in levels] == [0, 1, 2]
    for lvl in levels[:-1]:
        assert len(rooms_of(lvl, "stairwell")) == 1
        assert rooms_of(lvl, "exit") == []
    assert len(rooms_of(levels[-1], "exit")) == 1
    assert rooms_of(levels[-1], "stairwell") == []
    for lvl in levels:
        assert len(rooms_of(lvl, "entry")) == 1


def test_level_names():
    assert [level_name(i, 3) for i in range(3)] == ["Upper Level", "Level 2", "Deep Level"]
    assert level_name(0, 1) == "Upper Level"
    assert level_name(1, 2) == "Deep Level"


def test_stair_links_connect_stairwell_to_next_entry(three_levels):
    links = three_levels.links
    assert [(s.from_level, s.to_level) for s in links] == [(0, 1), (1, 2)]
    for link in links:
        upper = three_levels.levels[link.from_level]
        lower = three_levels.levels[link.to_level]
        assert upper.room(link.from_room).type == RoomType.STAIRWELL
        assert lower.room(link.to_room).type == RoomType.ENTRY
        assert link.direction == "down"
        assert link in upper.stairs and link in lower.stairs
    assert three_levels.levels[1].stairs[0].id == "stairs-0-1"


def test_entry_and_exit_points(three_levels):
    doc = three_levels.to_dict()["structure"]
    first, last = three_levels.levels[0], three_levels.levels[-1]
    assert doc["entry_point"]["level_index"] == 0
    assert first.room(doc["entry_point"]["room_id"]).type == RoomType.ENTRY
    assert len(doc["exit_points"]) == 1
    assert doc["exit_points"][0]["level_index"] == last.level_index
    assert last.room(doc["exit_points"][0]["room_id"]).type == RoomType.EXIT


def test_levels_differ_but_share_texture(three_levels):
    layouts = [[(r.x, r.y, r.width, r.height) for r in lvl.rooms] for lvl in three_levels.levels]
    assert layouts[0] != layouts[1] or layouts[1] != layouts[2]
    assert {lvl.texture_set for lvl in three_levels.levels} == {"ruin"}
    ids = [r.id for lvl in three_levels.levels for r in lvl.rooms]
    assert len(ids) == len(set(ids))


def test_link_skipped_when_level_is_empty(make_dungeon):
    detail = make_dungeon(seed=5, num_levels=2)
    upper, lower = detail.levels
    lower.rooms = []
    upper.stairs, lower.stairs = [], []
    assert link_levels([upper, lower]) == []


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_small_grid_levels_still_link(seed):
    detail = generate_dungeon(DungeonGenerationParams(grid_width=16, grid_height=16, num_levels=3), seed=seed)
    for lvl in detail.levels[:-1]:
        assert len(rooms_of(lvl, "stairwell")) == 1
    assert len(rooms_of(detail.levels[-1], "exit")) == 1
    assert [(s.from_level, s.to_level) for s in detail.links] == [(0, 1), (1, 2)]
