import pytest

from worldsmith.dungeon import (
    Difficulty,
    DungeonGenerationParams,
    InvalidParametersError,
    generate_dungeon,
)
from worldsmith.dungeon.profiles import LAYOUT_PROFILES, get_layout_profile, resolve_dungeon_type


def test_defaults():
    p = DungeonGenerationParams()
    assert (p.grid_width, p.grid_height, p.num_levels) == (50, 50, 1)
    assert (p.min_room_size, p.max_room_size) == (2, 10)
    assert p.difficulty == "medium"
    assert p.use_ai is False
    assert p.validate() is p


def test_from_dict_coerces_and_ignores_unknown():
    p = DungeonGenerationParams.from_dict(
        {"grid_width": "40", "grid_height": 30, "difficulty": "HARD", "bogus": 1, "name": None}
    )
    assert p.grid_width == 40 and p.grid_height == 30
    assert p.difficulty == "hard"
    assert p.name is None


def test_from_dict_reports_every_bad_int():
    with pytest.raises(InvalidParametersError) as exc:
        DungeonGenerationParams.from_dict({"grid_width": "wide", "num_levels": True})
    assert any("grid_width" in e for e in exc.value.errors)
    assert any("num_levels" in e for e in exc.value.errors)


def test_validate_collects_all_errors():
    p = DungeonGenerationParams(grid_width=0, min_room_size=6, max_room_size=3, num_levels=0, difficulty="nightmare")
    with pytest.raises(InvalidParametersError) as exc:
        p.validate()
    errors = exc.value.errors
    assert any("grid_width" in e for e in errors)
    assert any("max_room_size" in e for e in errors)
    assert any("num_levels" in e for e in errors)
    assert any("difficulty" in e for e in errors)
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize(
    "overrides",
    [
        {"grid_height": -5},
        {"min_room_size": 0},
        {"max_room_size": 1, "min_room_size": 2},
        {"num_levels": 0},
    ],
)
def test_generate_rejects_invalid_input(overrides):
    with pytest.raises(InvalidParametersError):
        generate_dungeon(DungeonGenerationParams(**overrides), seed=1)


def test_difficulty_enum_member_accepted():
    p = DungeonGenerationParams(difficulty=Difficulty.DEADLY)
    assert p.difficulty == "deadly"
    assert p.difficulty_level is Difficulty.DEADLY


def test_generate_accepts_plain_mapping():
    detail = generate_dungeon({"grid_width": 30, "grid_height": 30, "theme": "goblin lair"}, seed=3)
    assert detail.type == "lair"
    assert detail.theme == "goblin lair"


@pytest.mark.parametrize(
    "theme,expected",
    [
        ("Goblin Lair", "lair"),
        ("sunken temple", "temple"),
        ("Haunted Crypt", "ruin"),
        ("crystal grotto", "cave"),
        ("the black citadel", "fortress"),
        ("wizard spire", "tower"),
        ("", "dungeon"),
        (None, "dungeon"),
        ("something else entirely", "dungeon"),
    ],
)
def test_theme_resolution(theme, expected):
    assert resolve_dungeon_type(theme) == expected


def test_every_type_has_profile():
    for dungeon_type in ("dungeon", "cave", "ruin", "fortress", "tower", "temple", "lair"):
        assert dungeon_type in LAYOUT_PROFILES
    dungeon_type, profile = get_layout_profile("goblin lair")
    weights = profile.feature_weights
    assert max(weights, key=weights.get).value == "lair"
