import json
from concurrent.futures import ThreadPoolExecutor

from worldsmith.dungeon import DungeonDetail, DungeonGenerationParams, DungeonGenerator, generate_dungeon


def _doc(detail):
    return json.dumps(detail.to_dict(), sort_keys=True)


def test_same_seed_same_document():
    params = DungeonGenerationParams(num_levels=2, theme="goblin lair", difficulty="hard")
    assert _doc(generate_dungeon(params, seed=4242)) == _doc(generate_dungeon(params, seed=4242))


def test_zero_is_a_valid_seed():
    a = generate_dungeon(None, seed=0)
    assert a.seed == 0
    assert _doc(a) == _doc(generate_dungeon({}, seed=0))


def test_different_seeds_differ():
    assert _doc(generate_dungeon(None, seed=1)) != _doc(generate_dungeon(None, seed=2))


def test_unseeded_run_records_its_seed():
    first = generate_dungeon()
    assert isinstance(first.seed, int)
    assert _doc(generate_dungeon(None, seed=first.seed)) == _doc(first)


def test_document_has_no_timing_data():
    gen = DungeonGenerator(DungeonGenerationParams(num_levels=2), seed=3, enable_metrics=True)
    text = _doc(gen.run())
    assert "runtime_ms" not in text and "phase_ms" not in text
    assert "runtime_ms" in gen.metrics


def test_metrics_toggle_does_not_change_output():
    params = DungeonGenerationParams()
    on = DungeonGenerator(params, seed=31, enable_metrics=True).run()
    off = DungeonGenerator(params, seed=31, enable_metrics=False).run()
    assert _doc(on) == _doc(off)


def test_document_round_trip():
    detail = generate_dungeon(DungeonGenerationParams(num_levels=2), seed=77)
    restored = DungeonDetail.from_dict(json.loads(_doc(detail)))
    assert _doc(restored) == _doc(detail)
    assert restored.levels[0].rooms[0].type == detail.levels[0].rooms[0].type


def test_map_image_url_serialised_only_when_set():
    detail = generate_dungeon(None, seed=5)
    level = detail.levels[0]
    assert "map_image_url" not in level.to_dict()
    level.map_image_url = "https://img.example/level0.png"
    restored = DungeonDetail.from_dict(detail.to_dict())
    assert restored.levels[0].map_image_url == "https://img.example/level0.png"


def test_identity_block():
    doc = generate_dungeon({"theme": "Sunken Temple", "difficulty": "deadly"}, seed=12).to_dict()
    identity = doc["identity"]
    assert identity["type"] == "temple"
    assert identity["theme"] == "Sunken Temple"
    assert identity["difficulty"] == "deadly"
    assert identity["recommended_level"] == 15
    assert identity["name"].startswith("Sunken Temple ")
    assert doc["structure"]["levels"][0]["grid_dimensions"] == {"width": 50, "height": 50, "cell_size": 5}


def test_supplied_name_kept():
    assert generate_dungeon({"name": "The Maw"}, seed=1).name == "The Maw"


def test_concurrent_generation_is_isolated():
    params = DungeonGenerationParams(num_levels=2)
    seeds = [101, 102, 103, 104] * 2

    def run(seed):
        return _doc(DungeonGenerator(params, seed=seed, enable_metrics=False).run())

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(run, seeds))
    assert results[:4] == results[4:]
    assert results[:4] == [run(s) for s in seeds[:4]]
