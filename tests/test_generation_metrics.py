from worldsmith.dungeon import DungeonGenerationParams, DungeonGenerator
from worldsmith.dungeon.metrics import init_metrics, merge_level_stats


def test_metrics_collected_when_enabled():
    gen = DungeonGenerator(DungeonGenerationParams(num_levels=2), seed=123, enable_metrics=True)
    detail = gen.run()
    m = gen.metrics
    assert set(init_metrics()) <= set(m)
    assert m["levels_generated"] == 2
    assert m["rooms_placed"] == sum(len(lvl.rooms) for lvl in detail.levels)
    assert m["rooms_target"] == sum(lvl.stats["rooms_target"] for lvl in detail.levels)
    assert m["corridors_tree"] + m["corridors_loop"] == sum(len(lvl.corridors) for lvl in detail.levels)
    assert m["doors_created"] == sum(len(lvl.doors) for lvl in detail.levels)
    assert m["features_placed"] == sum(len(r.features) for lvl in detail.levels for r in lvl.rooms)
    assert m["runtime_ms"] >= 0
    assert set(m["phase_ms"]) == {"level_0", "level_1", "link_levels"}


def test_level_stats_are_consistent():
    detail = DungeonGenerator(DungeonGenerationParams(difficulty="deadly"), seed=9, enable_metrics=False).run()
    level = detail.levels[0]
    stats = level.stats
    assert stats["rooms_placed"] == len(level.rooms)
    assert stats["corridors_tree"] == max(0, len(level.rooms) - 1)
    assert stats["corridors_loop"] == sum(1 for c in level.corridors if c.loop)
    assert stats["doors"] == len(level.doors)
    assert stats["placement_shortfall"] == max(0, stats["rooms_target"] - stats["rooms_placed"])


def test_metrics_disabled():
    gen = DungeonGenerator(DungeonGenerationParams(), seed=1, enable_metrics=False)
    gen.run()
    assert gen.metrics == {}


def test_app_config_disables_metrics(test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "DUNGEON_ENABLE_GENERATION_METRICS", False)
    gen = DungeonGenerator(DungeonGenerationParams(), seed=1)
    assert gen.enable_metrics is False
    gen.run()
    assert gen.metrics == {}


def test_env_flag_used_without_app_config(test_app, monkeypatch):
    monkeypatch.delitem(test_app.config, "DUNGEON_ENABLE_GENERATION_METRICS")
    monkeypatch.setenv("DUNGEON_ENABLE_GENERATION_METRICS", "0")
    assert DungeonGenerator(DungeonGenerationParams(), seed=1).enable_metrics is False
    monkeypatch.setenv("DUNGEON_ENABLE_GENERATION_METRICS", "1")
    assert DungeonGenerator(DungeonGenerationParams(), seed=1).enable_metrics is True


def test_merge_level_stats_only_adds_known_counters():
    metrics = init_metrics()
    merge_level_stats(metrics, {"rooms_placed": 4, "doors": 6, "corridors_loop": 2})
    merge_level_stats(metrics, {"rooms_placed": 3})
    assert metrics["rooms_placed"] == 7
    assert metrics["corridors_loop"] == 2
    assert "doors" not in metrics
