import time

import pytest

from worldsmith.dungeon import DungeonGenerationParams, DungeonGenerator


@pytest.mark.performance
def test_large_multilevel_generation_is_fast():
    params = DungeonGenerationParams(grid_width=200, grid_height=200, num_levels=3, difficulty="deadly")
    start = time.perf_counter()
    gen = DungeonGenerator(params, seed=2024, enable_metrics=True)
    detail = gen.run()
    elapsed = time.perf_counter() - start
    assert sum(len(lvl.rooms) for lvl in detail.levels) > 100
    # generous ceiling for slow CI machines
    assert elapsed < 20.0, f"generation took {elapsed:.2f}s"
    assert gen.metrics["corridors_tree"] == gen.metrics["rooms_placed"] - len(detail.levels)


@pytest.mark.performance
def test_default_generation_is_fast():
    start = time.perf_counter()
    for seed in range(20):
        DungeonGenerator(DungeonGenerationParams(), seed=seed, enable_metrics=False).run()
    assert time.perf_counter() - start < 10.0
