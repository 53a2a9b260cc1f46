from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'levels_generated': 0,
        'rooms_target': 0,
        'rooms_placed': 0,
        'placement_shortfall': 0,
        'placement_rejections': 0,
        'corridors_tree': 0,
        'corridors_loop': 0,
        'loop_edges_dropped': 0,
        'detours_used': 0,
        'doors_created': 0,
        'features_placed': 0,
        'runtime_ms': 0.0,
    }


def merge_level_stats(metrics: Dict, stats: Dict[str, int]) -> None:
    """Accumulate one level's deterministic counts into the run metrics."""
    for key, value in stats.items():
        if key in metrics and isinstance(metrics[key], int):
            metrics[key] += value
