"""Pipeline orchestration for dungeon generation.

``DungeonGenerator`` runs the four stages for every level (room placement,
connectivity, doors and features) and then links the levels. All randomness
flows from one seeded ``random.Random``: the dungeon RNG draws a seed per
level up front, so each level owns an independent generator and the same
seed always reproduces the same document.
"""
from __future__ import annotations

import os
import random
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from flask import current_app, has_app_context

from ..logging_utils import get_logger
from .config import DungeonGenerationParams
from .connectivity import complete_graph, minimum_spanning_tree, select_loop_edges
from .doors import place_doors
from .errors import ConnectivityFault
from .features import assign_roles, scatter_features
from .grid import Grid
from .layout import Corridor, DungeonDetail, Level, Room, StairLink
from .metrics import init_metrics, merge_level_stats
from .profiles import LOOP_MULTIPLIER, RECOMMENDED_LEVEL, get_layout_profile
from .rooms import place_rooms
from .tiles import RoomType
from .tunnels import carve_corridor, loop_budget, tree_budget

log = get_logger("worldsmith.dungeon")

MAX_SEED = 2**31 - 1


def _metrics_enabled() -> bool:
    # Flask config wins over the environment when generating inside a request
    if has_app_context() and 'DUNGEON_ENABLE_GENERATION_METRICS' in current_app.config:
        return bool(current_app.config['DUNGEON_ENABLE_GENERATION_METRICS'])
    val = os.environ.get('DUNGEON_ENABLE_GENERATION_METRICS')
    if val is None:
        return True
    return val.lower() not in {'0', 'false', 'no', ''}


def level_name(index: int, total: int) -> str:
    if index == 0:
        return "Upper Level"
    if index == total - 1:
        return "Deep Level"
    return f"Level {index + 1}"


class DungeonGenerator:
    def __init__(self, params: DungeonGenerationParams, seed: Optional[int] = None,
                 enable_metrics: Optional[bool] = None):
        self.params = params.validate()
        # 0 is a valid deterministic seed; None => random
        self.seed = random.randint(0, MAX_SEED) if seed is None else int(seed)
        self.rng = random.Random(self.seed)
        self.enable_metrics = _metrics_enabled() if enable_metrics is None else enable_metrics
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self.dungeon_type, self.profile = get_layout_profile(params.theme)

    def run(self) -> DungeonDetail:
        """Execute every stage with lightweight per-phase timing.

        When metrics are enabled ``metrics['phase_ms']`` maps phase name to
        duration (ms). Timings never enter the returned document.
        """
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times: Dict[str, int] = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        params = self.params
        level_seeds = [self.rng.randint(0, MAX_SEED) for _ in range(params.num_levels)]
        name = params.name or f"{params.theme.title()} {self.rng.randint(1, 999)}"
        levels = [
            _phase(f"level_{i}", self.build_level, i, level_seeds[i])
            for i in range(params.num_levels)
        ]
        links = _phase("link_levels", link_levels, levels)
        detail = DungeonDetail(
            name=name,
            type=self.dungeon_type,
            theme=params.theme,
            difficulty=params.difficulty,
            recommended_level=RECOMMENDED_LEVEL[params.difficulty_level],
            levels=levels,
            links=links,
            seed=self.seed,
        )
        if self.enable_metrics:
            self.metrics['levels_generated'] = len(levels)
            self.metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
            self.metrics['phase_ms'] = phase_times
        log.info(event="dungeon_generated", seed=self.seed, levels=len(levels),
                 rooms=sum(len(lvl.rooms) for lvl in levels), type=self.dungeon_type,
                 difficulty=params.difficulty, runtime_ms=self.metrics.get('runtime_ms'))
        return detail

    def build_level(self, index: int, level_seed: int) -> Level:
        """Empty grid -> rooms -> spanning tree (+loops) -> doors & roles -> features."""
        params, profile = self.params, self.profile
        difficulty = params.difficulty_level
        is_final = index == params.num_levels - 1
        rng = random.Random(level_seed)
        grid = Grid(params.grid_width, params.grid_height)
        scratch: Dict[str, Any] = {}

        placement = place_rooms(grid, params, profile, index, rng)
        rooms = placement.rooms
        if placement.shortfall:
            log.warn(event="placement_shortfall", level_index=index, target=placement.target,
                     placed=len(rooms), rejections=placement.rejections)

        edges = complete_graph(rooms)
        tree = minimum_spanning_tree(len(rooms), edges)
        loops = select_loop_edges(edges, tree, profile.extra_connections * LOOP_MULTIPLIER[difficulty])
        corridors, detours = _carve_tree(grid, rooms, tree, rng, index)
        loop_corridors, dropped, loop_detours = _carve_loops(grid, rooms, loops, rng, index, len(corridors))
        corridors.extend(loop_corridors)
        if dropped:
            log.debug(event="loop_edges_dropped", level_index=index, dropped=dropped)

        doors = place_doors(index, rooms, corridors, rng, difficulty, profile, scratch)
        assign_roles(rooms, tree, is_final, rng, profile)
        scatter_features(rooms, rng, profile, difficulty, scratch)

        stats = {
            'rooms_target': placement.target,
            'rooms_placed': len(rooms),
            'placement_shortfall': placement.shortfall,
            'corridors_tree': len(corridors) - len(loop_corridors),
            'corridors_loop': len(loop_corridors),
            'loop_edges_dropped': dropped,
            'doors': len(doors),
        }
        if self.enable_metrics:
            merge_level_stats(self.metrics, stats)
            self.metrics['placement_rejections'] += placement.rejections
            self.metrics['detours_used'] += detours + loop_detours
            self.metrics['doors_created'] += scratch.get('doors_created', 0)
            self.metrics['features_placed'] += scratch.get('features_placed', 0)
        log.debug(event="level_generated", level_index=index, seed=level_seed, **stats)
        return Level(
            level_index=index,
            name=level_name(index, params.num_levels),
            width=params.grid_width,
            height=params.grid_height,
            rooms=rooms,
            corridors=corridors,
            doors=doors,
            texture_set=self.dungeon_type,
            stats=stats,
        )


def _carve_tree(grid: Grid, rooms: List[Room], tree, rng, level_index: int) -> Tuple[List[Corridor], int]:
    corridors: List[Corridor] = []
    detours = 0
    for _, i, j in tree:
        a, b = rooms[i], rooms[j]
        carved = carve_corridor(grid, a, b, rng, tree_budget(grid))
        if carved is None:
            # Room spacing guarantees a route; reaching this means placement broke it
            raise ConnectivityFault(
                f"spanning-tree corridor {a.id} -> {b.id} could not be carved",
                edge=(i, j),
                level_index=level_index,
            )
        detours += carved.detour
        corridors.append(Corridor(f"corridor-{level_index}-{len(corridors)}", carved.path, (a.id, b.id)))
        a.connect(b)
    return corridors, detours


def _carve_loops(grid: Grid, rooms: List[Room], loops, rng, level_index: int,
                 offset: int) -> Tuple[List[Corridor], int, int]:
    corridors: List[Corridor] = []
    dropped = detours = 0
    for _, i, j in loops:
        a, b = rooms[i], rooms[j]
        carved = carve_corridor(grid, a, b, rng, loop_budget(grid))
        if carved is None:
            dropped += 1
            continue
        detours += carved.detour
        corridors.append(Corridor(f"corridor-{level_index}-{offset + len(corridors)}",
                                  carved.path, (a.id, b.id), loop=True))
        a.connect(b)
    return corridors, dropped, detours


def link_levels(levels: List[Level]) -> List[StairLink]:
    """Wire each level's stairwell to the next level's entry (logical link only)."""
    links: List[StairLink] = []
    for upper, lower in zip(levels, levels[1:]):
        stairwells = upper.rooms_of_type(RoomType.STAIRWELL)
        entries = lower.rooms_of_type(RoomType.ENTRY)
        if not stairwells or not entries:
            log.warn(event="level_link_skipped", from_level=upper.level_index, to_level=lower.level_index)
            continue
        link = StairLink(
            id=f"stairs-{upper.level_index}-{lower.level_index}",
            from_level=upper.level_index,
            from_room=stairwells[0].id,
            to_level=lower.level_index,
            to_room=entries[0].id,
        )
        upper.stairs.append(link)
        lower.stairs.append(link)
        links.append(link)
    return links


def generate_dungeon(params: Union[DungeonGenerationParams, Mapping[str, Any], None] = None,
                     seed: Optional[int] = None) -> DungeonDetail:
    if not isinstance(params, DungeonGenerationParams):
        params = DungeonGenerationParams.from_dict(params)
    return DungeonGenerator(params, seed=seed).run()


__all__ = ["DungeonGenerator", "generate_dungeon", "link_levels", "level_name", "MAX_SEED"]
