import random
from dataclasses import dataclass, field
from typing import List, Tuple

from .config import DungeonGenerationParams
from .grid import Grid
from .layout import Room
from .profiles import ROOM_DENSITY_MULTIPLIER, LayoutProfile

MAX_CONSECUTIVE_REJECTIONS = 250
# Interior + wall ring + one free cell; keeps free space between rings 4-connected
FOOTPRINT_PAD = 3
# Wall ring plus one free border line
EDGE_MARGIN = 2
# Entry plus exit or stairwell
MIN_VIABLE_ROOMS = 2
PLACEMENT_PASSES = 8


@dataclass
class PlacementResult:
    rooms: List[Room] = field(default_factory=list)
    target: int = 0
    rejections: int = 0

    @property
    def shortfall(self) -> int:
        return max(0, self.target - len(self.rooms))


def _max_extent(grid_extent: int) -> int:
    return grid_extent - 2 * EDGE_MARGIN


def fit_capacity(params: DungeonGenerationParams) -> int:
    """Rooms of ``min_room_size`` a lattice packing fits inside the edge margins."""
    step = params.min_room_size + FOOTPRINT_PAD
    cols = (max(0, _max_extent(params.grid_width)) + FOOTPRINT_PAD) // step
    rows = (max(0, _max_extent(params.grid_height)) + FOOTPRINT_PAD) // step
    return cols * rows


def target_room_count(params: DungeonGenerationParams, profile: LayoutProfile) -> int:
    """Rooms to aim for, from usable area over the average padded room area.

    Never below ``MIN_VIABLE_ROOMS`` (entry plus exit or stairwell) unless the
    grid cannot hold that many minimum-size rooms.
    """
    usable = max(0, params.grid_width - 2) * max(0, params.grid_height - 2)
    avg_size = (params.min_room_size + params.max_room_size) / 2.0
    padded_area = (avg_size + FOOTPRINT_PAD) ** 2
    scaled = usable * profile.room_density * ROOM_DENSITY_MULTIPLIER[params.difficulty_level]
    base = max(MIN_VIABLE_ROOMS, int(round(scaled / padded_area)))
    return max(1, min(base, fit_capacity(params)))


def place_rooms(grid: Grid, params: DungeonGenerationParams, profile: LayoutProfile,
                level_index: int = 0, rng=None) -> PlacementResult:
    """Place non-overlapping rooms onto the grid.

    Candidates are sampled uniformly and accepted when their padded footprint
    clears every accepted room. A pass stops at the target or after
    ``MAX_CONSECUTIVE_REJECTIONS`` rejections in a row; a grid too small for
    ``min_room_size`` yields no rooms at all. A pass that ends below
    ``MIN_VIABLE_ROOMS`` on a grid that can hold them is thrown away and
    rerun, at most ``PLACEMENT_PASSES`` times.
    """
    if rng is None:
        rng = random
    result = PlacementResult(target=target_room_count(params, profile))
    max_w = min(params.max_room_size, _max_extent(grid.width))
    max_h = min(params.max_room_size, _max_extent(grid.height))
    if max_w < params.min_room_size or max_h < params.min_room_size:
        return result
    needed = min(MIN_VIABLE_ROOMS, result.target, fit_capacity(params))
    for attempt in range(PLACEMENT_PASSES):
        if attempt:
            grid.clear()
        rooms, rejections = _placement_pass(grid, params, level_index, rng, result.target, max_w, max_h)
        result.rooms = rooms
        result.rejections += rejections
        if len(rooms) >= needed:
            break
    return result


def _placement_pass(grid: Grid, params: DungeonGenerationParams, level_index: int, rng,
                    target: int, max_w: int, max_h: int) -> Tuple[List[Room], int]:
    rooms: List[Room] = []
    rejections = rejected_in_row = 0
    while len(rooms) < target and rejected_in_row < MAX_CONSECUTIVE_REJECTIONS:
        w = rng.randint(params.min_room_size, max_w)
        h = rng.randint(params.min_room_size, max_h)
        x = rng.randint(EDGE_MARGIN, grid.width - w - EDGE_MARGIN)
        y = rng.randint(EDGE_MARGIN, grid.height - h - EDGE_MARGIN)
        candidate = Room(f"room-{level_index}-{len(rooms)}", x, y, w, h)
        if _room_overlaps(candidate, rooms):
            rejected_in_row += 1
            rejections += 1
            continue
        rejected_in_row = 0
        grid.stamp_room(candidate)
        rooms.append(candidate)
    return rooms, rejections


def _room_overlaps(room: Room, existing: List[Room]) -> bool:
    return any(room.padded_intersects(r, FOOTPRINT_PAD) for r in existing)
