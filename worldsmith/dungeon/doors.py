"""Door placement.

One door per junction cell: the wall-ring cell a corridor pierces on its way
into a room. Corridors sharing a junction share the door record. Functions
mutate the rooms/corridors passed in and update the provided metrics dict.
"""
from __future__ import annotations
from typing import Dict, Any, List, Tuple

from .layout import Coord2D, Corridor, Door, Room
from .profiles import DOOR_TYPE_WEIGHTS, LOCK_DC_BONUS, LayoutProfile
from .tiles import Difficulty, DoorState, DoorType


def corridor_junctions(corridor: Corridor) -> List[Tuple[Coord2D, str]]:
    """(door cell, room id) for both ends of a carved corridor path."""
    a, b = corridor.connects
    return [(corridor.path[1], a), (corridor.path[-2], b)]


def _roll_door(rng, difficulty: Difficulty, profile: LayoutProfile) -> Tuple[DoorType, DoorState, Any]:
    weights = DOOR_TYPE_WEIGHTS[difficulty]
    kinds = list(weights)
    door_type = rng.choices(kinds, weights=[weights[k] for k in kinds])[0]
    if door_type == DoorType.LOCKED:
        return door_type, DoorState.LOCKED, rng.randint(10, 19) + LOCK_DC_BONUS[difficulty]
    if door_type == DoorType.NORMAL and rng.random() < profile.open_door_chance:
        return door_type, DoorState.OPEN, None
    return door_type, DoorState.CLOSED, None


def place_doors(level_index: int, rooms: List[Room], corridors: List[Corridor], rng,
                difficulty: Difficulty, profile: LayoutProfile, metrics: Dict[str, Any]) -> List[Door]:
    rooms_by_id = {r.id: r for r in rooms}
    by_cell: Dict[Coord2D, Door] = {}
    doors: List[Door] = []
    for corridor in corridors:
        for cell, room_id in corridor_junctions(corridor):
            door = by_cell.get(cell)
            if door is None:
                door_type, state, lock_dc = _roll_door(rng, difficulty, profile)
                door = Door(f"door-{level_index}-{len(doors)}", cell[0], cell[1], room_id,
                            type=door_type, state=state, lock_dc=lock_dc)
                by_cell[cell] = door
                doors.append(door)
                rooms_by_id[room_id].doors.append(door.id)
                metrics['doors_created'] = metrics.get('doors_created', 0) + 1
            if door.id not in corridor.doors:
                corridor.doors.append(door.id)
    return doors
