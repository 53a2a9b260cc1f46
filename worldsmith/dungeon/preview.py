"""ASCII preview of a generated level (CLI / diagnostics only)."""
from __future__ import annotations

from typing import List

from .layout import Level
from .tiles import (
    CHAR_CORRIDOR,
    CHAR_DOOR,
    CHAR_EMPTY,
    CHAR_ROOM,
    CHAR_SECRET_DOOR,
    CHAR_WALL,
    DoorType,
)


def render_rows(level: Level) -> List[str]:
    """Rebuild the character grid from rooms, corridors and doors.

    Rows are y, columns x. Doors are drawn last so they overwrite the ring
    and corridor cells they sit on.
    """
    canvas = [[CHAR_EMPTY] * level.width for _ in range(level.height)]
    for room in level.rooms:
        for ix in range(room.x - 1, room.x + room.width + 1):
            for iy in range(room.y - 1, room.y + room.height + 1):
                if 0 <= ix < level.width and 0 <= iy < level.height:
                    canvas[iy][ix] = CHAR_ROOM if room.contains(ix, iy) else CHAR_WALL
    for corridor in level.corridors:
        for x, y in corridor.path:
            if canvas[y][x] != CHAR_ROOM:
                canvas[y][x] = CHAR_CORRIDOR
    for door in level.doors:
        canvas[door.y][door.x] = CHAR_SECRET_DOOR if door.type == DoorType.SECRET else CHAR_DOOR
    return ["".join(row) for row in canvas]


def render_ascii(level: Level) -> str:
    return "\n".join(render_rows(level))
