"""Per-level cell arena.

Cells are addressed ``grid[x][y]`` like the rest of the generator. A parallel
index maps every interior and wall-ring cell to the id of the room owning it.
The grid never leaves the level build; only rooms, corridors and doors survive
into the output.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .layout import Coord2D, Room
from .tiles import CellType

_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Grid:
    __slots__ = ("width", "height", "cells", "room_ids")

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[List[CellType]] = [[CellType.EMPTY for _ in range(height)] for _ in range(width)]
        self.room_ids: List[List[Optional[str]]] = [[None for _ in range(height)] for _ in range(width)]

    def __getitem__(self, x: int) -> List[CellType]:
        return self.cells[x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, x: int, y: int) -> Iterator[Coord2D]:
        for dx, dy in _DIRS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield nx, ny

    def touches(self, x: int, y: int, cell_type: CellType) -> bool:
        return any(self.cells[nx][ny] == cell_type for nx, ny in self.neighbors(x, y))

    def is_traversable(self, x: int, y: int) -> bool:
        """Cells a corridor may run through.

        Empty or already carved corridor cells, excluding door cells (the only
        corridor cells that sit against a room interior).
        """
        if not self.in_bounds(x, y):
            return False
        if self.cells[x][y] not in (CellType.EMPTY, CellType.CORRIDOR):
            return False
        return not self.touches(x, y, CellType.ROOM)

    def stamp_room(self, room: Room) -> None:
        """Tag the room interior and its one-cell wall ring."""
        for ix in range(room.x - 1, room.x + room.width + 1):
            for iy in range(room.y - 1, room.y + room.height + 1):
                self.cells[ix][iy] = CellType.ROOM if room.contains(ix, iy) else CellType.WALL
                self.room_ids[ix][iy] = room.id

    def clear(self) -> None:
        for col, ids in zip(self.cells, self.room_ids):
            for iy in range(self.height):
                col[iy] = CellType.EMPTY
                ids[iy] = None

    def carve(self, path: Iterable[Coord2D]) -> None:
        for x, y in path:
            if self.cells[x][y] != CellType.ROOM:
                self.cells[x][y] = CellType.CORRIDOR

    def count(self, cell_type: CellType) -> int:
        return sum(1 for col in self.cells for c in col if c == cell_type)


__all__ = ["Grid"]
