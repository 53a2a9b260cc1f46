from collections import deque
from typing import Deque, Dict, List, NamedTuple, Optional, Tuple

from .grid import Grid
from .layout import Coord2D, Room


class DoorSite(NamedTuple):
    boundary: Coord2D  # room interior cell behind the door
    door: Coord2D  # wall-ring cell
    outside: Coord2D  # first cell past the ring


class CarvedPath(NamedTuple):
    path: List[Coord2D]
    detour: bool


def door_site(room: Room, other: Room) -> DoorSite:
    """Pick the ring cell on the side of ``room`` facing ``other``.

    The side follows the dominant axis between the two centers; along that
    side the door lines up with the other room's center where possible.
    Corners are never chosen, so the door always borders the interior.
    """
    (ax, ay), (bx, by) = room.center, other.center
    dx, dy = bx - ax, by - ay
    if abs(dx) >= abs(dy):
        y = min(max(by, room.y), room.y + room.height - 1)
        if dx >= 0:
            edge = room.x + room.width - 1
            return DoorSite((edge, y), (edge + 1, y), (edge + 2, y))
        return DoorSite((room.x, y), (room.x - 1, y), (room.x - 2, y))
    x = min(max(bx, room.x), room.x + room.width - 1)
    if dy > 0:
        edge = room.y + room.height - 1
        return DoorSite((x, edge), (x, edge + 1), (x, edge + 2))
    return DoorSite((x, room.y), (x, room.y - 1), (x, room.y - 2))


def l_path(start: Coord2D, goal: Coord2D, horizontal_first: bool) -> List[Coord2D]:
    (x, y), (gx, gy) = start, goal
    path = [(x, y)]
    axes = ("x", "y") if horizontal_first else ("y", "x")
    for axis in axes:
        if axis == "x":
            step = 1 if gx > x else -1
            while x != gx:
                x += step
                path.append((x, y))
        else:
            step = 1 if gy > y else -1
            while y != gy:
                y += step
                path.append((x, y))
    return path


def detour_path(grid: Grid, start: Coord2D, goal: Coord2D, budget: int) -> Optional[List[Coord2D]]:
    """Breadth-first search over traversable cells, stepping around obstructions.

    Gives up after ``budget`` cells have been expanded.
    """
    q: Deque[Coord2D] = deque([start])
    parent: Dict[Coord2D, Optional[Coord2D]] = {start: None}
    expanded = 0
    while q:
        cur = q.popleft()
        if cur == goal:
            break
        expanded += 1
        if expanded > budget:
            return None
        for nxt in grid.neighbors(*cur):
            if nxt not in parent and grid.is_traversable(*nxt):
                parent[nxt] = cur
                q.append(nxt)
    if goal not in parent:
        return None
    path: List[Coord2D] = []
    node: Optional[Coord2D] = goal
    while node is not None:
        path.append(node)
        node = parent[node]
    path.reverse()
    return path


def tree_budget(grid: Grid) -> int:
    return grid.width * grid.height


def loop_budget(grid: Grid) -> int:
    return max(64, 2 * (grid.width + grid.height))


def carve_corridor(grid: Grid, a: Room, b: Room, rng, budget: int) -> Optional[CarvedPath]:
    """Carve an orthogonal corridor from a boundary cell of ``a`` to one of ``b``.

    Tries the L path in a random orientation, then the other orientation,
    then a budgeted detour. Returns ``None`` (grid untouched) when nothing
    fits. The returned path runs boundary, door, outside ... outside, door,
    boundary.
    """
    site_a, site_b = door_site(a, b), door_site(b, a)
    start, goal = site_a.outside, site_b.outside
    middle = None
    horizontal_first = rng.random() < 0.5
    for orientation in (horizontal_first, not horizontal_first):
        candidate = l_path(start, goal, orientation)
        if all(grid.is_traversable(x, y) for x, y in candidate):
            middle = candidate
            break
    detoured = False
    if middle is None:
        middle = detour_path(grid, start, goal, budget)
        if middle is None:
            return None
        detoured = True
    grid.carve([site_a.door] + middle + [site_b.door])
    path = [site_a.boundary, site_a.door] + middle + [site_b.door, site_b.boundary]
    return CarvedPath(path, detoured)


__all__ = [
    "DoorSite",
    "CarvedPath",
    "door_site",
    "l_path",
    "detour_path",
    "tree_budget",
    "loop_budget",
    "carve_corridor",
]
