"""Error surface of the dungeon generation core.

Only invalid parameters reach the caller during normal operation. A
``ConnectivityFault`` means a spanning-tree corridor could not be carved,
which can only happen if the room spacing invariant was broken upstream.
"""
from __future__ import annotations

from typing import List, Optional


class DungeonGenerationError(Exception):
    """Base class for generation failures."""


class InvalidParametersError(DungeonGenerationError, ValueError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("invalid dungeon parameters: " + "; ".join(self.errors))


class ConnectivityFault(DungeonGenerationError, RuntimeError):
    def __init__(self, message: str, edge: Optional[tuple] = None, level_index: Optional[int] = None):
        super().__init__(message)
        self.edge = edge
        self.level_index = level_index


__all__ = ["DungeonGenerationError", "InvalidParametersError", "ConnectivityFault"]
