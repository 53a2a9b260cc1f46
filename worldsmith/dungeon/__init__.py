"""Public dungeon package interface.

``generate_dungeon(params, seed)`` is the single entry point the web layer and
CLI use; the rest re-exports the layout types, parameters and errors.
"""

from .config import DungeonGenerationParams
from .errors import ConnectivityFault, DungeonGenerationError, InvalidParametersError
from .layout import Corridor, Door, DungeonDetail, Feature, Level, Room, StairLink
from .pipeline import DungeonGenerator, generate_dungeon
from .preview import render_ascii
from .tiles import CellType, Difficulty, DoorState, DoorType, FeatureKind, RoomType  # noqa: F401

__all__ = [
    "DungeonGenerationParams",
    "DungeonGenerator",
    "generate_dungeon",
    "render_ascii",
    "DungeonDetail",
    "Level",
    "Room",
    "Door",
    "Corridor",
    "Feature",
    "StairLink",
    "DungeonGenerationError",
    "InvalidParametersError",
    "ConnectivityFault",
    "CellType",
    "Difficulty",
    "DoorState",
    "DoorType",
    "FeatureKind",
    "RoomType",
]
