# Cell and kind enumerations centralized for modular imports
from enum import Enum


class CellType(str, Enum):
    EMPTY = "empty"
    ROOM = "room"
    CORRIDOR = "corridor"
    WALL = "wall"  # one-cell wall-boundary ring around each room


class RoomType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    STAIRWELL = "stairwell"
    SPECIAL = "special"
    CHAMBER = "chamber"


class DoorType(str, Enum):
    NORMAL = "normal"
    LOCKED = "locked"
    SECRET = "secret"


class DoorState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    LOCKED = "locked"


class FeatureKind(str, Enum):
    TRAP = "trap"
    TREASURE = "treasure"
    ALTAR = "altar"
    LAIR = "lair"
    ENCOUNTER = "encounter"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    DEADLY = "deadly"


# Preview characters (CLI / diagnostics only)
CHAR_EMPTY = "."
CHAR_ROOM = "R"
CHAR_WALL = "W"
CHAR_CORRIDOR = "T"
CHAR_DOOR = "D"
CHAR_SECRET_DOOR = "S"

__all__ = [
    "CellType",
    "RoomType",
    "DoorType",
    "DoorState",
    "FeatureKind",
    "Difficulty",
    "CHAR_EMPTY",
    "CHAR_ROOM",
    "CHAR_WALL",
    "CHAR_CORRIDOR",
    "CHAR_DOOR",
    "CHAR_SECRET_DOOR",
]
