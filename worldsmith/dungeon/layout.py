"""Layout structures produced by the generator.

Everything here serialises through ``to_dict()`` into the JSON document
handed to persistence and rendering, and ``from_dict()`` restores it so a
stored document can be edited (e.g. ``Level.map_image_url``) without
remodelling.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .tiles import DoorState, DoorType, FeatureKind, RoomType

Coord2D = Tuple[int, int]
CELL_SIZE_FEET = 5


@dataclass
class Feature:
    kind: FeatureKind
    icon: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "icon": self.icon, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feature":
        return cls(FeatureKind(data["kind"]), data.get("icon", data["kind"]), data.get("description", ""))


@dataclass
class Room:
    id: str
    x: int
    y: int
    width: int
    height: int
    type: RoomType = RoomType.CHAMBER
    doors: List[str] = field(default_factory=list)
    connections: List[str] = field(default_factory=list)
    features: List[Feature] = field(default_factory=list)
    description: str = ""

    def cells(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    @property
    def center(self) -> Coord2D:
        return (self.x + self.width // 2, self.y + self.height // 2)

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def padded_intersects(self, other: "Room", pad: int = 1) -> bool:
        """True if this rectangle grown by ``pad`` cells overlaps ``other``."""
        return (
            self.x - pad < other.x + other.width
            and self.x + self.width + pad > other.x
            and self.y - pad < other.y + other.height
            and self.y + self.height + pad > other.y
        )

    def connect(self, other: "Room") -> None:
        if other.id not in self.connections:
            self.connections.append(other.id)
        if self.id not in other.connections:
            other.connections.append(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "doors": list(self.doors),
            "connections": list(self.connections),
            "features": [f.to_dict() for f in self.features],
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Room":
        return cls(
            id=data["id"],
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            type=RoomType(data.get("type", RoomType.CHAMBER.value)),
            doors=list(data.get("doors", [])),
            connections=list(data.get("connections", [])),
            features=[Feature.from_dict(f) for f in data.get("features", [])],
            description=data.get("description", ""),
        )


@dataclass
class Door:
    id: str
    x: int
    y: int
    room_id: str
    type: DoorType = DoorType.NORMAL
    state: DoorState = DoorState.CLOSED
    lock_dc: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "room_id": self.room_id,
            "type": self.type.value,
            "state": self.state.value,
        }
        if self.lock_dc is not None:
            out["lock_dc"] = self.lock_dc
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Door":
        return cls(
            id=data["id"],
            x=data["x"],
            y=data["y"],
            room_id=data["room_id"],
            type=DoorType(data.get("type", DoorType.NORMAL.value)),
            state=DoorState(data.get("state", DoorState.CLOSED.value)),
            lock_dc=data.get("lock_dc"),
        )


@dataclass
class Corridor:
    id: str
    path: List[Coord2D]
    connects: Tuple[str, str]
    loop: bool = False
    doors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": [{"x": x, "y": y} for x, y in self.path],
            "connects": list(self.connects),
            "loop": self.loop,
            "doors": list(self.doors),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Corridor":
        a, b = data["connects"]
        return cls(
            id=data["id"],
            path=[(p["x"], p["y"]) for p in data["path"]],
            connects=(a, b),
            loop=bool(data.get("loop", False)),
            doors=list(data.get("doors", [])),
        )


@dataclass
class StairLink:
    id: str
    from_level: int
    from_room: str
    to_level: int
    to_room: str
    direction: str = "down"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from_level": self.from_level,
            "from_room": self.from_room,
            "to_level": self.to_level,
            "to_room": self.to_room,
            "direction": self.direction,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StairLink":
        return cls(**{k: data[k] for k in ("id", "from_level", "from_room", "to_level", "to_room", "direction")})


@dataclass
class Level:
    level_index: int
    name: str
    width: int
    height: int
    rooms: List[Room] = field(default_factory=list)
    corridors: List[Corridor] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    stairs: List[StairLink] = field(default_factory=list)
    texture_set: str = "dungeon"
    stats: Dict[str, int] = field(default_factory=dict)
    map_image_url: Optional[str] = None

    def room(self, room_id: str) -> Room:
        for r in self.rooms:
            if r.id == room_id:
                return r
        raise KeyError(room_id)

    def rooms_of_type(self, room_type: RoomType) -> List[Room]:
        return [r for r in self.rooms if r.type == room_type]

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "level_index": self.level_index,
            "name": self.name,
            "grid_dimensions": {"width": self.width, "height": self.height, "cell_size": CELL_SIZE_FEET},
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [c.to_dict() for c in self.corridors],
            "doors": [d.to_dict() for d in self.doors],
            "stairs": [s.to_dict() for s in self.stairs],
            "texture_set": self.texture_set,
            "stats": dict(self.stats),
        }
        if self.map_image_url is not None:
            out["map_image_url"] = self.map_image_url
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Level":
        dims = data.get("grid_dimensions", {})
        return cls(
            level_index=data["level_index"],
            name=data.get("name", ""),
            width=dims.get("width", 0),
            height=dims.get("height", 0),
            rooms=[Room.from_dict(r) for r in data.get("rooms", [])],
            corridors=[Corridor.from_dict(c) for c in data.get("corridors", [])],
            doors=[Door.from_dict(d) for d in data.get("doors", [])],
            stairs=[StairLink.from_dict(s) for s in data.get("stairs", [])],
            texture_set=data.get("texture_set", "dungeon"),
            stats=dict(data.get("stats", {})),
            map_image_url=data.get("map_image_url"),
        )


@dataclass
class DungeonDetail:
    name: str
    type: str
    theme: str
    difficulty: str
    recommended_level: int
    levels: List[Level] = field(default_factory=list)
    links: List[StairLink] = field(default_factory=list)
    seed: Optional[int] = None

    @property
    def entry_point(self) -> Optional[Dict[str, Any]]:
        if not self.levels:
            return None
        first = self.levels[0]
        for idx, r in enumerate(first.rooms):
            if r.type == RoomType.ENTRY:
                return {"level_index": first.level_index, "room_id": r.id, "room_index": idx}
        return None

    @property
    def exit_points(self) -> List[Dict[str, Any]]:
        if not self.levels:
            return []
        last = self.levels[-1]
        return [
            {"level_index": last.level_index, "room_id": r.id, "room_index": idx}
            for idx, r in enumerate(last.rooms)
            if r.type == RoomType.EXIT
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identity": {
                "name": self.name,
                "type": self.type,
                "theme": self.theme,
                "difficulty": self.difficulty,
                "recommended_level": self.recommended_level,
            },
            "structure": {
                "levels": [lvl.to_dict() for lvl in self.levels],
                "links": [s.to_dict() for s in self.links],
                "entry_point": self.entry_point,
                "exit_points": self.exit_points,
            },
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DungeonDetail":
        identity = data.get("identity", {})
        structure = data.get("structure", {})
        return cls(
            name=identity.get("name", ""),
            type=identity.get("type", "dungeon"),
            theme=identity.get("theme", ""),
            difficulty=identity.get("difficulty", "medium"),
            recommended_level=identity.get("recommended_level", 1),
            levels=[Level.from_dict(lvl) for lvl in structure.get("levels", [])],
            links=[StairLink.from_dict(s) for s in structure.get("links", [])],
            seed=data.get("seed"),
        )


__all__ = [
    "CELL_SIZE_FEET",
    "Coord2D",
    "Feature",
    "Room",
    "Door",
    "Corridor",
    "StairLink",
    "Level",
    "DungeonDetail",
]
