from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional

from .errors import InvalidParametersError
from .tiles import Difficulty


@dataclass
class DungeonGenerationParams:
    grid_width: int = 50
    grid_height: int = 50
    num_levels: int = 1
    min_room_size: int = 2
    max_room_size: int = 10
    theme: str = "dungeon"
    difficulty: str = Difficulty.MEDIUM.value
    use_ai: bool = False  # consumed by the image-enhancement collaborator, never by the core
    name: Optional[str] = None

    def __post_init__(self):
        # Accept Difficulty members as well as plain strings
        self.difficulty = str(getattr(self.difficulty, "value", self.difficulty)).strip().lower()
        self.theme = (self.theme or "dungeon").strip() or "dungeon"

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "DungeonGenerationParams":
        """Build params from a JSON-ish mapping, ignoring unknown keys.

        Integer fields accept numeric strings; anything else that cannot be
        coerced is collected and reported together.
        """
        payload = payload or {}
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        errors: List[str] = []
        for key, value in payload.items():
            if key not in known or value is None:
                continue
            if key in ("grid_width", "grid_height", "num_levels", "min_room_size", "max_room_size"):
                if isinstance(value, bool):
                    errors.append(f"{key} must be an integer")
                    continue
                try:
                    kwargs[key] = int(value)
                except (TypeError, ValueError):
                    errors.append(f"{key} must be an integer")
            elif key == "use_ai":
                kwargs[key] = bool(value)
            else:
                kwargs[key] = str(value)
        if errors:
            raise InvalidParametersError(errors)
        return cls(**kwargs)

    def validate(self) -> "DungeonGenerationParams":
        errors: List[str] = []
        for key in ("grid_width", "grid_height", "min_room_size", "max_room_size"):
            if getattr(self, key) <= 0:
                errors.append(f"{key} must be positive")
        if self.max_room_size < self.min_room_size:
            errors.append("max_room_size must be >= min_room_size")
        if self.num_levels < 1:
            errors.append("num_levels must be at least 1")
        if self.difficulty not in {d.value for d in Difficulty}:
            errors.append(f"difficulty must be one of {', '.join(d.value for d in Difficulty)}")
        if errors:
            raise InvalidParametersError(errors)
        return self

    @property
    def difficulty_level(self) -> Difficulty:
        return Difficulty(self.difficulty)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["DungeonGenerationParams"]
