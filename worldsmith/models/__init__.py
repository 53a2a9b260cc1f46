# Model package init
from .generation import GenerationLog, GenerationRequest  # noqa: F401 re-export
from .world_element import WorldElement  # noqa: F401 re-export

__all__ = [
    "GenerationLog",
    "GenerationRequest",
    "WorldElement",
]
