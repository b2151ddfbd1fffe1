from pydantic import BaseModel
from typing import List, Literal, Optional


class Point(BaseModel):
    """Logical-pixel position relative to the surface's top-left corner."""
    x: float
    y: float


class TouchPoint(BaseModel):
    client_x: float
    client_y: float


class BoundingRect(BaseModel):
    """Surface offset in client space; size comes from the surface itself."""
    left: float = 0.0
    top: float = 0.0


class PointerInput(BaseModel):
    kind: Literal["down", "move", "up", "leave"]
    source: Literal["mouse", "touch"] = "mouse"
    client_x: Optional[float] = None  # mouse only
    client_y: Optional[float] = None
    touches: List[TouchPoint] = []  # touch only; only the first entry is used
    rect: Optional[BoundingRect] = None  # surface rect in client space
