from typing import Optional
from .models import BoundingRect, Point, PointerInput
from ..stroke_engine.machine import PointerDown, PointerLeave, PointerMove, PointerUp, StrokeEvent

ORIGIN_RECT = BoundingRect()


def client_point(event: PointerInput) -> Optional[Point]:
    """
    Picks the client-space position carried by a mouse or touch event.
    Multi-touch degrades to the first touch point; no touches means no point.
    """
    if event.source == "touch":
        if not event.touches:
            return None
        first = event.touches[0]
        return Point(x=first.client_x, y=first.client_y)
    if event.client_x is None or event.client_y is None:
        return None
    return Point(x=event.client_x, y=event.client_y)


def to_logical(point: Point, rect: Optional[BoundingRect]) -> Point:
    rect = rect or ORIGIN_RECT
    return Point(x=point.x - rect.left, y=point.y - rect.top)


def normalize_event(event: PointerInput, rect: Optional[BoundingRect] = None) -> Optional[StrokeEvent]:
    """
    Maps a raw pointer/touch event onto a stroke machine event.
    Returns None for events that must be ignored (touch down/move without touches).
    """
    if event.kind == "up":
        return PointerUp()
    if event.kind == "leave":
        return PointerLeave()

    raw = client_point(event)
    if raw is None:
        return None
    point = to_logical(raw, event.rect or rect)
    if event.kind == "down":
        return PointerDown(point=point)
    return PointerMove(point=point)
