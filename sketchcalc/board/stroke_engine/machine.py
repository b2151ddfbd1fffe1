"""
Stroke state machine.

Pure transitions: `transition(state, event, tools) -> (state, effects)`.
The caller owns dispatch and applies the returned effects (painting,
clearing the displayed result); nothing here touches the raster.
"""
from typing import List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict
from ..ingestion.models import Point
from ..style import StrokeStyle, ToolState


class StrokeState(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["idle", "drawing"] = "idle"
    last_point: Optional[Point] = None
    style: Optional[StrokeStyle] = None  # fixed at pointer-down

    @property
    def drawing(self) -> bool:
        return self.phase == "drawing"


IDLE = StrokeState()


# --- Events ---

class PointerDown(BaseModel):
    type: Literal["down"] = "down"
    point: Point


class PointerMove(BaseModel):
    type: Literal["move"] = "move"
    point: Point


class PointerUp(BaseModel):
    type: Literal["up"] = "up"


class PointerLeave(BaseModel):
    type: Literal["leave"] = "leave"


StrokeEvent = Union[PointerDown, PointerMove, PointerUp, PointerLeave]


# --- Effects ---

class ClearResult(BaseModel):
    type: Literal["clear_result"] = "clear_result"


class BeginPath(BaseModel):
    type: Literal["begin_path"] = "begin_path"
    point: Point
    style: StrokeStyle


class PaintSegment(BaseModel):
    type: Literal["paint_segment"] = "paint_segment"
    start: Point
    end: Point
    style: StrokeStyle


class EndPath(BaseModel):
    type: Literal["end_path"] = "end_path"


Effect = Union[ClearResult, BeginPath, PaintSegment, EndPath]


def transition(state: StrokeState, event: StrokeEvent, tools: ToolState) -> Tuple[StrokeState, List[Effect]]:
    if isinstance(event, PointerDown):
        # A new stroke invalidates the previous answer. A down while already
        # drawing (missed release) simply restarts the path.
        style = tools.stroke_style()
        new_state = StrokeState(phase="drawing", last_point=event.point, style=style)
        return new_state, [ClearResult(), BeginPath(point=event.point, style=style)]

    if not state.drawing:
        return state, []

    if isinstance(event, PointerMove):
        segment = PaintSegment(start=state.last_point, end=event.point, style=state.style)
        return state.model_copy(update={"last_point": event.point}), [segment]

    # up / leave
    return IDLE, [EndPath()]


def run(events: List[StrokeEvent], tools: ToolState,
        state: StrokeState = IDLE) -> Tuple[StrokeState, List[Effect]]:
    """Folds a sequence of events, collecting every effect in order."""
    effects: List[Effect] = []
    for event in events:
        state, out = transition(state, event, tools)
        effects.extend(out)
    return state, effects
