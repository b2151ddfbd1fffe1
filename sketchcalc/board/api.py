from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from .ingestion.models import PointerInput
from .style import StrokeWidth, Tool
from .surface import MAX_DEVICE_SCALE, MAX_LOGICAL_SIZE, ContainerBox
from .session import BoardSession
from ..utils import color_to_rgb, image_to_png_bytes

router = APIRouter(prefix="/api/v1/board", tags=["board"])


class CreateSessionRequest(ContainerBox):
    client_width: float = Field(default=0.0, ge=0, le=MAX_LOGICAL_SIZE)
    client_height: float = Field(default=0.0, ge=0, le=MAX_LOGICAL_SIZE)
    device_scale: float = Field(default=1.0, gt=0, le=MAX_DEVICE_SCALE)


class ResizeRequest(ContainerBox):
    device_scale: Optional[float] = Field(default=None, gt=0, le=MAX_DEVICE_SCALE)
    reset: bool = False  # old behaviour: resizing wipes the board
    debounce: bool = False  # orientation change, let the size settle first


class StyleRequest(BaseModel):
    tool: Optional[Tool] = None
    color: Optional[str] = None
    stroke: Optional[StrokeWidth] = None

    @field_validator("color")
    @classmethod
    def color_must_parse(cls, v):
        if v is not None:
            color_to_rgb(v)  # ValueError -> 422
        return v


def _container(req: ContainerBox) -> ContainerBox:
    return ContainerBox(**req.model_dump(include=set(ContainerBox.model_fields)))


def _session(request: Request, session_id: str) -> BoardSession:
    session = request.app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
    return session


@router.post("/sessions")
def create_session(body: CreateSessionRequest, request: Request):
    """
    Mounts a new board sized to the given container.
    """
    session = request.app.state.sessions.create(_container(body), device_scale=body.device_scale)
    return session.state()


@router.get("/sessions/{session_id}")
def get_session(session_id: str, request: Request):
    return _session(request, session_id).state()


@router.delete("/sessions/{session_id}")
def close_session(session_id: str, request: Request):
    _session(request, session_id)
    request.app.state.sessions.close(session_id)
    return {"id": session_id, "status": "closed"}


@router.post("/sessions/{session_id}/resize")
def resize(session_id: str, body: ResizeRequest, request: Request):
    session = _session(request, session_id)
    if body.debounce:
        session.schedule_resize(_container(body), body.device_scale, reset=body.reset)
        return {"status": "scheduled", "surface": session.surface.surface.model_dump()}
    surface = session.resize(_container(body), body.device_scale, reset=body.reset)
    return {"status": "resized", "surface": surface.model_dump()}


@router.post("/sessions/{session_id}/pointer")
def pointer(session_id: str, event: PointerInput, request: Request):
    session = _session(request, session_id)
    state = session.handle_pointer(event)
    return {"stroke": state.phase}


@router.put("/sessions/{session_id}/style")
def set_style(session_id: str, body: StyleRequest, request: Request):
    session = _session(request, session_id)
    if body.tool is not None:
        session.set_tool(body.tool)
    if body.color is not None:
        session.set_color(body.color)
    if body.stroke is not None:
        session.set_stroke(body.stroke)
    return session.tools.to_dict()


@router.post("/sessions/{session_id}/analyze")
def analyze(session_id: str, request: Request, background: bool = True):
    """
    Sends the drawing for interpretation. With background=true this returns
    immediately with the placeholder result; poll /result for the answer.
    """
    session = _session(request, session_id)
    seq = session.analyze(background=background)
    return {"seq": seq, "status": "processing" if session.pending else "done", "result": session.state()["result"]}


@router.get("/sessions/{session_id}/result")
def get_result(session_id: str, request: Request):
    state = _session(request, session_id).state()
    return {"pending": state["pending"], "result": state["result"]}


@router.post("/sessions/{session_id}/dismiss")
def dismiss(session_id: str, request: Request):
    session = _session(request, session_id)
    session.dismiss()
    return session.state()


@router.post("/sessions/{session_id}/reset")
def reset(session_id: str, request: Request):
    session = _session(request, session_id)
    session.reset()
    return session.state()


@router.delete("/sessions/{session_id}/symbols")
def reset_symbols(session_id: str, request: Request):
    session = _session(request, session_id)
    session.reset_symbols()
    return {"symbols": session.symbols.snapshot()}


@router.get("/sessions/{session_id}/image")
def image(session_id: str, request: Request):
    session = _session(request, session_id)
    return Response(content=image_to_png_bytes(session.surface.image), media_type="image/png")
