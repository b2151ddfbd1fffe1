import logging
import threading
import uuid
from threading import Thread
from typing import Any, Dict, List, Optional, Union

from .errors import AnalysisError, BoardError, NetworkError
from .ingestion.models import PointerInput
from .ingestion.normalize import normalize_event
from .judgment.client import AnalysisClient
from .judgment.rating import ANALYZING, present
from .judgment.schema import AnalysisResponseItem, AnalysisResult
from .stroke_engine.machine import IDLE, ClearResult, Effect, PaintSegment, StrokeState, transition
from .stroke_engine.raster import paint_segment
from .style import BACKGROUND_COLOR, StrokeWidth, Tool, ToolState
from .surface import CanvasSurface, ContainerBox, ResizeDebouncer, SurfaceManager
from .symbols import SymbolTable

logger = logging.getLogger("board.session")


def error_result(error: AnalysisError, seq: int) -> AnalysisResult:
    return AnalysisResult(expr=error.title, result=error.message, is_error=True, seq=seq)


class BoardSession:
    """
    One drawing board: surface, tools, stroke machine, symbol table and the
    currently displayed analysis result.

    Analyses are tagged with increasing sequence numbers. An outcome is applied
    only when its number is higher than every outcome applied before it, so a
    slow early response can never overwrite a later one. reset() invalidates
    everything in flight; close() detaches the session and late outcomes are
    dropped.
    """

    def __init__(self, client: AnalysisClient, container: Optional[ContainerBox] = None,
                 device_scale: float = 1.0, symbols: Optional[SymbolTable] = None,
                 session_id: Optional[str] = None, background: str = BACKGROUND_COLOR):
        self.id = session_id or str(uuid.uuid4())
        self.client = client
        self.surface = SurfaceManager(container, device_scale, background=background)
        self.tools = ToolState(background=background)
        self.stroke: StrokeState = IDLE
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.result: Optional[AnalysisResult] = None

        self._issued = 0
        self._applied = 0
        self._closed = False
        self._workers: List[Thread] = []
        self._lock = threading.RLock()
        self._debouncer = ResizeDebouncer(self.resize)

    # --- Surface ---

    def resize(self, container: Optional[ContainerBox], device_scale: Optional[float] = None,
               reset: bool = False) -> CanvasSurface:
        with self._lock:
            old_scale = self.surface.device_scale
            surface = self.surface.resize(container, device_scale)
            if self.stroke.drawing and surface.device_scale != old_scale:
                # Path coordinates belong to the old backing store
                logger.info("Session %s: device scale changed mid-stroke, ending stroke", self.id)
                self.stroke = IDLE
            if reset:
                self.reset()
            return surface

    def schedule_resize(self, container: ContainerBox, device_scale: Optional[float] = None,
                        reset: bool = False) -> threading.Timer:
        """Debounced resize for orientation changes."""
        return self._debouncer.schedule(container, device_scale, reset=reset)

    def clear(self) -> None:
        with self._lock:
            self.surface.clear()

    def reset(self) -> None:
        """Blank surface, no result, no stroke. The symbol table is kept."""
        with self._lock:
            self.surface.clear()
            self.result = None
            self.stroke = IDLE
            self._applied = self._issued

    def reset_symbols(self) -> None:
        self.symbols.clear()

    def dismiss(self) -> None:
        with self._lock:
            self.result = None

    # --- Tools ---

    def set_tool(self, tool: Union[Tool, str]) -> None:
        with self._lock:
            self.tools.set_tool(tool)

    def set_color(self, color: str) -> None:
        with self._lock:
            self.tools.set_color(color)

    def set_stroke(self, stroke: Union[StrokeWidth, str]) -> None:
        with self._lock:
            self.tools.set_stroke(stroke)

    # --- Pointer input ---

    def handle_pointer(self, event: PointerInput) -> StrokeState:
        stroke_event = normalize_event(event)
        if stroke_event is None:
            return self.stroke
        with self._lock:
            new_state, effects = transition(self.stroke, stroke_event, self.tools)
            for effect in effects:
                self._apply_effect(effect)
            # Only advance once every effect has been applied
            self.stroke = new_state
            return self.stroke

    def _apply_effect(self, effect: Effect) -> None:
        if isinstance(effect, ClearResult):
            self.result = None
        elif isinstance(effect, PaintSegment):
            paint_segment(self.surface, effect)

    # --- Analysis ---

    @property
    def pending(self) -> bool:
        return self._issued > self._applied

    def analyze(self, background: bool = True) -> int:
        """
        Publishes the placeholder result and sends the current drawing.
        Returns the sequence number of this call.
        """
        with self._lock:
            if self._closed:
                raise BoardError(f"session {self.id} is closed")
            self._issued += 1
            seq = self._issued
            self.result = ANALYZING.model_copy(update={"seq": seq})
            image = self.surface.to_data_url()
            symbols = self.symbols.snapshot()

        logger.info("Session %s: analysis %d started", self.id, seq)
        if background:
            t = Thread(target=self._run_analysis, args=(seq, image, symbols), daemon=True)
            with self._lock:
                self._workers = [w for w in self._workers if w.is_alive()] + [t]
                t.start()
        else:
            self._run_analysis(seq, image, symbols)
        return seq

    def _run_analysis(self, seq: int, image: str, symbols: Dict[str, str]) -> bool:
        try:
            response = self.client.request(image, symbols)
        except AnalysisError as e:
            logger.info("Session %s: analysis %d failed: %s", self.id, seq, e.title)
            return self._apply_outcome(seq, error_result(e, seq))
        except Exception as e:
            logger.exception("Session %s: analysis %d crashed: %s", self.id, seq, e)
            return self._apply_outcome(seq, error_result(NetworkError(str(e)), seq))

        first = response.data[0]
        result = AnalysisResult(expr=first.expr, result=first.result, rating=first.rating, seq=seq)
        return self._apply_outcome(seq, result, response.data)

    def _apply_outcome(self, seq: int, result: AnalysisResult,
                       items: Optional[List[AnalysisResponseItem]] = None) -> bool:
        with self._lock:
            if self._closed:
                logger.info("Session %s: dropping analysis %d, session detached", self.id, seq)
                return False
            if seq <= self._applied:
                logger.info("Session %s: discarding stale analysis %d (applied %d)", self.id, seq, self._applied)
                return False
            self._applied = seq
            if items:
                self.symbols.apply_assignments(items)
            self.result = result
            return True

    def wait(self, timeout: Optional[float] = None) -> None:
        """Blocks until background analyses started so far have finished."""
        with self._lock:
            workers = list(self._workers)
        for t in workers:
            t.join(timeout)

    # --- Lifecycle ---

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._debouncer.cancel()

    @property
    def closed(self) -> bool:
        return self._closed

    def state(self) -> Dict[str, Any]:
        with self._lock:
            view = present(self.result)
            return {
                "id": self.id,
                "surface": self.surface.surface.model_dump(),
                "style": self.tools.to_dict(),
                "stroke": self.stroke.phase,
                "symbols": self.symbols.snapshot(),
                "pending": self.pending,
                "result": view.model_dump() if view else None,
            }
