import pytest

from sketchcalc.board.ingestion.models import Point
from sketchcalc.board.stroke_engine.machine import (
    IDLE, BeginPath, ClearResult, EndPath, PaintSegment, PointerDown, PointerLeave,
    PointerMove, PointerUp, run, transition,
)
from sketchcalc.board.stroke_engine.raster import paint_segment
from sketchcalc.board.style import ToolState
from sketchcalc.board.surface import ContainerBox, SurfaceManager

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def down(x, y):
    return PointerDown(point=Point(x=x, y=y))


def move(x, y):
    return PointerMove(point=Point(x=x, y=y))


def paint_all(surface, effects):
    for effect in effects:
        if isinstance(effect, PaintSegment):
            paint_segment(surface, effect)


def test_pointer_down_starts_drawing_and_clears_result():
    state, effects = transition(IDLE, down(3, 4), ToolState())
    assert state.drawing
    assert state.last_point == Point(x=3, y=4)
    assert isinstance(effects[0], ClearResult)
    assert isinstance(effects[1], BeginPath)


@pytest.mark.parametrize("event", [move(1, 1), PointerUp(), PointerLeave()])
def test_idle_ignores_everything_but_down(event):
    state, effects = transition(IDLE, event, ToolState())
    assert state == IDLE
    assert effects == []


def test_move_extends_path():
    tools = ToolState()
    state, _ = transition(IDLE, down(0, 0), tools)
    state, effects = transition(state, move(10, 5), tools)
    assert effects == [PaintSegment(start=Point(x=0, y=0), end=Point(x=10, y=5), style=tools.stroke_style())]
    state, effects = transition(state, move(20, 5), tools)
    assert effects[0].start == Point(x=10, y=5)


@pytest.mark.parametrize("end", [PointerUp(), PointerLeave()])
def test_release_or_leave_finishes_stroke(end):
    tools = ToolState()
    state, _ = run([down(0, 0), move(5, 5)], tools)
    state, effects = transition(state, end, tools)
    assert state == IDLE
    assert effects == [EndPath()]


def test_style_is_fixed_for_the_stroke():
    tools = ToolState()
    state, _ = transition(IDLE, down(0, 0), tools)
    tools.set_color("red")
    tools.set_stroke("Thick")
    _, effects = transition(state, move(5, 5), tools)
    assert effects[0].style.color == "rgb(0,0,0)"
    assert effects[0].style.width == 2


def test_second_down_restarts_path():
    tools = ToolState()
    state, _ = run([down(0, 0), move(5, 5)], tools)
    state, effects = transition(state, down(50, 50), tools)
    assert state.drawing
    assert state.last_point == Point(x=50, y=50)
    _, effects = transition(state, move(60, 60), tools)
    assert effects[0].start == Point(x=50, y=50)


@pytest.mark.parametrize("scale", [1.0, 1.5, 2.0, 3.0])
def test_path_hits_scaled_pixels(scale):
    surface = SurfaceManager(ContainerBox(client_width=200, client_height=100), device_scale=scale)
    points = [(10, 10), (50, 30), (80, 60)]
    events = [down(*points[0])] + [move(x, y) for x, y in points[1:]] + [PointerUp()]

    _, effects = run(events, ToolState())
    paint_all(surface, effects)

    for x, y in points:
        assert surface.pixel(int(round(x * scale)), int(round(y * scale))) == BLACK
    # midpoint of the first segment
    assert surface.pixel(int(round(30 * scale)), int(round(20 * scale))) == BLACK


def test_width_scales_with_device():
    surface = SurfaceManager(ContainerBox(client_width=100, client_height=100), device_scale=2.0)
    tools = ToolState(stroke="Thick")  # 10 logical -> 20 backing
    _, effects = run([down(10, 50), move(90, 50)], tools)
    paint_all(surface, effects)
    assert surface.pixel(100, 100 + 8) == BLACK
    assert surface.pixel(100, 100 + 14) == WHITE


def test_eraser_paints_background():
    surface = SurfaceManager(ContainerBox(client_width=100, client_height=100))
    tools = ToolState(stroke="Medium")
    _, effects = run([down(10, 50), move(90, 50), PointerUp()], tools)
    paint_all(surface, effects)
    assert surface.pixel(50, 50) == BLACK

    tools.set_tool("eraser")
    _, effects = run([down(0, 50), move(100, 50), PointerUp()], tools)
    paint_all(surface, effects)
    assert surface.is_blank()


def test_down_then_up_paints_nothing():
    surface = SurfaceManager(ContainerBox(client_width=50, client_height=50))
    _, effects = run([down(25, 25), PointerUp()], ToolState())
    paint_all(surface, effects)
    assert surface.is_blank()


def test_pen_color_is_painted():
    surface = SurfaceManager(ContainerBox(client_width=50, client_height=50))
    tools = ToolState(color="#ff0000", stroke="Medium")
    _, effects = run([down(5, 5), move(40, 5)], tools)
    paint_all(surface, effects)
    assert surface.pixel(20, 5) == (255, 0, 0)
