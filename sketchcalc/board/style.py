from enum import Enum
from typing import Dict, Union
from pydantic import BaseModel
from ..utils import color_to_rgb

BACKGROUND_COLOR = "white"
DEFAULT_COLOR = "rgb(0,0,0)"


class Tool(str, Enum):
    PEN = "pen"
    ERASER = "eraser"


class StrokeWidth(str, Enum):
    THIN = "Thin"
    MEDIUM = "Medium"
    THICK = "Thick"


# Logical pixel widths per category. The eraser paints the background,
# so it needs a much wider nib to be usable.
STROKE_MAP: Dict[StrokeWidth, int] = {
    StrokeWidth.THIN: 2,
    StrokeWidth.MEDIUM: 5,
    StrokeWidth.THICK: 10,
}

ERASER_MAP: Dict[StrokeWidth, int] = {
    StrokeWidth.THIN: 10,
    StrokeWidth.MEDIUM: 20,
    StrokeWidth.THICK: 40,
}


class StrokeStyle(BaseModel):
    """The fixed (tool, color, width) tuple a single stroke is painted with."""
    tool: Tool
    color: str  # color actually painted (background for the eraser)
    width: int  # logical pixels


class ToolState:
    """
    Current tool selection. `color` survives tool switches; it is only painted
    while the pen is selected. The eraser paints `background`, which must match
    the surface it draws on.
    """

    def __init__(self, tool: Tool = Tool.PEN, color: str = DEFAULT_COLOR,
                 stroke: StrokeWidth = StrokeWidth.THIN, background: str = BACKGROUND_COLOR):
        color_to_rgb(color)
        self.tool = Tool(tool)
        self.color = color
        self.stroke = StrokeWidth(stroke)
        self.background = background

    def set_tool(self, tool: Union[Tool, str]) -> None:
        self.tool = Tool(tool)

    def set_color(self, color: str) -> None:
        color_to_rgb(color)  # raises ValueError, state untouched
        self.color = color

    def set_stroke(self, stroke: Union[StrokeWidth, str]) -> None:
        self.stroke = StrokeWidth(stroke)

    @property
    def width(self) -> int:
        table = ERASER_MAP if self.tool == Tool.ERASER else STROKE_MAP
        return table[self.stroke]

    def stroke_style(self) -> StrokeStyle:
        paint = self.background if self.tool == Tool.ERASER else self.color
        return StrokeStyle(tool=self.tool, color=paint, width=self.width)

    def to_dict(self) -> dict:
        return {
            "tool": self.tool.value,
            "color": self.color,
            "stroke": self.stroke.value,
            "width": self.width,
        }
