from PIL import ImageDraw
from .machine import PaintSegment
from ..surface import SurfaceManager
from ...utils import color_to_rgb


def paint_segment(surface: SurfaceManager, segment: PaintSegment) -> None:
    """
    Paints one path segment onto the backing store with round caps and joins.
    Geometry is logical; it is scaled by the surface's device scale here.
    """
    x0, y0 = surface.to_backing(segment.start.x, segment.start.y)
    x1, y1 = surface.to_backing(segment.end.x, segment.end.y)
    width = max(1, int(round(segment.style.width * surface.device_scale)))
    fill = color_to_rgb(segment.style.color)

    draw = ImageDraw.Draw(surface.image)
    draw.line([(x0, y0), (x1, y1)], fill=fill, width=width)

    # Discs at both ends give round caps, and round joins with the neighbours
    r = width / 2.0
    for x, y in ((x0, y0), (x1, y1)):
        draw.ellipse([x - r, y - r, x + r, y + r], fill=fill)
