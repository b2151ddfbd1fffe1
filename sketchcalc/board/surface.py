import logging
import threading
from typing import Callable, Optional, Tuple

import numpy as np
from PIL import Image
from pydantic import BaseModel, Field

from .style import BACKGROUND_COLOR
from ..utils import color_to_rgb, image_to_data_url

logger = logging.getLogger("board.surface")

# Orientation changes report intermediate sizes; wait for the final one
ORIENTATION_SETTLE_DELAY = 0.15

# Backing store is at most 12288x12288 pixels
MAX_LOGICAL_SIZE = 4096
MAX_DEVICE_SCALE = 3.0


class ContainerBox(BaseModel):
    """Content box of the element hosting the drawing surface, in logical pixels."""
    client_width: float = Field(ge=0, le=MAX_LOGICAL_SIZE)
    client_height: float = Field(ge=0, le=MAX_LOGICAL_SIZE)
    padding_left: float = Field(default=0.0, ge=0, le=MAX_LOGICAL_SIZE)
    padding_right: float = Field(default=0.0, ge=0, le=MAX_LOGICAL_SIZE)
    padding_top: float = Field(default=0.0, ge=0, le=MAX_LOGICAL_SIZE)
    padding_bottom: float = Field(default=0.0, ge=0, le=MAX_LOGICAL_SIZE)


class CanvasSurface(BaseModel):
    css_width: int
    css_height: int
    device_scale: float
    backing_width: int
    backing_height: int


def compute_surface(container: ContainerBox, device_scale: float) -> CanvasSurface:
    """
    Logical size is the container's client box minus its padding.
    The device scale is clamped to [1, MAX_DEVICE_SCALE].
    """
    scale = min(MAX_DEVICE_SCALE, max(1.0, float(device_scale)))
    css_w = max(0, int(container.client_width - container.padding_left - container.padding_right))
    css_h = max(0, int(container.client_height - container.padding_top - container.padding_bottom))
    return CanvasSurface(
        css_width=css_w,
        css_height=css_h,
        device_scale=scale,
        backing_width=int(round(css_w * scale)),
        backing_height=int(round(css_h * scale)),
    )


class SurfaceManager:
    """
    Owns the raster backing store and its geometry.

    Pointer coordinates are logical pixels; the backing store is
    `device_scale` times larger on each axis.
    """

    def __init__(self, container: Optional[ContainerBox] = None, device_scale: float = 1.0,
                 background: str = BACKGROUND_COLOR):
        self.background = background
        self._background_rgb = color_to_rgb(background)
        self.surface = CanvasSurface(
            css_width=0, css_height=0, device_scale=min(MAX_DEVICE_SCALE, max(1.0, float(device_scale))),
            backing_width=0, backing_height=0,
        )
        self.image = self._blank(0, 0)
        if container is not None:
            self.resize(container)

    def _blank(self, width: int, height: int) -> Image.Image:
        # PIL cannot encode an empty image, keep at least one pixel around
        return Image.new("RGB", (max(1, width), max(1, height)), self._background_rgb)

    @property
    def device_scale(self) -> float:
        return self.surface.device_scale

    def resize(self, container: Optional[ContainerBox],
               device_scale: Optional[float] = None) -> CanvasSurface:
        """
        Recomputes the surface for a new container size and/or device scale.
        Existing pixels are carried over; use clear() to discard them.
        """
        if container is None:
            logger.debug("resize skipped: no container attached")
            return self.surface

        scale = self.surface.device_scale if device_scale is None else device_scale
        new = compute_surface(container, scale)
        if new == self.surface:
            return self.surface

        old, old_surface = self.image, self.surface
        image = self._blank(new.backing_width, new.backing_height)
        if old_surface.backing_width and old_surface.backing_height:
            carried = old
            if new.device_scale != old_surface.device_scale:
                ratio = new.device_scale / old_surface.device_scale
                carried = old.resize(
                    (max(1, int(round(old.width * ratio))), max(1, int(round(old.height * ratio)))),
                    Image.NEAREST,
                )
            image.paste(carried, (0, 0))

        self.image = image
        self.surface = new
        logger.debug("surface resized to %dx%d (scale %.2f)", new.css_width, new.css_height, new.device_scale)
        return new

    def clear(self) -> None:
        self.image = self._blank(self.surface.backing_width, self.surface.backing_height)

    def to_backing(self, x: float, y: float) -> Tuple[float, float]:
        scale = self.surface.device_scale
        return (x * scale, y * scale)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        return tuple(self.image.getpixel((x, y))[:3])

    def to_array(self) -> np.ndarray:
        """HxWx3 uint8 copy of the backing store."""
        return np.array(self.image)

    def is_blank(self) -> bool:
        arr = self.to_array()
        return bool(np.all(arr == np.array(self._background_rgb, dtype=arr.dtype)))

    def to_data_url(self) -> str:
        return image_to_data_url(self.image)


class ResizeDebouncer:
    """Collapses bursts of resize requests into one call after `delay` seconds."""

    def __init__(self, apply: Callable[..., object],
                 delay: float = ORIENTATION_SETTLE_DELAY):
        self.apply = apply
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def schedule(self, container: ContainerBox, device_scale: Optional[float] = None,
                 **options) -> threading.Timer:
        """`options` are passed to `apply` as keyword arguments (e.g. reset=True)."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay, self.apply, args=(container, device_scale), kwargs=options)
            timer.daemon = True
            self._timer = timer
            timer.start()
            return timer

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
