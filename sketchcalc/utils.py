from PIL import Image, ImageColor
import base64
import io
from typing import Tuple

DATA_URL_PREFIX = "data:image/png;base64,"


def image_to_png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def image_to_data_url(image: Image.Image) -> str:
    return DATA_URL_PREFIX + base64.b64encode(image_to_png_bytes(image)).decode("ascii")


def data_url_to_image(data_url: str) -> Image.Image:
    """Decodes a base64 image data URL (any image mime type) into an RGB image."""
    if not data_url.startswith("data:image/") or ";base64," not in data_url:
        raise ValueError("Not a base64 image data URL")
    payload = data_url.split(",", 1)[1]
    return Image.open(io.BytesIO(base64.b64decode(payload))).convert("RGB")


def color_to_rgb(color: str) -> Tuple[int, int, int]:
    """
    Resolves a CSS-style color ("rgb(0,0,0)", "#ff0000", "white") to an RGB tuple.
    Raises ValueError for anything PIL cannot parse.
    """
    rgb = ImageColor.getrgb(color)
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]))
