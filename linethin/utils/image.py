# raster codec helpers (decode to RGBA array / encode PNG)
# linethin/utils/image.py
from __future__ import annotations
import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from linethin.schema.errors import DecodeError

def ensure_rgba(img: Image.Image) -> Image.Image:
    return img.convert("RGBA") if img.mode != "RGBA" else img

def decode_image(data: bytes) -> np.ndarray:
    """Decode any Pillow-readable raster into an (H, W, 4) uint8 array."""
    if not data:
        raise DecodeError("Could not decode image: empty input")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgba = ensure_rgba(img)
            return np.array(rgba, dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Could not decode image: {exc}") from exc

def encode_png(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(buf, format="PNG")
    return buf.getvalue()

def invert_rgb(pixels: np.ndarray) -> np.ndarray:
    """Invert colour channels, keep alpha."""
    out = pixels.copy()
    out[..., :3] = 255 - out[..., :3]
    return out
