import io

import numpy as np
import pytest
from PIL import Image
from loguru import logger


def mask_to_png(mask: np.ndarray, ink: int = 0, paper: int = 255, mode: str = "RGB") -> bytes:
    """Render a 0/1 mask as an encoded image: foreground = ink, background = paper."""
    gray = np.where(mask == 1, ink, paper).astype(np.uint8)
    img = Image.fromarray(gray).convert(mode)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def png_to_array(data: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(data)) as img:
        return np.array(img.convert("RGBA"))


@pytest.fixture
def blank_mask():
    return np.zeros((5, 5), dtype=np.uint8)


@pytest.fixture
def square_mask():
    m = np.zeros((5, 5), dtype=np.uint8)
    m[1:4, 1:4] = 1
    return m


@pytest.fixture
def line_mask():
    # middle row of a 10x3 grid, edge to edge
    m = np.zeros((3, 10), dtype=np.uint8)
    m[1, :] = 1
    return m


@pytest.fixture
def blob_mask():
    # thick stroke: a filled bar with a bump, plenty to erode
    m = np.zeros((24, 32), dtype=np.uint8)
    m[8:16, 3:29] = 1
    m[4:8, 20:26] = 1
    return m


@pytest.fixture
def random_masks():
    rng = np.random.default_rng(1234)
    return [(rng.random((16, 20)) < p).astype(np.uint8) for p in (0.2, 0.5, 0.8)]


@pytest.fixture(autouse=True)
def drop_log_handlers():
    # the CLI installs a handler bound to the runner's stream; don't leak it
    yield
    logger.remove()
