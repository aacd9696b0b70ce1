# linethin/cv/skeletonize.py
# Zhang-Suen thinning on a 0/1 numpy mask: binarize -> erode to fixed point -> rebuild RGBA
from __future__ import annotations
from typing import NamedTuple, Tuple

import numpy as np
from loguru import logger

from linethin.cv.neighbors import Direction, neighbor_planes, neighbor_counts, transition_counts
from linethin.schema.errors import ConfigError, ProcessingError
from linethin.schema.types import (
    ITERATIONS_MAX, ITERATIONS_MIN, OUTPUT_STYLES, ThinningState, ThinningStats,
)

FOREGROUND_THRESHOLD = 128
DEFAULT_MAX_PASSES = 10_000


class ErosionResult(NamedTuple):
    mask: np.ndarray
    changed: bool


class ConvergenceResult(NamedTuple):
    mask: np.ndarray
    state: ThinningState
    passes: int


def to_binary(pixels: np.ndarray) -> np.ndarray:
    """
    Threshold a decoded pixel buffer into a 0/1 mask of shape (H, W).

    A pixel is foreground when the unweighted mean of R, G, B is below 128.
    Alpha is ignored. (H, W) grayscale and (H, W, 3|4) colour arrays are accepted.
    """
    arr = np.asarray(pixels)
    if arr.ndim == 2:
        total = arr.astype(np.int32) * 3
    elif arr.ndim == 3 and arr.shape[2] >= 3:
        total = arr[..., :3].astype(np.int32).sum(axis=2)
    else:
        raise ProcessingError(f"unsupported pixel buffer shape {arr.shape}")
    if total.shape[0] == 0 or total.shape[1] == 0:
        raise ProcessingError(f"image has zero width or height ({total.shape[1]}x{total.shape[0]})")
    # (R+G+B)/3 < 128  <=>  R+G+B < 384
    return np.ascontiguousarray(total < 3 * FOREGROUND_THRESHOLD, dtype=np.uint8)


def from_binary(mask: np.ndarray, output_style: str) -> np.ndarray:
    """Map a 0/1 mask to an opaque RGBA buffer in the requested polarity."""
    if output_style not in OUTPUT_STYLES:
        raise ConfigError('Invalid outputStyle. Must be "black-on-white" or "white-on-black"')
    fg, bg = (0, 255) if output_style == "black-on-white" else (255, 0)
    h, w = mask.shape
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., :3] = np.where(mask == 1, fg, bg).astype(np.uint8)[..., None]
    out[..., 3] = 255
    return out


def _removable(mask: np.ndarray, first_phase: bool, preserve_endpoints: bool) -> np.ndarray:
    planes = neighbor_planes(mask)
    b = neighbor_counts(planes)
    a = transition_counts(planes)
    n, e = planes[Direction.N], planes[Direction.E]
    s, w = planes[Direction.S], planes[Direction.W]
    if first_phase:
        side = (n * e * s == 0) & (e * s * w == 0)
    else:
        side = (n * e * w == 0) & (n * s * w == 0)

    hits = (mask == 1) & (b >= 2) & (b <= 6) & (a == 1) & side
    if preserve_endpoints:
        hits &= b != 1
    # border cells are never candidates
    hits[0, :] = False
    hits[-1, :] = False
    hits[:, 0] = False
    hits[:, -1] = False
    return hits


def erosion_pass(mask: np.ndarray, preserve_endpoints: bool = False) -> ErosionResult:
    """
    One Zhang-Suen pass (phase 1 then phase 2). Each phase decides on a
    snapshot and removes its pixels in one batch. The input is not modified.
    """
    out = mask.copy()
    changed = False
    for first_phase in (True, False):
        hits = _removable(out, first_phase, preserve_endpoints)
        if hits.any():
            out[hits] = 0
            changed = True
    return ErosionResult(out, changed)


def converge(mask: np.ndarray, preserve_endpoints: bool = False,
             max_passes: int = DEFAULT_MAX_PASSES) -> ConvergenceResult:
    """Repeat erosion passes until one removes nothing, or `max_passes` is hit."""
    current = mask
    passes = 0
    state = ThinningState.RUNNING
    while state is ThinningState.RUNNING:
        if passes >= max_passes:
            state = ThinningState.ITERATION_LIMIT_REACHED
            logger.warning(f"[skeletonize] pass cap {max_passes} reached before convergence")
            break
        current, changed = erosion_pass(current, preserve_endpoints)
        passes += 1
        if not changed:
            state = ThinningState.CONVERGED
    return ConvergenceResult(current, state, passes)


def skeletonize(mask: np.ndarray, iterations: int = 1, preserve_endpoints: bool = False,
                max_passes: int = DEFAULT_MAX_PASSES) -> Tuple[np.ndarray, ThinningStats]:
    """
    Run the full convergence loop `iterations` times in sequence.

    Repetitions after the first are normally no-ops on an already converged
    skeleton; the outer loop is kept so `iterations` behaves as callers expect.
    """
    if not (ITERATIONS_MIN <= iterations <= ITERATIONS_MAX):
        raise ConfigError(f"Invalid iterations. Must be between {ITERATIONS_MIN} and {ITERATIONS_MAX}")

    before = foreground_count(mask)
    current = mask
    passes = 0
    state = ThinningState.RUNNING
    for i in range(iterations):
        current, state, n = converge(current, preserve_endpoints, max_passes)
        passes += n
        logger.debug(f"[skeletonize] iteration {i + 1}/{iterations}: {n} passes, {state.value}")
        if state is ThinningState.ITERATION_LIMIT_REACHED:
            break

    stats = ThinningStats(
        passes=passes,
        foreground_before=before,
        foreground_after=foreground_count(current),
        state=state,
    )
    return current, stats


def foreground_count(mask: np.ndarray) -> int:
    return int(np.count_nonzero(mask))
