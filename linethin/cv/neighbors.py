# 8-connected neighbourhood queries over a 0/1 mask
# linethin/cv/neighbors.py
from __future__ import annotations
from enum import IntEnum
from typing import List

import numpy as np


class Direction(IntEnum):
    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7


# (dy, dx) per Direction, clockwise from north
OFFSETS = (
    (-1, 0), (-1, 1), (0, 1), (1, 1),
    (1, 0), (1, -1), (0, -1), (-1, -1),
)


def neighbor_value(mask: np.ndarray, x: int, y: int, direction: Direction) -> int:
    """Mask value one step from (x, y) in `direction`; 0 outside the grid."""
    dy, dx = OFFSETS[direction]
    h, w = mask.shape
    ny, nx = y + dy, x + dx
    if 0 <= ny < h and 0 <= nx < w:
        return int(mask[ny, nx])
    return 0


def ring(mask: np.ndarray, x: int, y: int) -> List[int]:
    return [neighbor_value(mask, x, y, d) for d in Direction]


def neighbor_count(mask: np.ndarray, x: int, y: int) -> int:
    return sum(ring(mask, x, y))


def transition_count(mask: np.ndarray, x: int, y: int) -> int:
    """Number of 0->1 steps walking N, NE, ..., NW and back to N."""
    r = ring(mask, x, y)
    return sum(1 for a, b in zip(r, r[1:] + r[:1]) if a == 0 and b == 1)


# ---- whole-grid forms (used by the erosion pass) ----

def neighbor_planes(mask: np.ndarray) -> np.ndarray:
    """
    Stack of shape (8, H, W): plane d holds, for every cell, its neighbour in
    Direction d. The grid is zero-padded so border cells see background.
    """
    h, w = mask.shape
    p = np.pad(mask, 1, mode="constant", constant_values=0)
    return np.stack([p[1 + dy:1 + dy + h, 1 + dx:1 + dx + w] for dy, dx in OFFSETS])


def neighbor_counts(planes: np.ndarray) -> np.ndarray:
    return planes.sum(axis=0, dtype=np.int32)


def transition_counts(planes: np.ndarray) -> np.ndarray:
    nxt = np.roll(planes, -1, axis=0)   # NE..NW, then N again
    return ((planes == 0) & (nxt == 1)).sum(axis=0, dtype=np.int32)
