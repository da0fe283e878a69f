from __future__ import annotations
import math
from typing import NamedTuple, Tuple
import numpy as np
from scipy.spatial.transform import Rotation

from mmcodec.cfg import Cfg

################################################################################
# ╭──────────────────  VECTORS & MATRICES  ───────────────────────╮
################################################################################

# Column vectors, right-handed, float64 throughout.
X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])


def vector(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], np.float64)

def dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b))

def length_sq(v: np.ndarray) -> float:
    return float(np.dot(v, v))

def rotation(angle: float, axis: np.ndarray) -> np.ndarray:
    """3×3 matrix rotating by *angle* radians about *axis* (right-hand rule)."""
    axis = np.asarray(axis, np.float64)
    norm = math.sqrt(length_sq(axis))
    if norm == 0.0:
        raise ValueError("rotation axis must be non-zero")
    return Rotation.from_rotvec(axis / norm * angle).as_matrix()

def matmul(*ms: np.ndarray) -> np.ndarray:
    """Left-to-right product; the right-most matrix acts on a vector first."""
    out = np.eye(3)
    for m in ms:
        out = out @ m
    return out

def transform(m: np.ndarray, v: np.ndarray) -> np.ndarray:
    return np.asarray(m, np.float64) @ np.asarray(v, np.float64)

################################################################################
# ╭──────────────────  2D OVERLAY ARROWS  ────────────────────────╮
################################################################################

class Arrow(NamedTuple):
    tip: Tuple[int, int]
    line_end: Tuple[int, int]
    head1: Tuple[int, int]
    head2: Tuple[int, int]


def arrow_points(tip: Tuple[int, int],
                 direction: int,
                 length: int,
                 head_size: int,
                 centre: bool = False) -> Arrow:
    """Screen-space corners of a direction arrow (y grows downwards).

    *direction* is in 1/2048 half-turn units; 0 points up the screen.  With
    *centre* the arrow is shifted so that its midpoint sits on *tip*.
    Every offset is truncated to int before it is applied.
    """
    head_len = Cfg.ARROW_HEAD * head_size
    angle = math.pi * (direction / Cfg.ARROW_UNITS)
    tx, ty = tip

    if centre:
        tx += int(math.sin(angle) * length / 2)
        ty += -int(math.cos(angle) * length / 2)

    def _back(l: float, a: float) -> Tuple[int, int]:
        return tx - int(l * math.sin(a)), ty + int(l * math.cos(a))

    return Arrow((tx, ty),
                 _back(length, angle),
                 _back(head_len, angle + Cfg.ARROW_SPREAD),
                 _back(head_len, angle - Cfg.ARROW_SPREAD))
