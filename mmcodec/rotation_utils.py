from __future__ import annotations
import logging
import math
from typing import List, NamedTuple, Sequence
import numpy as np

from mmcodec.cfg import Cfg, SHORT3, _wrap_int16
from mmcodec.geom_utils import X_AXIS, Y_AXIS, Z_AXIS, dot, matmul, rotation, transform, vector

logger = logging.getLogger(__name__)

################################################################################
# ╭──────────────────────  DATA STRUCTURES  ───────────────────────╮
################################################################################

class Short3Coord(NamedTuple):
    """Three signed 16-bit ints as stored in the archive (positions and
    compressed rotations alike)."""
    x: int
    y: int
    z: int

    def pack(self) -> bytes:
        return SHORT3.pack(*(_wrap_int16(int(c)) for c in self))

    @classmethod
    def unpack(cls, buf: bytes, offset: int = 0) -> "Short3Coord":
        if len(buf) - offset < SHORT3.size:
            raise ValueError(f"need {SHORT3.size} bytes at offset {offset}, have {len(buf) - offset}")
        return cls(*SHORT3.unpack_from(buf, offset))


def read_short3_array(data: bytes) -> List[Short3Coord]:
    if len(data) % SHORT3.size:
        raise ValueError(f"buffer length {len(data)} is not a multiple of {SHORT3.size}")
    return [Short3Coord(*c) for c in SHORT3.iter_unpack(data)]


def short3_to_point(c: Short3Coord) -> np.ndarray:
    return vector(c.x, c.y, c.z)


def point_to_short3(p: Sequence[float]) -> Short3Coord:
    """Truncates toward zero, then wraps to 16 bits."""
    return Short3Coord(*(_wrap_int16(int(v)) for v in p))

################################################################################
# ╭──────────────────  FIXED-POINT ANGLES  ───────────────────────╮
################################################################################

def _units_to_radians(units: int) -> float:
    # archive angles are stored negated
    return -units / Cfg.ANGLE_UNITS * math.pi / 2.0

def _radians_to_units(angle: float) -> int:
    # truncation, not rounding: int() drops the fraction toward zero
    return _wrap_int16(int(angle / math.pi * 2 * Cfg.ANGLE_UNITS))

def _clamp_unit(v: float, what: str) -> float:
    if v > 1.0 or v < -1.0:
        if abs(v) - 1.0 > Cfg.TRIG_TOLERANCE:
            logger.warning("%s argument %.9f outside [-1,1]; input is not a rotation", what, v)
        return max(-1.0, min(1.0, v))
    return v

def _solve(sin_theta: float, flip: bool, cos_phi_num: float, neg_phi: bool):
    """Solve the two-angle decomposition for one fixed axis.

    theta = asin(sin_theta), moved to pi - theta when *flip*;
    phi   = acos(cos_phi_num / cos(theta)), negated when *neg_phi*.
    """
    theta = math.asin(_clamp_unit(sin_theta, "asin"))
    if flip:
        theta = math.pi - theta

    c = math.cos(theta)
    if abs(c) < Cfg.TRIG_TOLERANCE:
        # theta at ±pi/2: the fixed axis lands on a pole and phi is free
        ratio = 1.0
    else:
        ratio = cos_phi_num / c
    phi = math.acos(_clamp_unit(ratio, "acos"))
    if neg_phi:
        phi = -phi
    return theta, phi

################################################################################
# ╭──────────────────  ROTATION CODEC  ───────────────────────────╮
################################################################################

def decode(c: Short3Coord) -> np.ndarray:
    """CompressedRotation -> 3×3 rotation matrix.

    Rotates about Z first, then Y, then X; every angle is negated.  Any three
    integers are accepted.
    """
    x, y, z = c
    return matmul(rotation(_units_to_radians(x), X_AXIS),
                  rotation(_units_to_radians(y), Y_AXIS),
                  rotation(_units_to_radians(z), Z_AXIS))


def encode(m: np.ndarray) -> Short3Coord:
    """3×3 rotation matrix -> CompressedRotation with one axis fixed at zero.

    The axis that moves furthest under *m* is fixed; the rotation is then
    recovered from where that axis lands, solving two of its coordinates for
    (theta, phi) and using the signs of the others to pick the right branch.
    """
    m = np.asarray(m, np.float64)
    nx = transform(m, X_AXIS)
    ny = transform(m, Y_AXIS)
    nz = transform(m, Z_AXIS)

    dx = abs(dot(nx, X_AXIS))
    dy = abs(dot(ny, Y_AXIS))
    dz = abs(dot(nz, Z_AXIS))

    # ordered tie-break: X, then Y against Z
    if dx < dy and dx < dz:
        # z by theta first, then y by phi
        theta, phi = _solve(-nx[1], nx[0] < 0, nx[0], nx[2] < 0)
        out = Short3Coord(0, _radians_to_units(phi), _radians_to_units(theta))
    elif dy < dz:
        # z by theta first, then x by phi
        theta, phi = _solve(ny[0], ny[1] < 0, ny[1], ny[2] > 0)
        out = Short3Coord(_radians_to_units(phi), 0, _radians_to_units(theta))
    else:
        # y by theta first, then x by phi
        theta, phi = _solve(-nz[0], nz[2] < 0, nz[2], nz[1] < 0)
        out = Short3Coord(_radians_to_units(phi), _radians_to_units(theta), 0)

    logger.debug("encode dist=(%.4f, %.4f, %.4f) -> %s", dx, dy, dz, out)
    return out
