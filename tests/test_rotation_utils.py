"""
Tests for the compressed rotation codec and Short3Coord helpers
"""

import logging
import math

import numpy as np
import pytest

from mmcodec.geom_utils import X_AXIS, Y_AXIS, Z_AXIS, rotation
from mmcodec.rotation_utils import (Short3Coord, decode, encode, read_short3_array,
                                    short3_to_point, point_to_short3, _radians_to_units)

UNIT = math.pi / 2048      # one archive angle step


def _assert_rotation(m):
    np.testing.assert_allclose(m.T @ m, np.eye(3), atol=1e-12)
    assert np.linalg.det(m) == pytest.approx(1.0)


def test_decode_zero_is_identity():
    np.testing.assert_allclose(decode(Short3Coord(0, 0, 0)), np.eye(3), atol=1e-15)


def test_decode_single_axes_are_negated():
    # 1024 units is a quarter turn, applied with the opposite sign
    np.testing.assert_allclose(decode(Short3Coord(0, 0, 1024)), rotation(-math.pi / 2, Z_AXIS), atol=1e-12)
    np.testing.assert_allclose(decode(Short3Coord(0, 1024, 0)), rotation(-math.pi / 2, Y_AXIS), atol=1e-12)
    np.testing.assert_allclose(decode(Short3Coord(1024, 0, 0)), rotation(-math.pi / 2, X_AXIS), atol=1e-12)
    # -Z quarter turn sends X to -Y
    np.testing.assert_allclose(decode(Short3Coord(0, 0, 1024)) @ X_AXIS, [0, -1, 0], atol=1e-12)


def test_decode_applies_z_first():
    x, y, z = 300, -500, 700
    expected = rotation(-x * UNIT, X_AXIS) @ rotation(-y * UNIT, Y_AXIS) @ rotation(-z * UNIT, Z_AXIS)
    np.testing.assert_allclose(decode(Short3Coord(x, y, z)), expected, atol=1e-12)


def test_decode_accepts_anything():
    _assert_rotation(decode(Short3Coord(-32768, 32767, 12345)))


def test_encode_identity():
    c = encode(np.eye(3))
    # all distances tie, so Z is the fixed axis
    assert c == Short3Coord(0, 0, 0)
    np.testing.assert_allclose(decode(c), np.eye(3), atol=1e-15)


@pytest.mark.parametrize("coord, fixed", [
    (Short3Coord(0, 200, 300), 0),
    (Short3Coord(0, -350, 120), 0),
    (Short3Coord(250, 0, -400), 1),
    (Short3Coord(-180, 0, 90), 1),
    (Short3Coord(300, 150, 0), 2),
    (Short3Coord(-260, -330, 0), 2),
])
def test_encode_recovers_two_angle_rotations(coord, fixed):
    m = decode(coord)
    c = encode(m)
    assert c[fixed] == 0
    # truncation can drop at most one step per angle
    assert all(abs(a - b) <= 1 for a, b in zip(c, coord))
    np.testing.assert_allclose(decode(c), m, atol=1e-2)


def test_round_trip_random_small_rotations():
    rng = np.random.default_rng(1234)
    for _ in range(200):
        a, b = (int(v) for v in rng.integers(-900, 900, 2))
        fixed = int(rng.integers(0, 3))
        vals = [a, b]
        vals.insert(fixed, 0)
        m = decode(Short3Coord(*vals))
        np.testing.assert_allclose(decode(encode(m)), m, atol=1e-2)


def test_encode_output_has_a_zero_axis():
    rng = np.random.default_rng(99)
    for _ in range(100):
        c = encode(decode(Short3Coord(*(int(v) for v in rng.integers(-4096, 4096, 3)))))
        assert 0 in c


def test_encode_truncates_toward_zero():
    # 100.7 steps rounds to 101 but truncates to 100
    c = encode(rotation(-100.7 * UNIT, Z_AXIS))
    assert c == Short3Coord(0, 0, 100)
    c = encode(rotation(100.7 * UNIT, Z_AXIS))
    assert c == Short3Coord(0, 0, -100)


def test_radians_to_units_truncation():
    assert _radians_to_units(100.7 * UNIT) == 100
    assert _radians_to_units(-100.7 * UNIT) == -100
    assert _radians_to_units(0.999 * UNIT) == 0


def test_tie_break_prefers_x_only_when_strictly_smallest():
    # X and Y move equally under a Z turn: Y is fixed, not X
    c = encode(rotation(-0.3, Z_AXIS))
    assert c.y == 0 and c.z != 0
    # a Y turn moves X and Z equally: Z is fixed
    c = encode(rotation(-0.3, Y_AXIS))
    assert c.z == 0 and c.y != 0


def test_encode_clamps_noisy_input(caplog):
    m = decode(Short3Coord(0, 0, 1024)) * (1 + 1e-9)
    with caplog.at_level(logging.WARNING, logger="mmcodec.rotation_utils"):
        c = encode(m)
    assert not caplog.records
    assert all(abs(v) <= 4096 for v in c)


def test_encode_warns_on_non_rotation(caplog):
    with caplog.at_level(logging.WARNING, logger="mmcodec.rotation_utils"):
        c = encode(np.eye(3) * 2.0)
    assert any("outside [-1,1]" in r.getMessage() for r in caplog.records)
    assert isinstance(c, Short3Coord)


def test_encode_degenerate_theta_is_finite():
    # X lands on -Y: theta = pi/2 exactly, cos(theta) == 0
    m = decode(Short3Coord(0, 0, 1024))
    c = encode(m)
    assert all(isinstance(v, int) for v in c)
    np.testing.assert_allclose(decode(c), m, atol=1e-2)


def test_short3_pack_unpack():
    c = Short3Coord(1, -2, 0x7FFF)
    buf = c.pack()
    assert buf == b"\x01\x00\xfe\xff\xff\x7f"
    assert Short3Coord.unpack(buf) == c
    assert Short3Coord.unpack(b"\x00" + buf, offset=1) == c
    with pytest.raises(ValueError):
        Short3Coord.unpack(buf[:5])


def test_short3_pack_wraps():
    assert Short3Coord.unpack(Short3Coord(0x8000, -0x8001, 0x10001).pack()) == Short3Coord(-0x8000, 0x7FFF, 1)


def test_read_short3_array():
    data = Short3Coord(1, 2, 3).pack() + Short3Coord(-4, 5, -6).pack()
    assert read_short3_array(data) == [Short3Coord(1, 2, 3), Short3Coord(-4, 5, -6)]
    with pytest.raises(ValueError):
        read_short3_array(data[:-1])


def test_point_conversions():
    np.testing.assert_array_equal(short3_to_point(Short3Coord(1, -2, 3)), [1.0, -2.0, 3.0])
    assert point_to_short3([1.9, -1.9, 40000.0]) == Short3Coord(1, -1, 40000 - 0x10000)
