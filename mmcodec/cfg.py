import math
import struct

################################################################################
# ╭────────────────────────────  CONFIG  ────────────────────────────╮
################################################################################

class Cfg:
    ANGLE_UNITS   = 1024             # archive units per quarter turn (π/2)
    TRIG_TOLERANCE = 1e-6            # asin/acos overshoot we clamp silently
    ARROW_HEAD    = 8                # arrow head length per head-size step (px)
    ARROW_SPREAD  = math.pi / 6      # half-angle of the arrow head
    ARROW_UNITS   = 2048             # overlay direction units per half turn
    TEXTURE_EXT   = ".bin"           # raw 16-bit texture dumps

################################################################################
# ╭──────────────────────  BINARY LAYOUTS  ───────────────────────╮
################################################################################

COLOR16  = struct.Struct("<H")       # PackedColor16, bit 15 = transparent
SHORT3   = struct.Struct("<3h")      # Short3Coord x | y | z (int16)

ALPHA_MASK  = 0xFF000000
TRANSPARENT = 0x8000


def _wrap_int16(v: int) -> int:
    """Two's-complement wrap into [-0x8000, 0x7FFF] like a signed 16-bit store."""
    v &= 0xFFFF
    return v - 0x10000 if v & 0x8000 else v

