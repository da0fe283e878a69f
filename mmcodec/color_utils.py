from __future__ import annotations
import logging
from pathlib import Path
from typing import Tuple, Union
import imageio
import numpy as np

from mmcodec.cfg import COLOR16, ALPHA_MASK, TRANSPARENT

logger = logging.getLogger(__name__)


class InvalidAlphaError(ValueError):
    """Partially transparent colour; the 16-bit format has a 1-bit alpha."""

################################################################################
# ╭──────────────────  SCALAR CODEC  ─────────────────────────────╮
################################################################################

#  16-bit word:  {t}{bbbbb}{ggggg}{rrrrr}

def decode16(value: int) -> int:
    """PackedColor16 -> Argb32.  Low 3 bits of every channel stay zero."""
    value &= 0xFFFF
    alpha = 0 if value & TRANSPARENT else ALPHA_MASK
    r = (value << 3) & 0xF8
    g = (value >> 2) & 0xF8
    b = (value >> 7) & 0xF8
    return alpha | (r << 16) | (g << 8) | b


def encode16(argb: int) -> int:
    """Argb32 -> PackedColor16 (unsigned).  Raises InvalidAlphaError for
    any alpha other than 0x00 / 0xFF."""
    argb &= 0xFFFFFFFF
    a = argb & ALPHA_MASK
    if a == ALPHA_MASK:
        t = 0
    elif a == 0:
        t = TRANSPARENT
    else:
        raise InvalidAlphaError(f"can't pack partially opaque colour 0x{argb:08X}")

    r = (argb >> 19) & 0x1F
    g = (argb >> 11) & 0x1F
    b = (argb >> 3) & 0x1F
    return r | (g << 5) | (b << 10) | t


def archive_to_argb(abgr: int) -> int:
    """Archive ABGR word -> ARGB pixel (swap red/blue)."""
    abgr &= 0xFFFFFFFF
    return (abgr & 0xFF00FF00) | ((abgr >> 16) & 0xFF) | ((abgr & 0xFF) << 16)


def argb_to_archive(argb: int) -> int:
    """ARGB pixel -> archive ABGR word.  The swap is its own inverse."""
    return archive_to_argb(argb)


def argb_to_rgba(argb: int) -> Tuple[int, int, int, int]:
    return (argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF, (argb >> 24) & 0xFF

################################################################################
# ╭──────────────────  BUFFERS & TEXTURES  ───────────────────────╮
################################################################################

def decode16_array(words: np.ndarray) -> np.ndarray:
    """Vectorised decode16: [...] 16-bit words -> [...,4] uint8 RGBA."""
    w = np.asarray(words).astype(np.int64) & 0xFFFF
    rgba = np.empty(w.shape + (4,), np.uint8)
    rgba[..., 0] = (w << 3) & 0xF8
    rgba[..., 1] = (w >> 2) & 0xF8
    rgba[..., 2] = (w >> 7) & 0xF8
    rgba[..., 3] = np.where(w & TRANSPARENT, 0, 0xFF)
    return rgba


def encode16_array(rgba: np.ndarray) -> np.ndarray:
    """Vectorised encode16: [...,4] uint8 RGBA -> [...] uint16 words."""
    rgba = np.asarray(rgba)
    if rgba.shape[-1] != 4:
        raise ValueError(f"expected RGBA pixels, got shape {rgba.shape}")
    px = rgba.astype(np.uint16)
    a = px[..., 3]
    bad = (a != 0) & (a != 0xFF)
    if np.any(bad):
        first = tuple(int(i) for i in np.argwhere(bad)[0])
        raise InvalidAlphaError(f"{int(bad.sum())} partially opaque pixel(s), first at {first}")

    words = (px[..., 0] >> 3) | ((px[..., 1] >> 3) << 5) | ((px[..., 2] >> 3) << 10)
    words |= np.where(a == 0, TRANSPARENT, 0).astype(np.uint16)
    return words.astype(np.uint16)


def read_color16_buffer(data: bytes) -> np.ndarray:
    if len(data) % COLOR16.size:
        raise ValueError(f"colour buffer length {len(data)} is not a multiple of {COLOR16.size}")
    return np.frombuffer(data, dtype="<u2").astype(np.uint16)


def write_color16_buffer(words: np.ndarray) -> bytes:
    return np.asarray(words, dtype=np.uint16).astype("<u2").tobytes()


def texture_to_image(src: Union[str, Path], width: int, out: Union[str, Path]) -> Tuple[int, int]:
    """Decode a raw 16-bit texture dump into an RGBA png; returns (W,H)."""
    words = read_color16_buffer(Path(src).read_bytes())
    if width <= 0 or words.size % width:
        raise ValueError(f"{words.size} pixels do not fill rows of width {width}")
    h = words.size // width
    rgba = decode16_array(words.reshape(h, width))
    imageio.imwrite(out, rgba)
    logger.debug("wrote %s (%dx%d)", out, width, h)
    return width, h


def image_to_texture(src: Union[str, Path], out: Union[str, Path]) -> Tuple[int, int]:
    """Encode an RGBA (or RGB, taken as opaque) image into a raw 16-bit dump."""
    img = np.asarray(imageio.v2.imread(src))
    if img.ndim != 3 or img.shape[-1] not in (3, 4):
        raise ValueError(f"unsupported image shape {img.shape}")
    if img.shape[-1] == 3:
        img = np.concatenate([img, np.full(img.shape[:2] + (1,), 0xFF, img.dtype)], axis=-1)
    Path(out).write_bytes(write_color16_buffer(encode16_array(img)))
    h, w = img.shape[:2]
    logger.debug("wrote %s (%dx%d)", out, w, h)
    return w, h
