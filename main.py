import argparse
import logging
import sys
from pathlib import Path
import numpy as np
from tqdm import tqdm

from mmcodec.cfg import Cfg
from mmcodec.color_utils import (InvalidAlphaError, decode16, encode16, archive_to_argb,
                                 argb_to_archive, texture_to_image, image_to_texture)
from mmcodec.rotation_utils import Short3Coord, decode, encode


def _int(s: str) -> int:
    return int(s, 0)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("mmcodec", description="Archive colour / rotation codecs")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("color16", help="16-bit packed colour -> ARGB")
    s.add_argument("word", type=_int)
    s = sub.add_parser("argb16", help="ARGB -> 16-bit packed colour")
    s.add_argument("argb", type=_int)
    s = sub.add_parser("archive", help="archive ABGR word -> ARGB")
    s.add_argument("word", type=_int)
    s.add_argument("--reverse", action="store_true", help="ARGB -> archive ABGR instead")

    s = sub.add_parser("rot-decode", help="compressed rotation -> matrix")
    s.add_argument("xyz", type=_int, nargs=3)
    s = sub.add_parser("rot-encode", help="row-major 3×3 matrix -> compressed rotation")
    s.add_argument("m", type=float, nargs=9)

    s = sub.add_parser("texture", help="raw 16-bit texture dump(s) <-> RGBA png")
    s.add_argument("--src", required=True, help="file or folder of dumps (pngs with --encode)")
    s.add_argument("--out", required=True, help="output directory")
    s.add_argument("--width", type=int, default=0, help="texture width in pixels")
    s.add_argument("--encode", action="store_true", help="png -> raw dump")
    return p


def _texture(args, p: argparse.ArgumentParser) -> None:
    src, out_dir = Path(args.src), Path(args.out)
    ext = ".png" if args.encode else Cfg.TEXTURE_EXT
    files = sorted(src.glob(f"*{ext}")) if src.is_dir() else [src]
    if not files:
        p.error(f"no {ext} files found in {src}")
    if not args.encode and args.width <= 0:
        p.error("--width is required when decoding")
    out_dir.mkdir(parents=True, exist_ok=True)

    for f in tqdm(files):
        try:
            if args.encode:
                w, h = image_to_texture(f, out_dir / (f.stem + Cfg.TEXTURE_EXT))
            else:
                w, h = texture_to_image(f, args.width, out_dir / (f.stem + ".png"))
        except ValueError as e:
            p.error(f"{f}: {e}")
        print(f"[texture] {f.name}: {w}x{h}")


def main(argv=None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "color16":
        print(f"0x{decode16(args.word):08X}")
    elif args.cmd == "argb16":
        try:
            print(f"0x{encode16(args.argb):04X}")
        except InvalidAlphaError as e:
            p.error(str(e))
    elif args.cmd == "archive":
        f = argb_to_archive if args.reverse else archive_to_argb
        print(f"0x{f(args.word):08X}")
    elif args.cmd == "rot-decode":
        m = decode(Short3Coord(*args.xyz))
        print(np.array2string(m, precision=6, suppress_small=True))
    elif args.cmd == "rot-encode":
        c = encode(np.asarray(args.m, np.float64).reshape(3, 3))
        print(f"{c.x} {c.y} {c.z}")
    elif args.cmd == "texture":
        _texture(args, p)
    return 0


if __name__=="__main__":
    """
    Usage: python main.py texture --src dumps/ --out pngs/ --width 64
           python main.py rot-decode 0 512 -256
    """
    sys.exit(main())
