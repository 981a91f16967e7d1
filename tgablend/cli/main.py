#!/usr/bin/env python3
"""
tgablend command line.
Thin wrapper: parses arguments, configures logging, calls the services.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..errors import TgaBlendError
from ..models.blend_mode import BlendMode, Channel
from ..pipeline.batch_tasks import EXAMPLES_DIR, INPUT_DIR, OUTPUT_DIR, run_batch
from ..pipeline.blend_files import blend_files
from ..pipeline.gallery_blend import blend_gallery
from ..services.channel_adjustment_service import ChannelAdjustmentService
from ..services.channel_service import ChannelService
from ..services.image_service import ImageService

logger = logging.getLogger("tgablend")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else os.getenv("TGABLEND_LOG_LEVEL", "INFO").upper()
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    logging.getLogger("tgablend").setLevel(level)


def _channel(value: str) -> Channel:
    try:
        return Channel.parse(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


# ─── Sub-command handlers ──────────────────────────────────────────
def _cmd_blend(args, image_service: ImageService) -> int:
    blend_files(args.mode, args.base, args.overlay, args.output, image_service=image_service)
    return 0


def _cmd_add_channel(args, image_service: ImageService) -> int:
    image = image_service.load(args.input)
    ChannelAdjustmentService.add_to_channel(image, args.channel, args.delta)
    image_service.save(image, args.output)
    return 0


def _cmd_scale_channel(args, image_service: ImageService) -> int:
    image = image_service.load(args.input)
    ChannelAdjustmentService.scale_channel(image, args.channel, args.factor)
    image_service.save(image, args.output)
    return 0


def _cmd_split(args, image_service: ImageService) -> int:
    red, green, blue = ChannelService.split_rgb(image_service.load(args.input))
    for suffix, image in (("r", red), ("g", green), ("b", blue)):
        path = image_service.save(image, f"{args.prefix}_{suffix}.tga")
        logger.info("Wrote %s", path)
    return 0


def _cmd_combine(args, image_service: ImageService) -> int:
    combined = ChannelService.combine_rgb(
        image_service.load(args.red),
        image_service.load(args.green),
        image_service.load(args.blue),
    )
    image_service.save(combined, args.output)
    return 0


def _cmd_rotate(args, image_service: ImageService) -> int:
    image_service.save(ChannelService.rotate180(image_service.load(args.input)), args.output)
    return 0


def _cmd_grayscale(args, image_service: ImageService) -> int:
    image_service.save(image_service.to_grayscale(image_service.load(args.input)), args.output)
    return 0


def _cmd_compare(args, image_service: ImageService) -> int:
    diffs = image_service.count_differences(image_service.load(args.first), image_service.load(args.second))
    print(f"{diffs} differing samples")
    return 0 if diffs == 0 else 1


def _cmd_preview(args, image_service: ImageService) -> int:
    image_service.export_preview(image_service.load(args.input), args.output)
    return 0


def _cmd_batch(args, image_service: ImageService) -> int:
    results = run_batch(
        args.input_dir,
        args.output_dir,
        examples_dir=args.examples_dir,
        only=args.task or None,
        image_service=image_service,
        progress=not args.no_progress,
    )
    failed = [r.number for r in results if not r.ok]
    print(f"{len(results) - len(failed)}/{len(results)} tasks passed")
    if failed:
        print(f"Failed: {', '.join(map(str, failed))}")
    return 0 if not failed else 1


def _cmd_gallery(args, image_service: ImageService) -> int:
    written = blend_gallery(
        args.folder,
        args.overlay,
        args.mode,
        args.output_dir,
        recursive=args.recursive,
        image_service=image_service,
        progress=not args.no_progress,
    )
    print(f"Wrote {len(written)} images to {args.output_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tgablend",
        description="Blend and transform uncompressed 24-bit TGA images.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="command", metavar="command")
    sub.required = True

    p = sub.add_parser("blend", help="blend OVERLAY onto BASE")
    p.add_argument("mode", type=BlendMode.from_name, metavar="mode",
                   help=f"one of: {', '.join(BlendMode.names())}")
    p.add_argument("base", type=Path)
    p.add_argument("overlay", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_blend)

    p = sub.add_parser("add-channel", help="add DELTA to one channel (saturating)")
    p.add_argument("channel", type=_channel, help="red/green/blue or 2/1/0")
    p.add_argument("delta", type=int)
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_add_channel)

    p = sub.add_parser("scale-channel", help="multiply one channel by FACTOR (saturating)")
    p.add_argument("channel", type=_channel, help="red/green/blue or 2/1/0")
    p.add_argument("factor", type=float)
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_scale_channel)

    p = sub.add_parser("split", help="write PREFIX_r/_g/_b.tga gray images")
    p.add_argument("input", type=Path)
    p.add_argument("prefix")
    p.set_defaults(handler=_cmd_split)

    p = sub.add_parser("combine", help="build one image from three channel sources")
    p.add_argument("red", type=Path)
    p.add_argument("green", type=Path)
    p.add_argument("blue", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_combine)

    p = sub.add_parser("rotate", help="rotate by 180 degrees")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_rotate)

    p = sub.add_parser("grayscale", help="luminance copied into all channels")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_grayscale)

    p = sub.add_parser("compare", help="count differing samples; exit 1 if any")
    p.add_argument("first", type=Path)
    p.add_argument("second", type=Path)
    p.set_defaults(handler=_cmd_compare)

    p = sub.add_parser("preview", help="export a PNG/JPEG/BMP for viewing")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(handler=_cmd_preview)

    p = sub.add_parser("batch", help="run the fixed task table (part1..part10)")
    p.add_argument("--input-dir", type=Path, default=INPUT_DIR)
    p.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    p.add_argument("--examples-dir", type=Path, default=EXAMPLES_DIR)
    p.add_argument("--task", type=int, action="append", help="run only this task (repeatable)")
    p.add_argument("--no-progress", action="store_true")
    p.set_defaults(handler=_cmd_batch)

    p = sub.add_parser("gallery", help="blend OVERLAY onto every TGA in FOLDER")
    p.add_argument("mode", type=BlendMode.from_name, metavar="mode",
                   help=f"one of: {', '.join(BlendMode.names())}")
    p.add_argument("folder", type=Path)
    p.add_argument("overlay", type=Path)
    p.add_argument("output_dir", type=Path, nargs="?", default=OUTPUT_DIR)
    p.add_argument("--recursive", action="store_true")
    p.add_argument("--no-progress", action="store_true")
    p.set_defaults(handler=_cmd_gallery)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return args.handler(args, ImageService())
    except (TgaBlendError, ValueError) as err:
        logger.error("ERROR: %s", err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
