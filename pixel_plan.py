#!/usr/bin/env python3
"""
pixel_plan.py
Pixelate an image onto a palette grid for planning wplace / r/place artwork.

Usage:
  python pixel_plan.py INPUT [OUTPUT] --across N --palette [wplace|rplace]
                       --preset [base|full] --disable HEX ... --origin X Y
                       --zoom Z --code SHARECODE --probe CX CY --preview PATH
                       --store PATH | --no-store --lock | --unlock --debug

Input:
  Any Pillow-readable image. EXIF orientation and ICC profiles are honoured.

Output:
  PNG at 1:1 (one pixel per grid cell). If OUTPUT is omitted, writes
  <stem>_plan.png next to INPUT. Prints the colour usage list and a share code
  carrying pixels-across, origin and zoom.

Notes:
  Settings (pixels across, origin, zoom, palette flags, palette lock) persist
  in the settings store between runs; flags given on the command line update it.
  --probe reports the world coordinate and colour of a cell, as hovering it on
  the stage would; --preview renders the zoomed stage with the crosshair.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from pixel_planner.constants import DEFAULT_PALETTE_NAME, PIXELS_ACROSS_MAX, PIXELS_ACROSS_MIN
from pixel_planner.errors import DecodeError, DecodeFailure, PaletteLocked
from pixel_planner.image_io import save_grid_png, save_stage_png
from pixel_planner.palette_data import PALETTES, build_palette, preset_indices
from pixel_planner.session import PlannerSession
from pixel_planner.settings_store import SettingsStore
from pixel_planner.utils import (
    debug_log,
    error,
    format_seconds_compact,
    log,
    print_banner,
    print_config_line,
    warn,
)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pixel_plan",
        description="Pixelate an image onto a palette grid for collaborative pixel-art planning.",
    )
    parser.add_argument("src", type=Path, help="Input image")
    parser.add_argument("out", type=Path, nargs="?", default=None, help="Output PNG (optional)")
    parser.add_argument(
        "--across",
        type=int,
        default=None,
        help=f"Grid columns ({PIXELS_ACROSS_MIN}..{PIXELS_ACROSS_MAX}). Omit to keep the stored value.",
    )
    parser.add_argument(
        "--palette", choices=sorted(PALETTES), default=DEFAULT_PALETTE_NAME, help="Palette to match against."
    )
    parser.add_argument(
        "--preset",
        choices=["base", "full"],
        default=None,
        help='Enable a palette preset: "base" (free colours) or "full".',
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="HEX",
        help="Disable a palette colour by hex (repeatable).",
    )
    parser.add_argument(
        "--origin", type=int, nargs=2, metavar=("X", "Y"), default=None, help="World coordinate of cell (0,0)."
    )
    parser.add_argument("--zoom", type=int, default=None, help="Screen pixels per cell (1..64).")
    parser.add_argument("--code", default=None, help="Import a share code before processing.")
    parser.add_argument(
        "--probe", type=int, nargs=2, metavar=("CX", "CY"), default=None, help="Report a cell's world coordinate and colour."
    )
    parser.add_argument("--preview", type=Path, default=None, help="Write a zoomed stage preview PNG.")
    store_grp = parser.add_mutually_exclusive_group()
    store_grp.add_argument("--store", type=Path, default=None, help="Settings store file.")
    store_grp.add_argument("--no-store", action="store_true", help="Do not read or write stored settings.")
    lock_grp = parser.add_mutually_exclusive_group()
    lock_grp.add_argument("--lock", dest="lock", action="store_const", const=True, default=None, help="Lock the palette.")
    lock_grp.add_argument("--unlock", dest="lock", action="store_const", const=False, help="Unlock the palette.")
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def _apply_palette_args(session: PlannerSession, args: argparse.Namespace) -> None:
    if args.preset is None and not args.disable:
        return
    try:
        if args.preset is not None:
            session.apply_palette_preset(preset_indices(args.palette, args.preset))
        for hx in args.disable:
            try:
                idx = session.palette.index_of_hex(hx)
            except KeyError:
                warn(f"{hx} is not in the {args.palette} palette; ignored")
                continue
            session.set_colour_enabled(idx, False)
    except PaletteLocked:
        warn("palette is locked; colour changes ignored (use --unlock)")


def run(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()
    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    store = None if args.no_store else SettingsStore(args.store)
    palette = build_palette(args.palette)
    session = PlannerSession(palette, store=store, debug=args.debug)

    if args.code is not None:
        try:
            session.import_settings(args.code)
        except DecodeError as e:
            error(f"invalid share code: {e}")
            return 2
    if args.lock is not None:
        session.set_palette_locked(args.lock)
    if args.across is not None:
        session.set_pixels_across(args.across)
    if args.origin is not None:
        session.set_origin(*args.origin)
    if args.zoom is not None:
        session.set_zoom(args.zoom)
    _apply_palette_args(session, args)

    print_banner(src.name)
    print_config_line(
        "grid",
        [
            ("Pixels across", session.pixels_across),
            ("Zoom", session.view.zoom),
            ("Origin", f"{session.origin[0]},{session.origin[1]}"),
            ("Palette", args.palette),
            ("Active", len(palette.active_pool())),
            ("Locked", session.palette_locked),
        ],
        debug=False,
    )

    try:
        session.load_source(src)
    except DecodeFailure as e:
        error(str(e))
        return 2

    grid = session.reprocess()
    if grid is None:
        error("image has no pixels")
        return 2

    out_path = args.out or src.with_name(f"{src.stem}_plan.png")
    out_path = save_grid_png(out_path, grid)
    log(f"Wrote {out_path.name} | size={grid.width}x{grid.height}")
    log("Colours used:")
    for hex_code, name, count in grid.colour_usage():
        log(f"  {hex_code}  {name}: {count:,}")
    log(f"Total pixels: {grid.width * grid.height:,}")

    if args.probe is not None:
        cx, cy = args.probe
        if not grid.contains(cx, cy):
            warn(f"cell ({cx}, {cy}) is outside the {grid.width}x{grid.height} grid")
        else:
            # hover the centre of the cell, as the pointer would
            sx, sy = session.stage_origin()
            zoom = session.view.zoom
            session.on_pointer_move(sx + (cx + 0.5) * zoom, sy + (cy + 0.5) * zoom)
            readout = session.hover_readout()
            if readout is not None:
                wx, wy, hex_code = readout
                log(f"Cell ({cx}, {cy}) -> world ({wx}, {wy})  {hex_code}")

    if args.preview is not None:
        preview = save_stage_png(args.preview, grid, session.view.zoom, session.hover)
        log(f"Wrote preview {preview.name} | zoom={session.view.zoom}x")

    log(f"Share code: {session.export_settings()}")
    if args.debug:
        debug_log(f"Total {format_seconds_compact(time.perf_counter() - t_start)}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    sys.exit(run(parse_cli_args(argv)))


if __name__ == "__main__":
    main()
