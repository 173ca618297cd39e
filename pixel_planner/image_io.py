# pixel_planner/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, ImageDraw, ImageOps, UnidentifiedImageError

from .constants import CELL_OUTLINE_RGBA, CROSSHAIR_RGBA, FRAME_RGBA
from .core_types import NO_CELL, CellXY, U8Image
from .errors import DecodeFailure
from .grid import Grid
from .viewport import overlay_geometry

"""
Image I/O helpers: decode to an sRGB buffer, 1:1 PNG export, and a zoomed
stage preview with the hover overlay drawn in.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


def _convert_to_srgb_rgb(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGB"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGB",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError):
            pass

    return im.convert("RGB")


def load_image_rgb(source: Union[Path, str, bytes]) -> U8Image:
    """
    Decode a path or raw file bytes into a uint8 [H,W,3] sRGB buffer.
    Only the first frame of animated formats is used.
    Raises DecodeFailure when the data is not a readable image.
    """
    fp = io.BytesIO(source) if isinstance(source, bytes) else Path(source)
    try:
        with Image.open(fp) as im0:
            im0.seek(0)
            im = _convert_to_srgb_rgb(im0)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeFailure(f"cannot decode image: {e}") from e
    return np.array(im, dtype=np.uint8)


def save_grid_png(path: Path, grid: Grid) -> Path:
    """Write the grid at 1:1 scale as an opaque RGBA PNG. Returns the written path."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    Image.fromarray(grid.to_rgba()).save(path)
    return path


def render_stage(grid: Grid, zoom: int, hover: CellXY = NO_CELL) -> Image.Image:
    """
    Zoomed stage raster: each cell becomes a zoom x zoom block, with the frame,
    crosshair and cell outline from overlay_geometry() drawn on top.
    """
    base = Image.fromarray(grid.to_rgba())
    stage = base.resize(
        (grid.width * zoom, grid.height * zoom), resample=Image.Resampling.NEAREST
    )
    ov = overlay_geometry(hover, grid.width, grid.height, zoom)
    layer = Image.new("RGBA", stage.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    if ov.frame is not None:
        x, y, w, h = ov.frame
        draw.rectangle([int(x), int(y), int(x + w), int(y + h)], outline=FRAME_RGBA)
    if ov.crosshair_v is not None and ov.crosshair_h is not None:
        vx = int(ov.crosshair_v[0])
        hy = int(ov.crosshair_h[1])
        draw.line([(vx, 0), (vx, stage.height - 1)], fill=CROSSHAIR_RGBA)
        draw.line([(0, hy), (stage.width - 1, hy)], fill=CROSSHAIR_RGBA)
    if ov.cell_outline is not None:
        x, y, w, h = ov.cell_outline
        draw.rectangle([int(x), int(y), int(x + w), int(y + h)], outline=CELL_OUTLINE_RGBA)

    return Image.alpha_composite(stage, layer)


def save_stage_png(
    path: Path, grid: Grid, zoom: int, hover: Optional[CellXY] = None
) -> Path:
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    render_stage(grid, zoom, hover if hover is not None else NO_CELL).save(path)
    return path


__all__ = [
    "load_image_rgb",
    "save_grid_png",
    "render_stage",
    "save_stage_png",
]
