# pixel_planner/quantizer.py
from __future__ import annotations

"""
Quantizer: downsample a source buffer and snap every cell to the palette.

Exports:
  round_half_up(x) -> int
  target_dimensions(source_width, source_height, target_columns) -> (cols, rows)
  as_rgb_buffer(source, source_width, source_height) -> U8Image
  resample_nearest(rgb, cols, rows) -> U8Image
  nearest_in_pool(src_lab, pal_lab, pool) -> int32 [N]
  quantize(source, source_width, source_height, target_columns, palette) -> Grid
  Quantizer: keeps the last produced Grid across zero-size no-op calls.

Matching:
  Each cell is converted to Lab once and compared against every entry of the
  palette's active pool by Euclidean Lab distance. The minimum is taken with
  strict less-than, so the lowest palette index wins ties.
"""

import time
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from .colour_convert import rgb_to_lab
from .core_types import Lab, U8Image, round_half_up
from .grid import Grid
from .palette import Palette
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string

SourceBuffer = Union[np.ndarray, Sequence[int], bytes, bytearray, memoryview]

# Cells per distance block; bounds the [N,P,3] temporary.
MATCH_CHUNK = 16_384


def target_dimensions(
    source_width: int, source_height: int, target_columns: float
) -> Tuple[int, int]:
    """
    Grid size for a source and requested column count.
    The row count comes from the source aspect ratio, not from the rounded
    column count.
    """
    aspect = source_width / float(source_height)
    cols = max(1, round_half_up(target_columns))
    rows = max(1, round_half_up(target_columns / aspect))
    return cols, rows


def as_rgb_buffer(
    source: SourceBuffer, source_width: int, source_height: int
) -> U8Image:
    """
    Normalise a source buffer to uint8 [H,W,3].

    Accepts an (H,W,3) or (H,W,4) array, or a flat sequence of W*H*3 or W*H*4
    samples in row-major order. Alpha is dropped.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(source, dtype=np.uint8)
    else:
        arr = np.asarray(source)
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)

    n_px = source_width * source_height
    if arr.ndim == 1:
        if arr.size == n_px * 3:
            arr = arr.reshape(source_height, source_width, 3)
        elif arr.size == n_px * 4:
            arr = arr.reshape(source_height, source_width, 4)
        else:
            raise ValueError(
                f"flat buffer of {arr.size} samples does not match {source_width}x{source_height}"
            )
    if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
        raise ValueError(f"expected (H,W,3) or (H,W,4) buffer, got shape {arr.shape}")
    if arr.shape[:2] != (source_height, source_width):
        raise ValueError(
            f"buffer shape {arr.shape[:2]} does not match {source_height}x{source_width} (HxW)"
        )
    return np.ascontiguousarray(arr[..., :3])


def resample_nearest(rgb: U8Image, cols: int, rows: int) -> U8Image:
    """Nearest-neighbour resize to (rows, cols). No smoothing."""
    if rgb.shape[0] == rows and rgb.shape[1] == cols:
        return rgb
    im = Image.fromarray(rgb)
    im2 = im.resize((cols, rows), resample=Image.Resampling.NEAREST)
    return np.array(im2, dtype=np.uint8)


def nearest_in_pool(
    src_lab: Lab, pal_lab: Lab, pool: Sequence[int]
) -> NDArray[np.int32]:
    """
    For each source Lab row, the palette index (from pool) at minimum Lab distance.
    Ties go to the earliest pool member; pool is expected in ascending order.
    """
    pool_idx = np.asarray(pool, dtype=np.int32)
    cand = pal_lab[pool_idx]
    flat = src_lab.reshape(-1, 3)
    out = np.empty(flat.shape[0], dtype=np.int32)
    for start in range(0, flat.shape[0], MATCH_CHUNK):
        block = flat[start : start + MATCH_CHUNK]
        diff = block[:, None, :] - cand[None, :, :]
        dist2 = np.sum(diff * diff, axis=2)
        # argmin returns the first minimum
        out[start : start + MATCH_CHUNK] = pool_idx[np.argmin(dist2, axis=1)]
    return out


def quantize(
    source: SourceBuffer,
    source_width: int,
    source_height: int,
    target_columns: float,
    palette: Palette,
    debug: bool = False,
) -> Grid:
    """
    Downsample the source to the target grid and map each cell to the nearest
    active palette entry. Source dimensions must be non-zero.
    """
    t0 = time.perf_counter()
    rgb = as_rgb_buffer(source, source_width, source_height)
    cols, rows = target_dimensions(source_width, source_height, target_columns)
    small = resample_nearest(rgb, cols, rows)

    pool = palette.active_pool()
    cell_lab = rgb_to_lab(small).reshape(-1, 3)
    indices = nearest_in_pool(cell_lab, palette.lab, pool)
    grid = Grid(cols, rows, indices, palette.entries)

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Source", f"{source_width}x{source_height}"),
                    ("Grid", f"{cols}x{rows}"),
                    ("Pool", len(pool)),
                    ("Time", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )
    return grid


class Quantizer:
    """
    Stateful front for quantize(): holds the last Grid so that transient
    zero-size sources (mid-load) leave it untouched.
    """

    def __init__(self, palette: Palette, debug: bool = False) -> None:
        self.palette = palette
        self.debug = debug
        self.grid: Optional[Grid] = None

    def process(
        self,
        source: SourceBuffer,
        source_width: int,
        source_height: int,
        target_columns: float,
    ) -> Optional[Grid]:
        if source_width <= 0 or source_height <= 0:
            if self.debug:
                debug_log(
                    f"skip quantize: source is {source_width}x{source_height}, keeping previous grid"
                )
            return self.grid
        self.grid = quantize(
            source,
            source_width,
            source_height,
            target_columns,
            self.palette,
            debug=self.debug,
        )
        return self.grid


__all__ = [
    "MATCH_CHUNK",
    "round_half_up",
    "target_dimensions",
    "as_rgb_buffer",
    "resample_nearest",
    "nearest_in_pool",
    "quantize",
    "Quantizer",
]
