# pixel_planner/grid.py
from __future__ import annotations

"""
Quantized output grid.

A Grid is a flat row-major arena of palette indices (cell (x, y) lives at
y * width + x) plus the palette entries those indices refer to. It is never
patched: reprocessing builds a new Grid.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
from numpy.typing import NDArray

from .core_types import HexStr, PaletteEntry, U8Image
from .errors import OutOfBounds


@dataclass(frozen=True, eq=False)
class Grid:
    width: int
    height: int
    indices: NDArray[np.int32]  # (width * height,), read-only
    palette_entries: Tuple[PaletteEntry, ...]

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"grid must be at least 1x1, got {self.width}x{self.height}")
        if self.indices.shape != (self.width * self.height,):
            raise ValueError(
                f"indices shape {self.indices.shape} != ({self.width * self.height},)"
            )
        self.indices.setflags(write=False)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index_at(self, x: int, y: int) -> int:
        """Palette index at cell (x, y)."""
        if not self.contains(x, y):
            raise OutOfBounds(f"cell ({x}, {y}) outside {self.width}x{self.height}")
        return int(self.indices[y * self.width + x])

    def cell_at(self, x: int, y: int) -> PaletteEntry:
        return self.palette_entries[self.index_at(x, y)]

    def hex_at(self, x: int, y: int) -> HexStr:
        return self.cell_at(x, y).hex

    def cells(self) -> List[PaletteEntry]:
        """Entries in row-major order."""
        return [self.palette_entries[i] for i in self.indices.tolist()]

    def to_rgb(self) -> U8Image:
        """uint8 [H,W,3] buffer, one pixel per cell."""
        pal_rgb = np.array([e.rgb for e in self.palette_entries], dtype=np.uint8)
        return pal_rgb[self.indices].reshape(self.height, self.width, 3)

    def to_rgba(self) -> NDArray[np.uint8]:
        """uint8 [H,W,4] buffer with opaque alpha, ready for a 1:1 image encoder."""
        out = np.empty((self.height, self.width, 4), dtype=np.uint8)
        out[..., :3] = self.to_rgb()
        out[..., 3] = 255
        return out

    def colour_usage(self) -> List[Tuple[HexStr, str, int]]:
        """
        Simple colour usage report.

        Returns a list of (hex, name, count) sorted by count descending, then by
        palette order.
        """
        counts = np.bincount(self.indices, minlength=len(self.palette_entries))
        report: List[Tuple[HexStr, str, int]] = []
        for j in sorted(np.nonzero(counts)[0].tolist(), key=lambda k: (-int(counts[k]), k)):
            entry = self.palette_entries[j]
            report.append((entry.hex, entry.name, int(counts[j])))
        return report

    def usage_by_hex(self) -> Dict[HexStr, int]:
        return {hx: n for hx, _name, n in self.colour_usage()}


__all__ = ["Grid"]
