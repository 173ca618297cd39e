# pixel_planner/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
CellXY = Tuple[int, int]
WorldXY = Tuple[int, int]

U8Image = NDArray[np.uint8]  # (H, W, 3)
Lab = NDArray[np.float64]  # (..., 3) CIE Lab
XYZ = NDArray[np.float64]  # (..., 3) CIE XYZ

# Hover sentinel for "no cell under the pointer"
NO_CELL: CellXY = (-1, -1)

# Value objects


@dataclass(frozen=True)
class PaletteEntry:
    """Palette entry with its precomputed Lab row."""

    rgb: RGBTuple
    name: str
    lab: Lab = field(compare=False)  # shape (3,), derived from rgb

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.rgb)


# Small helpers


def round_half_up(x: float) -> int:
    """Round to nearest integer with halves going up (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(x + 0.5))


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to uppercase hex string '#RRGGBB'."""
    return f"#{rgb[0]:02X}{rgb[1]:02X}{rgb[2]:02X}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive, '#' optional) into an RGB tuple."""
    s = hex_str.strip().lower().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


__all__ = [
    "RGBTuple",
    "HexStr",
    "CellXY",
    "WorldXY",
    "U8Image",
    "Lab",
    "XYZ",
    "NO_CELL",
    "PaletteEntry",
    "round_half_up",
    "rgb_to_hex",
    "hex_to_rgb",
]
