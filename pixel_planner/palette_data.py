# pixel_planner/palette_data.py
from __future__ import annotations

"""
Palette definitions and builders.

Exports:
  PALETTES: dict[str, list[tuple[str, str]]]  # name -> [(hex, colour name), ...]
  BASE_SETS: dict[str, frozenset[str]]         # name -> hexes of the "base" preset
  WPLACE_PALETTE, RPLACE_PALETTE
  build_entries(hex_name_pairs) -> list[PaletteEntry]
  build_palette(name="wplace") -> Palette
  preset_indices(name, preset) -> frozenset[int]
"""

from typing import Dict, FrozenSet, List, Tuple

import numpy as np

from .colour_convert import rgb_to_lab
from .constants import DEFAULT_PALETTE_NAME
from .core_types import PaletteEntry, RGBTuple, hex_to_rgb, rgb_to_hex
from .palette import Palette


WPLACE_PALETTE: List[Tuple[str, str]] = [
    ("#ed1c24", "Red"),
    ("#d18078", "Peach"),
    ("#fa8072", "Light Red"),
    ("#9b5249", "Dark Peach"),
    ("#fab6a4", "Light Peach"),
    ("#e45c1a", "Dark Orange"),
    ("#684634", "Dark Brown"),
    ("#ffc5a5", "Light Beige"),
    ("#d18051", "Dark Beige"),
    ("#ff7f27", "Orange"),
    ("#7b6352", "Dark Tan"),
    ("#f8b277", "Beige"),
    ("#d6b594", "Light Tan"),
    ("#9c846b", "Tan"),
    ("#dba463", "Light Brown"),
    ("#95682a", "Brown"),
    ("#f6aa09", "Gold"),
    ("#9c8431", "Dark Goldenrod"),
    ("#6d643f", "Dark Stone"),
    ("#948c6b", "Stone"),
    ("#cdc59e", "Light Stone"),
    ("#c5ad31", "Goldenrod"),
    ("#f9dd3b", "Yellow"),
    ("#e8d45f", "Light Goldenrod"),
    ("#fffabc", "Light Yellow"),
    ("#4a6b3a", "Dark Olive"),
    ("#87ff5e", "Light Green"),
    ("#5a944a", "Olive"),
    ("#84c573", "Light Olive"),
    ("#13e67b", "Green"),
    ("#0eb968", "Dark Green"),
    ("#13e1be", "Light Teal"),
    ("#0c816e", "Dark Teal"),
    ("#bbfaf2", "Light Cyan"),
    ("#10aea6", "Teal"),
    ("#60f7f2", "Cyan"),
    ("#0f799f", "Dark Cyan"),
    ("#7dc7ff", "Light Blue"),
    ("#4093e4", "Blue"),
    ("#333941", "Dark Slate"),
    ("#28509e", "Dark Blue"),
    ("#6d758d", "Slate"),
    ("#99b1fb", "Light Indigo"),
    ("#b3b9d1", "Light Slate"),
    ("#b5aef1", "Light Slate Blue"),
    ("#7a71c4", "Slate Blue"),
    ("#4a4284", "Dark Slate Blue"),
    ("#6b50f6", "Indigo"),
    ("#4d31b8", "Dark Indigo"),
    ("#e09ff9", "Light Purple"),
    ("#780c99", "Dark Purple"),
    ("#aa38b9", "Purple"),
    ("#cb007a", "Dark Pink"),
    ("#ec1f80", "Pink"),
    ("#f38da9", "Light Pink"),
    ("#600018", "Deep Red"),
    ("#a50e1e", "Dark Red"),
    ("#000000", "Black"),
    ("#3c3c3c", "Dark Gray"),
    ("#787878", "Gray"),
    ("#aaaaaa", "Medium Gray"),
    ("#d2d2d2", "Light Gray"),
    ("#ffffff", "White"),
]

# Colours available to every wplace account without unlocking.
WPLACE_FREE_HEXES: FrozenSet[str] = frozenset(
    {
        "#000000",
        "#3c3c3c",
        "#787878",
        "#d2d2d2",
        "#ffffff",
        "#600018",
        "#ed1c24",
        "#ff7f27",
        "#f6aa09",
        "#f9dd3b",
        "#fffabc",
        "#0eb968",
        "#13e67b",
        "#87ff5e",
        "#0c816e",
        "#10aea6",
        "#13e1be",
        "#28509e",
        "#4093e4",
        "#60f7f2",
        "#6b50f6",
        "#99b1fb",
        "#780c99",
        "#aa38b9",
        "#e09ff9",
        "#cb007a",
        "#ec1f80",
        "#f38da9",
        "#684634",
        "#95682a",
        "#f8b277",
    }
)

# r/place 2022 style sample set.
RPLACE_PALETTE: List[Tuple[str, str]] = [
    ("#000000", "Black"),
    ("#1a1a1a", "Near Black"),
    ("#545454", "Dark Gray"),
    ("#6d6d6d", "Dim Gray"),
    ("#898989", "Gray"),
    ("#bfbfbf", "Light Gray"),
    ("#ffffff", "White"),
    ("#6d001a", "Burgundy"),
    ("#be0039", "Dark Red"),
    ("#ff4500", "Red"),
    ("#ffa800", "Orange"),
    ("#ffd635", "Yellow"),
    ("#fff8b8", "Pale Yellow"),
    ("#00a368", "Dark Green"),
    ("#00cc78", "Green"),
    ("#7eed56", "Light Green"),
    ("#00756f", "Dark Teal"),
    ("#009eaa", "Teal"),
    ("#00ccc0", "Light Teal"),
    ("#2450a4", "Dark Blue"),
    ("#3690ea", "Blue"),
    ("#51e9f4", "Light Blue"),
    ("#493ac1", "Indigo"),
    ("#6a5cff", "Periwinkle"),
    ("#94b3ff", "Lavender"),
    ("#811e9f", "Dark Purple"),
    ("#b44ac0", "Purple"),
    ("#e4abff", "Pale Purple"),
    ("#de107f", "Magenta"),
    ("#ff99aa", "Pink"),
    ("#6d482f", "Dark Brown"),
    ("#9c6926", "Brown"),
    ("#ffb470", "Beige"),
]

PALETTES: Dict[str, List[Tuple[str, str]]] = {
    "wplace": WPLACE_PALETTE,
    "rplace": RPLACE_PALETTE,
}

BASE_SETS: Dict[str, FrozenSet[str]] = {
    "wplace": WPLACE_FREE_HEXES,
    "rplace": frozenset(hx for hx, _ in RPLACE_PALETTE),
}


def build_entries(hex_name_pairs: List[Tuple[str, str]]) -> List[PaletteEntry]:
    """
    Convert a list of (hex, name) into PaletteEntry rows with precomputed Lab.
    Lab rows are computed in one vectorised pass.
    """
    rgbs_u8 = np.array([hex_to_rgb(hx) for hx, _ in hex_name_pairs], dtype=np.uint8)
    pal_lab = rgb_to_lab(rgbs_u8).reshape(-1, 3)

    entries: List[PaletteEntry] = []
    for i, (_hx, name) in enumerate(hex_name_pairs):
        rgb_tuple: RGBTuple = (
            int(rgbs_u8[i, 0]),
            int(rgbs_u8[i, 1]),
            int(rgbs_u8[i, 2]),
        )
        lab_row = pal_lab[i].copy()
        lab_row.setflags(write=False)
        entries.append(PaletteEntry(rgb=rgb_tuple, name=name, lab=lab_row))
    return entries


def build_palette(name: str = DEFAULT_PALETTE_NAME) -> Palette:
    """Build a fresh Palette (all entries enabled) from a named definition."""
    try:
        pairs = PALETTES[name]
    except KeyError:
        raise ValueError(
            f"unknown palette {name!r}; expected one of {sorted(PALETTES)}"
        ) from None
    return Palette(build_entries(pairs))


def preset_indices(name: str, preset: str) -> FrozenSet[int]:
    """
    Indices enabled by a preset of a named palette.
      "full": every entry
      "base": entries listed in BASE_SETS[name]
    """
    pairs = PALETTES[name]
    if preset == "full":
        return frozenset(range(len(pairs)))
    if preset == "base":
        base = {rgb_to_hex(hex_to_rgb(hx)) for hx in BASE_SETS[name]}
        return frozenset(
            i for i, (hx, _) in enumerate(pairs) if rgb_to_hex(hex_to_rgb(hx)) in base
        )
    raise ValueError(f"unknown preset {preset!r}; expected 'base' or 'full'")


__all__ = [
    "WPLACE_PALETTE",
    "WPLACE_FREE_HEXES",
    "RPLACE_PALETTE",
    "PALETTES",
    "BASE_SETS",
    "build_entries",
    "build_palette",
    "preset_indices",
]
