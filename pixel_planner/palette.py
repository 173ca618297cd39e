# pixel_planner/palette.py
from __future__ import annotations

"""
Palette with per-entry enabled flags.

The entry list is fixed at construction. Only the enabled vector mutates, and
every mutation bumps `generation` so callers can tell the active pool changed.

A palette with no enabled entries is legal: the active pool then falls back to
every entry, so matching is always possible.

The palette lock lives with the caller (see session.PlannerSession); Palette
itself never refuses an edit for that reason.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .core_types import Lab, PaletteEntry, U8Image
from .errors import IndexOutOfRange


class Palette:
    def __init__(
        self,
        entries: Sequence[PaletteEntry],
        enabled: Optional[Sequence[bool]] = None,
    ) -> None:
        if len(entries) == 0:
            raise ValueError("palette needs at least one entry")
        self._entries: Tuple[PaletteEntry, ...] = tuple(entries)
        if enabled is None:
            self._enabled: List[bool] = [True] * len(self._entries)
        else:
            if len(enabled) != len(self._entries):
                raise ValueError(
                    f"enabled vector length {len(enabled)} != palette size {len(self._entries)}"
                )
            self._enabled = [bool(v) for v in enabled]
        self._lab: Lab = np.stack([e.lab for e in self._entries]).astype(np.float64)
        self._lab.setflags(write=False)
        self._rgb: U8Image = np.array([e.rgb for e in self._entries], dtype=np.uint8)
        self._rgb.setflags(write=False)
        self.generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> PaletteEntry:
        self._check_index(index)
        return self._entries[index]

    def __repr__(self) -> str:
        return f"Palette(size={len(self)}, enabled={sum(self._enabled)})"

    @property
    def entries(self) -> Tuple[PaletteEntry, ...]:
        return self._entries

    @property
    def lab(self) -> Lab:
        """float64 [P,3] Lab rows, read-only."""
        return self._lab

    @property
    def rgb(self) -> U8Image:
        """uint8 [P,3] RGB rows, read-only."""
        return self._rgb

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._entries):
            raise IndexOutOfRange(
                f"palette index {index} outside [0, {len(self._entries)})"
            )

    # Queries

    def is_enabled(self, index: int) -> bool:
        self._check_index(index)
        return self._enabled[index]

    def enabled_flags(self) -> List[bool]:
        """Copy of the enabled vector, in palette order."""
        return list(self._enabled)

    def active_pool(self) -> Tuple[int, ...]:
        """
        Indices eligible for matching, ascending.
        Falls back to every index when nothing is enabled.
        """
        pool = tuple(i for i, on in enumerate(self._enabled) if on)
        if not pool:
            return tuple(range(len(self._entries)))
        return pool

    def index_of_hex(self, hex_str: str) -> int:
        """Index of the first entry whose hex matches (case-insensitive)."""
        needle = hex_str.strip().upper()
        if not needle.startswith("#"):
            needle = "#" + needle
        for i, entry in enumerate(self._entries):
            if entry.hex == needle:
                return i
        raise KeyError(hex_str)

    # Mutation

    def set_enabled(self, index: int, value: bool) -> None:
        self._check_index(index)
        self._enabled[index] = bool(value)
        self.generation += 1

    def apply_preset(self, index_set: Iterable[int]) -> None:
        """
        Enable exactly the indices in index_set.
        Bounds are checked for every index before any flag changes.
        """
        members = set(index_set)
        for index in members:
            self._check_index(index)
        self._enabled = [i in members for i in range(len(self._entries))]
        self.generation += 1

    def enable_all(self) -> None:
        self.apply_preset(range(len(self._entries)))

    def disable_all(self) -> None:
        self.apply_preset(())

    def load_flags(self, flags: Sequence[bool]) -> None:
        """Replace the whole enabled vector (e.g. from the settings store)."""
        if len(flags) != len(self._entries):
            raise ValueError(
                f"enabled vector length {len(flags)} != palette size {len(self._entries)}"
            )
        self._enabled = [bool(v) for v in flags]
        self.generation += 1


__all__ = ["Palette"]
