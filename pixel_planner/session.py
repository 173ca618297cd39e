# pixel_planner/session.py
from __future__ import annotations

"""
Planner session: the single owner of source, settings, palette flags, view
state and the current Grid.

Reprocessing is explicit. Every tracked input change (source buffer, pixels
across, active palette pool) marks the session dirty; reprocess() rebuilds
the Grid only when dirty, so calling it repeatedly is harmless.

Decoding is the only asynchronous step. Each request takes a ticket from
begin_decode(); complete_decode() applies a buffer only if its ticket is the
newest one issued, so a slow decode can never overwrite a newer source.

Origin changes never touch the Grid; they only shift the coordinates shown by
hover_readout().
"""

import threading
from dataclasses import replace
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, Union

from .constants import (
    DEFAULT_ORIGIN_X,
    DEFAULT_ORIGIN_Y,
    DEFAULT_PIXELS_ACROSS,
    DEFAULT_ZOOM,
)
from .core_types import NO_CELL, CellXY, HexStr, U8Image, WorldXY
from .errors import DecodeFailure, PaletteLocked
from .grid import Grid
from .image_io import load_image_rgb
from .interaction import (
    ViewState,
    pointer_down,
    pointer_leave,
    pointer_move,
    pointer_up,
    set_zoom,
    zoom_by,
)
from .palette import Palette
from .quantizer import Quantizer
from .settings_codec import (
    SettingsRecord,
    clamp_pixels_across,
    clamp_zoom,
    decode,
    encode,
)
from .settings_store import SettingsStore, StoredSettings
from .utils import debug_log, warn
from .viewport import cell_to_world

Point = Tuple[float, float]


class PlannerSession:
    def __init__(
        self,
        palette: Palette,
        store: Optional[SettingsStore] = None,
        debug: bool = False,
    ) -> None:
        self.palette = palette
        self.store = store
        self.debug = debug
        self._quantizer = Quantizer(palette, debug=debug)

        self.pixels_across: int = DEFAULT_PIXELS_ACROSS
        self.origin: Tuple[int, int] = (DEFAULT_ORIGIN_X, DEFAULT_ORIGIN_Y)
        self.palette_locked = False
        self.view = ViewState(zoom=DEFAULT_ZOOM)
        self.layout_origin: Point = (0.0, 0.0)

        self._source: Optional[U8Image] = None
        self._dirty = False
        self._seen_generation = palette.generation

        self._ticket_lock = threading.Lock()
        self._latest_ticket = 0

        if store is not None:
            self._apply_stored(store.load())

    # Persistence

    def _apply_stored(self, stored: StoredSettings) -> None:
        self.pixels_across = clamp_pixels_across(stored.pixels_across)
        self.origin = (int(stored.origin_x), int(stored.origin_y))
        self.view = set_zoom(self.view, stored.zoom)
        self.palette_locked = bool(stored.palette_locked)
        if stored.palette_enabled is not None:
            if len(stored.palette_enabled) == len(self.palette):
                self.palette.load_flags(stored.palette_enabled)
            else:
                warn(
                    f"stored palette flags ({len(stored.palette_enabled)}) do not match "
                    f"palette size ({len(self.palette)}); keeping defaults"
                )
        self._seen_generation = self.palette.generation

    def snapshot(self) -> StoredSettings:
        return StoredSettings(
            pixels_across=self.pixels_across,
            origin_x=self.origin[0],
            origin_y=self.origin[1],
            zoom=self.view.zoom,
            palette_enabled=self.palette.enabled_flags(),
            palette_locked=self.palette_locked,
        )

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.snapshot())

    # Source / decode ordering

    @property
    def source(self) -> Optional[U8Image]:
        return self._source

    def set_source(self, rgb: Optional[U8Image]) -> None:
        """Replace the source buffer synchronously (bypasses tickets)."""
        with self._ticket_lock:
            self._latest_ticket += 1
            self._source = rgb
            self._dirty = True

    def begin_decode(self) -> int:
        """Issue a ticket for a new decode request; older tickets become stale."""
        with self._ticket_lock:
            self._latest_ticket += 1
            return self._latest_ticket

    def complete_decode(self, ticket: int, rgb: U8Image) -> bool:
        """
        Deliver a decoded buffer. Returns False (and drops the buffer) when a
        newer request has been issued since `ticket`.
        """
        with self._ticket_lock:
            if ticket != self._latest_ticket:
                if self.debug:
                    debug_log(f"drop stale decode #{ticket} (latest #{self._latest_ticket})")
                return False
            self._source = rgb
            self._dirty = True
            return True

    def load_source(
        self,
        path: Union[Path, str, bytes],
        executor: Optional[Executor] = None,
        on_error: Optional[Callable[[DecodeFailure], None]] = None,
    ) -> Union[bool, "Future[U8Image]"]:
        """
        Decode an image into the session.

        Without an executor the decode runs inline and DecodeFailure propagates.
        With one, a Future is returned; its completion goes through the ticket
        check, and DecodeFailure is passed to on_error (if given).
        """
        ticket = self.begin_decode()
        if executor is None:
            return self.complete_decode(ticket, load_image_rgb(path))

        fut: "Future[U8Image]" = executor.submit(load_image_rgb, path)

        def _done(f: "Future[U8Image]") -> None:
            exc = f.exception()
            if exc is None:
                self.complete_decode(ticket, f.result())
            elif isinstance(exc, DecodeFailure) and on_error is not None:
                on_error(exc)

        fut.add_done_callback(_done)
        return fut

    # Reprocessing

    @property
    def dirty(self) -> bool:
        return self._dirty or self.palette.generation != self._seen_generation

    @property
    def grid(self) -> Optional[Grid]:
        return self._quantizer.grid

    def reprocess(self) -> Optional[Grid]:
        if not self.dirty:
            return self.grid
        with self._ticket_lock:
            src = self._source
            self._dirty = False
        self._seen_generation = self.palette.generation
        if src is None:
            return self.grid
        height, width = int(src.shape[0]), int(src.shape[1])
        grid = self._quantizer.process(src, width, height, self.pixels_across)
        # a replaced grid can leave the hover cell outside the new bounds
        if grid is not None and not grid.contains(*self.view.hover):
            self.view = replace(self.view, hover=NO_CELL)
        return grid

    # Settings

    def set_pixels_across(self, value: float) -> None:
        clamped = clamp_pixels_across(value)
        if clamped != self.pixels_across:
            self.pixels_across = clamped
            self._dirty = True
        self._persist()

    def set_origin(self, x: int, y: int) -> None:
        self.origin = (int(x), int(y))
        self._persist()

    def set_zoom(self, zoom: float) -> None:
        self.view = set_zoom(self.view, zoom)
        self._persist()

    def zoom_in(self) -> None:
        self.view = zoom_by(self.view, 1)
        self._persist()

    def zoom_out(self) -> None:
        self.view = zoom_by(self.view, -1)
        self._persist()

    def export_settings(self) -> str:
        return encode(
            SettingsRecord(
                pixels_across=self.pixels_across,
                origin_x=self.origin[0],
                origin_y=self.origin[1],
                zoom=self.view.zoom,
            )
        )

    def import_settings(self, code: str) -> SettingsRecord:
        """
        Apply a share code. DecodeError propagates before anything changes.
        """
        record = decode(code)
        pixels = clamp_pixels_across(record.pixels_across)
        if pixels != self.pixels_across:
            self.pixels_across = pixels
            self._dirty = True
        self.origin = (int(record.origin_x), int(record.origin_y))
        self.view = set_zoom(self.view, clamp_zoom(record.zoom))
        self._persist()
        return record

    # Palette edits

    def _check_unlocked(self) -> None:
        if self.palette_locked:
            raise PaletteLocked("palette is locked")

    def set_palette_locked(self, locked: bool) -> None:
        self.palette_locked = bool(locked)
        self._persist()

    def set_colour_enabled(self, index: int, enabled: bool) -> None:
        self._check_unlocked()
        self.palette.set_enabled(index, enabled)
        self._persist()

    def apply_palette_preset(self, index_set: Iterable[int]) -> None:
        self._check_unlocked()
        self.palette.apply_preset(index_set)
        self._persist()

    # Pointer events

    def stage_origin(self) -> Point:
        return self.view.stage_origin(self.layout_origin)

    def _grid_size(self) -> Tuple[int, int]:
        grid = self.grid
        return (grid.width, grid.height) if grid is not None else (0, 0)

    def on_pointer_down(self, x: float, y: float) -> None:
        self.view = pointer_down(self.view, x, y)

    def on_pointer_move(self, x: float, y: float) -> None:
        self.view = pointer_move(self.view, x, y, self.stage_origin(), self._grid_size())

    def on_pointer_up(self) -> None:
        self.view = pointer_up(self.view)

    def on_pointer_leave(self) -> None:
        self.view = pointer_leave(self.view)

    # Readout

    @property
    def hover(self) -> CellXY:
        """Hovered cell for display; NO_CELL while a drag is in progress."""
        if self.view.dragging:
            return NO_CELL
        return self.view.hover

    def world_of(self, cell_x: int, cell_y: int) -> WorldXY:
        return cell_to_world(cell_x, cell_y, self.origin)

    def hover_readout(self) -> Optional[Tuple[int, int, HexStr]]:
        """(world_x, world_y, hex) for the hovered cell, or None."""
        grid = self.grid
        hx, hy = self.hover
        if grid is None or (hx, hy) == NO_CELL or not grid.contains(hx, hy):
            return None
        wx, wy = self.world_of(hx, hy)
        return wx, wy, grid.hex_at(hx, hy)



__all__ = ["PlannerSession"]
