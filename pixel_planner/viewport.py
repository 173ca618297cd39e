# pixel_planner/viewport.py
from __future__ import annotations

"""
Screen / cell / world conversions and overlay geometry.

All functions are pure. `zoom` is an integer count of screen pixels per cell.

Pointer positions are mapped against the stage's own bounding box. Panning
moves that box, so the same floor-division formula stays correct while
dragging; nothing here ever inverts the pan.

Exports:
  screen_to_cell(screen_x, screen_y, stage_x, stage_y, zoom, width, height) -> CellXY
  cell_to_world(cell_x, cell_y, origin) -> WorldXY
  stage_origin(layout_origin, pan) -> (x, y)
  clamp_zoom(z), zoom_in(z), zoom_out(z)
  overlay_geometry(hover, width, height, zoom) -> Overlay
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import ZOOM_MAX, ZOOM_MIN, ZOOM_STEP
from .core_types import NO_CELL, CellXY, WorldXY, round_half_up

Point = Tuple[float, float]
Segment = Tuple[float, float, float, float]  # x0, y0, x1, y1
Rect = Tuple[float, float, float, float]  # x, y, w, h


def screen_to_cell(
    screen_x: float,
    screen_y: float,
    stage_x: float,
    stage_y: float,
    zoom: int,
    width: int,
    height: int,
) -> CellXY:
    """Cell under a screen point, or NO_CELL outside [0,W) x [0,H)."""
    cx = math.floor((screen_x - stage_x) / zoom)
    cy = math.floor((screen_y - stage_y) / zoom)
    if 0 <= cx < width and 0 <= cy < height:
        return int(cx), int(cy)
    return NO_CELL


def cell_to_world(cell_x: int, cell_y: int, origin: Tuple[int, int]) -> WorldXY:
    """Display coordinate of a cell. Never used for grid indexing."""
    return cell_x + origin[0], cell_y + origin[1]


def stage_origin(layout_origin: Point, pan: Point) -> Point:
    """Screen position of the stage's top-left corner after panning."""
    return layout_origin[0] + pan[0], layout_origin[1] + pan[1]


# Zoom


def clamp_zoom(zoom: float) -> int:
    return int(min(ZOOM_MAX, max(ZOOM_MIN, round_half_up(zoom))))


def zoom_in(zoom: int) -> int:
    return clamp_zoom(zoom + ZOOM_STEP)


def zoom_out(zoom: int) -> int:
    return clamp_zoom(zoom - ZOOM_STEP)


# Overlay


@dataclass(frozen=True)
class Overlay:
    """
    Overlay drawing model in stage pixels.

    frame       : outer border rectangle, None for an empty grid
    crosshair_v : vertical line through the hovered cell centre
    crosshair_h : horizontal line through the hovered cell centre
    cell_outline: rectangle hugging the hovered cell
    """

    width: int
    height: int
    frame: Optional[Rect]
    crosshair_v: Optional[Segment]
    crosshair_h: Optional[Segment]
    cell_outline: Optional[Rect]

    @property
    def has_hover(self) -> bool:
        return self.cell_outline is not None


def overlay_geometry(hover: CellXY, width: int, height: int, zoom: int) -> Overlay:
    """
    Build the overlay for a grid of width x height cells at `zoom`.
    Lines sit on half-pixel offsets so 1px strokes land on whole pixels.
    """
    surf_w = width * zoom
    surf_h = height * zoom
    frame: Optional[Rect] = None
    if width > 0 and height > 0:
        frame = (0.5, 0.5, surf_w - 1.0, surf_h - 1.0)

    hx, hy = hover
    if hx < 0 or hy < 0:
        return Overlay(surf_w, surf_h, frame, None, None, None)

    mid_x = (hx + 0.5) * zoom
    mid_y = (hy + 0.5) * zoom
    return Overlay(
        surf_w,
        surf_h,
        frame,
        crosshair_v=(mid_x, 0.0, mid_x, float(surf_h)),
        crosshair_h=(0.0, mid_y, float(surf_w), mid_y),
        cell_outline=(hx * zoom + 0.5, hy * zoom + 0.5, zoom - 1.0, zoom - 1.0),
    )


__all__ = [
    "screen_to_cell",
    "cell_to_world",
    "stage_origin",
    "clamp_zoom",
    "zoom_in",
    "zoom_out",
    "Overlay",
    "overlay_geometry",
]
