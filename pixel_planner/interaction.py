# pixel_planner/interaction.py
from __future__ import annotations

"""
Pointer protocol for the stage as a small state machine.

States:
  Idle            : pointer moves update the hover cell
  Dragging(anchor): pointer moves pan the stage; hover is left alone

Transitions are pure functions returning a new ViewState:
  pointer_down  -> Dragging (anchor = pointer)
  pointer_move  -> Dragging: pan += pointer - anchor, re-anchor
                   Idle: hover = screen_to_cell(...)
  pointer_up    -> Idle, from anywhere (including off-surface releases)
  pointer_leave -> Idle: hover cleared; Dragging: unchanged
  zoom_by       -> zoom clamped to [ZOOM_MIN, ZOOM_MAX]
"""

from dataclasses import dataclass, replace
from typing import Tuple, Union

from .constants import DEFAULT_ZOOM
from .core_types import NO_CELL, CellXY
from .viewport import clamp_zoom, screen_to_cell, stage_origin

Point = Tuple[float, float]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    anchor: Point


Mode = Union[Idle, Dragging]


@dataclass(frozen=True)
class ViewState:
    mode: Mode = Idle()
    hover: CellXY = NO_CELL
    pan: Point = (0.0, 0.0)
    zoom: int = DEFAULT_ZOOM

    @property
    def dragging(self) -> bool:
        return isinstance(self.mode, Dragging)

    def stage_origin(self, layout_origin: Point = (0.0, 0.0)) -> Point:
        """Top-left of the stage on screen for a given un-panned layout position."""
        return stage_origin(layout_origin, self.pan)


def pointer_down(state: ViewState, x: float, y: float) -> ViewState:
    return replace(state, mode=Dragging(anchor=(x, y)))


def pointer_move(
    state: ViewState,
    x: float,
    y: float,
    stage: Point,
    grid_size: Tuple[int, int],
) -> ViewState:
    """
    stage is the stage's current top-left in screen space (its bounding box),
    grid_size is (width, height) in cells; (0, 0) when there is no grid.
    """
    mode = state.mode
    if isinstance(mode, Dragging):
        dx = x - mode.anchor[0]
        dy = y - mode.anchor[1]
        return replace(
            state,
            mode=Dragging(anchor=(x, y)),
            pan=(state.pan[0] + dx, state.pan[1] + dy),
        )
    width, height = grid_size
    hover = screen_to_cell(x, y, stage[0], stage[1], state.zoom, width, height)
    if hover == state.hover:
        return state
    return replace(state, hover=hover)


def pointer_up(state: ViewState) -> ViewState:
    if isinstance(state.mode, Idle):
        return state
    return replace(state, mode=Idle())


def pointer_leave(state: ViewState) -> ViewState:
    if isinstance(state.mode, Dragging):
        return state
    return replace(state, hover=NO_CELL)


def zoom_by(state: ViewState, steps: int) -> ViewState:
    return replace(state, zoom=clamp_zoom(state.zoom + steps))


def set_zoom(state: ViewState, zoom: float) -> ViewState:
    return replace(state, zoom=clamp_zoom(zoom))


__all__ = [
    "Idle",
    "Dragging",
    "Mode",
    "ViewState",
    "pointer_down",
    "pointer_move",
    "pointer_up",
    "pointer_leave",
    "zoom_by",
    "set_zoom",
]
