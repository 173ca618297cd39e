"""Pointer state machine: hover, drag-to-pan, leave and zoom."""

from __future__ import annotations

from pixel_planner.core_types import NO_CELL
from pixel_planner.interaction import (
    Dragging,
    Idle,
    ViewState,
    pointer_down,
    pointer_leave,
    pointer_move,
    pointer_up,
    set_zoom,
    zoom_by,
)

GRID = (10, 10)
STAGE = (0.0, 0.0)


def test_idle_move_updates_hover() -> None:
    s = ViewState(zoom=4)
    s = pointer_move(s, 9, 5, STAGE, GRID)
    assert s.hover == (2, 1)
    assert isinstance(s.mode, Idle)
    s = pointer_move(s, 100, 5, STAGE, GRID)
    assert s.hover == NO_CELL


def test_move_without_grid_never_hovers() -> None:
    s = pointer_move(ViewState(zoom=4), 1, 1, STAGE, (0, 0))
    assert s.hover == NO_CELL


def test_drag_pans_by_delta_and_reanchors() -> None:
    s = ViewState(zoom=4)
    s = pointer_down(s, 10, 10)
    assert s.mode == Dragging(anchor=(10, 10))
    assert s.dragging
    s = pointer_move(s, 15, 7, STAGE, GRID)
    assert s.pan == (5.0, -3.0)
    assert s.mode == Dragging(anchor=(15, 7))
    s = pointer_move(s, 20, 7, STAGE, GRID)
    assert s.pan == (10.0, -3.0)


def test_drag_suppresses_hover_updates() -> None:
    s = pointer_move(ViewState(zoom=4), 5, 5, STAGE, GRID)
    assert s.hover == (1, 1)
    s = pointer_down(s, 5, 5)
    s = pointer_move(s, 30, 30, STAGE, GRID)
    assert s.hover == (1, 1)


def test_pointer_up_returns_to_idle_from_anywhere() -> None:
    s = pointer_down(ViewState(), 0, 0)
    s = pointer_up(s)
    assert isinstance(s.mode, Idle)
    # releasing while already idle is harmless
    assert pointer_up(s) == s


def test_leave_clears_hover_only_when_idle() -> None:
    s = pointer_move(ViewState(zoom=4), 5, 5, STAGE, GRID)
    assert pointer_leave(s).hover == NO_CELL
    dragging = pointer_down(s, 5, 5)
    assert pointer_leave(dragging) == dragging


def test_hover_after_pan_follows_the_stage_box() -> None:
    s = ViewState(zoom=4)
    s = pointer_down(s, 0, 0)
    s = pointer_move(s, 40, 20, STAGE, GRID)
    s = pointer_up(s)
    stage = s.stage_origin((100.0, 100.0))
    assert stage == (140.0, 120.0)
    s = pointer_move(s, 140 + 6, 120 + 2, stage, GRID)
    assert s.hover == (1, 0)


def test_zoom_transitions_clamp() -> None:
    s = ViewState(zoom=63)
    s = zoom_by(s, 5)
    assert s.zoom == 64
    s = zoom_by(s, -100)
    assert s.zoom == 1
    assert set_zoom(s, 12).zoom == 12
