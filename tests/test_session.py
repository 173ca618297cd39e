"""Session: explicit reprocessing, decode ordering, settings and palette lock."""

from __future__ import annotations

import io
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List

import numpy as np
import pytest
from PIL import Image

from pixel_planner.errors import DecodeError, DecodeFailure, PaletteLocked
from pixel_planner.palette import Palette
from pixel_planner.palette_data import build_entries
from pixel_planner.session import PlannerSession
from pixel_planner.settings_codec import SettingsRecord, encode
from pixel_planner.settings_store import SettingsStore


def _palette() -> Palette:
    return Palette(build_entries([("#000000", "Black"), ("#ffffff", "White"), ("#ff0000", "Red")]))


def _solid(rgb, w: int = 8, h: int = 4) -> np.ndarray:
    img = np.empty((h, w, 3), dtype=np.uint8)
    img[...] = rgb
    return img


def _png_bytes(rgb: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(rgb).save(buf, format="PNG")
    return buf.getvalue()


def test_reprocess_is_explicit_and_idempotent() -> None:
    s = PlannerSession(_palette())
    assert s.reprocess() is None
    s.set_source(_solid((0, 0, 0)))
    assert s.grid is None  # nothing happens until reprocess()
    g1 = s.reprocess()
    assert g1 is not None
    assert (g1.width, g1.height) == (100, 50)
    assert not s.dirty
    assert s.reprocess() is g1


def test_tracked_inputs_mark_dirty() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((250, 250, 250)))
    g1 = s.reprocess()

    s.set_pixels_across(20)
    assert s.dirty
    g2 = s.reprocess()
    assert g2 is not g1
    assert (g2.width, g2.height) == (20, 10)

    s.set_colour_enabled(1, False)  # White off: near-white now maps elsewhere
    assert s.dirty
    g3 = s.reprocess()
    assert g3.hex_at(0, 0) != "#FFFFFF"
    # the previous grid is untouched
    assert g2.hex_at(0, 0) == "#FFFFFF"


def test_origin_change_does_not_reprocess() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((0, 0, 0)))
    g = s.reprocess()
    s.set_origin(500, -20)
    assert not s.dirty
    assert s.reprocess() is g
    assert s.world_of(3, 4) == (503, -16)


def test_same_pixels_across_is_not_a_change() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((0, 0, 0)))
    s.reprocess()
    s.set_pixels_across(s.pixels_across)
    assert not s.dirty


def test_stale_decode_is_discarded() -> None:
    s = PlannerSession(_palette())
    older = s.begin_decode()
    newer = s.begin_decode()
    assert s.complete_decode(newer, _solid((255, 0, 0))) is True
    assert s.complete_decode(older, _solid((0, 0, 0))) is False
    g = s.reprocess()
    assert g.hex_at(0, 0) == "#FF0000"


def test_set_source_supersedes_pending_decodes() -> None:
    s = PlannerSession(_palette())
    ticket = s.begin_decode()
    s.set_source(_solid((255, 255, 255)))
    assert s.complete_decode(ticket, _solid((0, 0, 0))) is False
    assert s.reprocess().hex_at(0, 0) == "#FFFFFF"


def test_zero_size_source_keeps_grid() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((0, 0, 0)))
    g = s.reprocess()
    s.set_source(np.zeros((0, 0, 3), dtype=np.uint8))
    assert s.reprocess() is g


def test_async_load_applies_last_submission(tmp_path: Path) -> None:
    s = PlannerSession(_palette())
    with ThreadPoolExecutor(max_workers=2) as pool:
        f1 = s.load_source(_png_bytes(_solid((0, 0, 0))), executor=pool)
        f2 = s.load_source(_png_bytes(_solid((255, 0, 0))), executor=pool)
        f1.result()
        f2.result()
    assert s.reprocess().hex_at(0, 0) == "#FF0000"


def test_async_decode_failure_reported() -> None:
    s = PlannerSession(_palette())
    errors: List[DecodeFailure] = []
    with ThreadPoolExecutor(max_workers=1) as pool:
        fut = s.load_source(b"not an image", executor=pool, on_error=errors.append)
        with pytest.raises(DecodeFailure):
            fut.result()
    assert len(errors) == 1
    assert s.source is None


def test_inline_decode_failure_propagates() -> None:
    s = PlannerSession(_palette())
    with pytest.raises(DecodeFailure):
        s.load_source(b"garbage")


def test_palette_lock_blocks_edits() -> None:
    s = PlannerSession(_palette())
    s.set_palette_locked(True)
    with pytest.raises(PaletteLocked):
        s.set_colour_enabled(0, False)
    with pytest.raises(PaletteLocked):
        s.apply_palette_preset({0})
    assert s.palette.enabled_flags() == [True, True, True]
    s.set_palette_locked(False)
    s.apply_palette_preset({0})
    assert s.palette.enabled_flags() == [True, False, False]


def test_import_settings_applies_clamped_values() -> None:
    s = PlannerSession(_palette())
    code = encode(SettingsRecord(pixels_across=9000, origin_x=12, origin_y=-4, zoom=200))
    s.import_settings(code)
    assert s.pixels_across == 400
    assert s.origin == (12, -4)
    assert s.view.zoom == 64


def test_bad_import_changes_nothing() -> None:
    s = PlannerSession(_palette())
    s.set_origin(1, 2)
    s.set_pixels_across(30)
    before = (s.pixels_across, s.origin, s.view.zoom)
    with pytest.raises(DecodeError):
        s.import_settings("definitely not a code")
    assert (s.pixels_across, s.origin, s.view.zoom) == before


def test_export_import_between_sessions() -> None:
    a = PlannerSession(_palette())
    a.set_pixels_across(64)
    a.set_origin(-7, 300)
    a.set_zoom(20)
    b = PlannerSession(_palette())
    b.import_settings(a.export_settings())
    assert (b.pixels_across, b.origin, b.view.zoom) == (64, (-7, 300), 20)


def test_settings_persist_across_sessions(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    a = PlannerSession(_palette(), store=store)
    a.set_pixels_across(42)
    a.set_origin(5, 6)
    a.zoom_in()
    a.set_colour_enabled(2, False)
    a.set_palette_locked(True)

    b = PlannerSession(_palette(), store=store)
    assert b.pixels_across == 42
    assert b.origin == (5, 6)
    assert b.view.zoom == 9
    assert b.palette.enabled_flags() == [True, True, False]
    assert b.palette_locked is True


def test_stored_flags_for_other_palette_are_ignored(tmp_path: Path, capsys) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    a = PlannerSession(Palette(build_entries([("#000000", "Black")])), store=store)
    a.set_colour_enabled(0, False)
    b = PlannerSession(_palette(), store=store)
    assert b.palette.enabled_flags() == [True, True, True]
    assert "[warn]" in capsys.readouterr().out


def test_hover_readout_uses_origin() -> None:
    s = PlannerSession(_palette())
    src = _solid((0, 0, 0), w=5, h=2)
    src[1, 3] = (255, 0, 0)
    s.set_source(src)
    s.set_pixels_across(5)
    s.reprocess()
    s.set_zoom(10)
    s.set_origin(1000, 2000)

    s.on_pointer_move(35, 15)
    assert s.hover == (3, 1)
    assert s.hover_readout() == (1003, 2001, "#FF0000")

    s.on_pointer_leave()
    assert s.hover_readout() is None


def test_drag_then_hover_in_moved_stage() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((0, 0, 0), w=5, h=2))
    s.set_pixels_across(5)
    s.reprocess()
    s.set_zoom(10)

    s.on_pointer_down(0, 0)
    s.on_pointer_move(100, 50)
    assert s.hover_readout() is None
    s.on_pointer_up()
    assert s.stage_origin() == (100.0, 50.0)
    s.on_pointer_move(105, 55)
    assert s.hover == (0, 0)
    s.on_pointer_move(5, 5)
    assert s.hover == (-1, -1)


def test_shrinking_grid_clears_stale_hover() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((0, 0, 0), w=40, h=20))
    s.set_pixels_across(40)
    s.reprocess()
    s.set_zoom(1)
    s.on_pointer_move(30.5, 15.5)
    assert s.hover == (30, 15)
    s.set_pixels_across(10)
    s.reprocess()
    assert s.hover == (-1, -1)


def test_hover_hidden_while_dragging() -> None:
    s = PlannerSession(_palette())
    s.set_source(_solid((0, 0, 0), w=5, h=2))
    s.set_pixels_across(5)
    s.reprocess()
    s.set_zoom(10)

    s.on_pointer_move(5, 5)
    assert s.hover_readout() == (0, 0, "#000000")
    s.on_pointer_down(5, 5)
    s.on_pointer_move(300, 300)
    assert s.hover == (-1, -1)
    assert s.hover_readout() is None
    s.on_pointer_up()
    s.on_pointer_move(295 + 15, 295 + 5)
    assert s.hover_readout() == (1, 0, "#000000")


def test_corrupt_store_bytes_do_not_block_startup(tmp_path: Path, capsys) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(b"\x80\x81")
    s = PlannerSession(_palette(), store=SettingsStore(path))
    assert s.pixels_across == 100
    assert "[warn]" in capsys.readouterr().out


def test_unwritable_store_keeps_session_running(tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    s = PlannerSession(_palette(), store=SettingsStore(blocker / "settings.json"))
    capsys.readouterr()
    s.set_origin(7, 8)
    assert s.origin == (7, 8)
    assert "[warn]" in capsys.readouterr().out
