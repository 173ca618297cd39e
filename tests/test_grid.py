"""Grid value object: bounds, buffers and usage report."""

from __future__ import annotations

import numpy as np
import pytest

from pixel_planner.errors import OutOfBounds
from pixel_planner.grid import Grid
from pixel_planner.palette_data import build_entries

ENTRIES = tuple(build_entries([("#000000", "Black"), ("#ffffff", "White"), ("#ff0000", "Red")]))


def _grid() -> Grid:
    # 3 x 2, row-major
    # row 0: Black White White
    # row 1: Red   White Black
    return Grid(3, 2, np.array([0, 1, 1, 2, 1, 0], dtype=np.int32), ENTRIES)


def test_cell_at_uses_row_major_offsets() -> None:
    g = _grid()
    assert g.cell_at(0, 0).name == "Black"
    assert g.cell_at(2, 0).name == "White"
    assert g.cell_at(0, 1).name == "Red"
    assert g.index_at(2, 1) == 0
    assert g.hex_at(0, 1) == "#FF0000"


@pytest.mark.parametrize("xy", [(-1, 0), (0, -1), (3, 0), (0, 2), (3, 2)])
def test_cell_at_out_of_bounds(xy: tuple) -> None:
    g = _grid()
    with pytest.raises(OutOfBounds):
        g.cell_at(*xy)
    assert not g.contains(*xy)


def test_rgb_and_rgba_buffers() -> None:
    g = _grid()
    rgb = g.to_rgb()
    assert rgb.shape == (2, 3, 3)
    assert rgb.dtype == np.uint8
    assert rgb[1, 0].tolist() == [255, 0, 0]
    rgba = g.to_rgba()
    assert rgba.shape == (2, 3, 4)
    assert (rgba[..., 3] == 255).all()
    np.testing.assert_array_equal(rgba[..., :3], rgb)


def test_colour_usage_sorted_by_count() -> None:
    g = _grid()
    assert g.colour_usage() == [
        ("#FFFFFF", "White", 3),
        ("#000000", "Black", 2),
        ("#FF0000", "Red", 1),
    ]
    assert g.usage_by_hex()["#000000"] == 2


def test_indices_are_read_only() -> None:
    g = _grid()
    with pytest.raises(ValueError):
        g.indices[0] = 2


def test_invalid_shapes_rejected() -> None:
    with pytest.raises(ValueError):
        Grid(0, 1, np.zeros(0, dtype=np.int32), ENTRIES)
    with pytest.raises(ValueError):
        Grid(2, 2, np.zeros(3, dtype=np.int32), ENTRIES)
