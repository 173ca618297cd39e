"""Console formatting helpers."""

from __future__ import annotations

from pixel_planner.utils import (
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    print_config_line,
    warn,
)


def test_format_seconds_compact() -> None:
    assert format_seconds_compact(0.0123) == "12.3ms"
    assert format_seconds_compact(4.5) == "4.500s"
    assert format_seconds_compact(125.0) == "2m 5.0s"


def test_key_value_pairs_format_values() -> None:
    line = key_value_pairs_to_string([("Pixels across", 1200), ("Locked", False), ("Palette", "wplace")])
    assert line == "Pixels across: 1,200  Locked: off  Palette: wplace"


def test_config_line_routes_by_debug(capsys) -> None:
    print_config_line("grid", [("Zoom", 8)], debug=False)
    print_config_line("grid", [("Zoom", 9)], debug=True)
    out = capsys.readouterr().out.splitlines()
    assert out == ["[grid] Zoom: 8", "[debug] [grid] Zoom: 9"]


def test_warn_and_error_streams(capsys) -> None:
    warn("careful")
    error("broken")
    captured = capsys.readouterr()
    assert captured.out == "[warn] careful\n"
    assert captured.err == "[error] broken\n"
