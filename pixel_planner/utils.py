# pixel_planner/utils.py
from __future__ import annotations

"""
Console output for the CLI and the session: one-line log helpers, the run
banner and the "[section] Key: value" config line.
"""

import sys
from typing import Any, Iterable, Tuple


def format_seconds_compact(seconds: float) -> str:
    """Elapsed time as '12.3ms', '4.567s' or '2m 5.0s'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


def key_value_pairs_to_string(pairs: Iterable[Tuple[str, Any]], sep: str = "  ") -> str:
    """'Pixels across: 100  Locked: off' from [(name, value), ...]."""
    return sep.join(f"{name}: {_format_value(value)}" for name, value in pairs)


def print_config_line(section: str, pairs: Iterable[Tuple[str, Any]], debug: bool) -> None:
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    print(message, flush=True)


def debug_log(message: str) -> None:
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Errors go to stderr so stdout stays a clean report."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
