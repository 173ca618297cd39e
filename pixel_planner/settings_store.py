# pixel_planner/settings_store.py
from __future__ import annotations

"""
Persisted settings slot (a small JSON file).

Stored shape:
  {"pixelsAcross": n, "genesisX": n, "genesisY": n, "zoom": n,
   "paletteEnabled": [bool, ...], "paletteLocked": bool}

load() never raises for a missing or unreadable slot: every field that is
absent or malformed falls back to its default. save() writes atomically.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_ORIGIN_X,
    DEFAULT_ORIGIN_Y,
    DEFAULT_PIXELS_ACROSS,
    DEFAULT_ZOOM,
    default_store_path,
)
from .settings_codec import clamp_pixels_across, clamp_zoom
from .utils import warn


@dataclass
class StoredSettings:
    pixels_across: int = DEFAULT_PIXELS_ACROSS
    origin_x: int = DEFAULT_ORIGIN_X
    origin_y: int = DEFAULT_ORIGIN_Y
    zoom: int = DEFAULT_ZOOM
    palette_enabled: Optional[List[bool]] = None  # None = palette default
    palette_locked: bool = False


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        return int(value)
    except (OverflowError, ValueError):
        return default


def from_json_dict(data: Any) -> StoredSettings:
    """Build StoredSettings from parsed JSON, field by field."""
    out = StoredSettings()
    if not isinstance(data, dict):
        return out
    out.pixels_across = clamp_pixels_across(
        _int_or(data.get("pixelsAcross"), DEFAULT_PIXELS_ACROSS)
    )
    out.origin_x = _int_or(data.get("genesisX"), DEFAULT_ORIGIN_X)
    out.origin_y = _int_or(data.get("genesisY"), DEFAULT_ORIGIN_Y)
    out.zoom = clamp_zoom(_int_or(data.get("zoom"), DEFAULT_ZOOM))

    flags = data.get("paletteEnabled")
    if isinstance(flags, list) and all(isinstance(v, bool) for v in flags):
        out.palette_enabled = list(flags)
    locked = data.get("paletteLocked")
    out.palette_locked = locked if isinstance(locked, bool) else False
    return out


def to_json_dict(settings: StoredSettings) -> Dict[str, Any]:
    d = asdict(settings)
    return {
        "pixelsAcross": d["pixels_across"],
        "genesisX": d["origin_x"],
        "genesisY": d["origin_y"],
        "zoom": d["zoom"],
        "paletteEnabled": d["palette_enabled"],
        "paletteLocked": d["palette_locked"],
    }


class SettingsStore:
    """One JSON file holding the last-used settings."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()

    def load(self) -> StoredSettings:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return StoredSettings()
        except (OSError, UnicodeDecodeError) as e:
            warn(f"settings store unreadable ({e}); using defaults")
            return StoredSettings()
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            warn(f"settings store {self.path} is corrupt; using defaults")
            return StoredSettings()
        return from_json_dict(data)

    def save(self, settings: StoredSettings) -> bool:
        """Write the slot atomically. Returns False (after a warning) if it cannot be written."""
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(to_json_dict(settings), indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            warn(f"settings store not saved ({e})")
            return False
        return True


__all__ = ["StoredSettings", "SettingsStore", "from_json_dict", "to_json_dict"]
