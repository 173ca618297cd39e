"""
Tunables and defaults used across the project.

- Slider ranges (pixels across, zoom)
- Defaults for a fresh session
- Share-code schema version
- Settings store location
"""
from __future__ import annotations

import os
from pathlib import Path

# =========================
# Pixelation
# =========================
PIXELS_ACROSS_MIN = 5
PIXELS_ACROSS_MAX = 400
DEFAULT_PIXELS_ACROSS = 100

# =========================
# View
# =========================
ZOOM_MIN = 1
ZOOM_MAX = 64
ZOOM_STEP = 1
DEFAULT_ZOOM = 8

DEFAULT_ORIGIN_X = 0
DEFAULT_ORIGIN_Y = 0

# Overlay colours (RGBA)
FRAME_RGBA = (255, 255, 255, 89)
CROSSHAIR_RGBA = (57, 255, 20, 255)
CELL_OUTLINE_RGBA = (0, 255, 247, 255)

# =========================
# Share codes / persistence
# =========================
SETTINGS_SCHEMA_VERSION = 1

DEFAULT_PALETTE_NAME = "wplace"

STORE_ENV_VAR = "PIXEL_PLANNER_STORE"
STORE_FILE_NAME = "settings.json"


def default_store_path() -> Path:
    """Store path from $PIXEL_PLANNER_STORE, else ~/.pixel_planner/settings.json."""
    env = os.environ.get(STORE_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".pixel_planner" / STORE_FILE_NAME


__all__ = [
    "PIXELS_ACROSS_MIN",
    "PIXELS_ACROSS_MAX",
    "DEFAULT_PIXELS_ACROSS",
    "ZOOM_MIN",
    "ZOOM_MAX",
    "ZOOM_STEP",
    "DEFAULT_ZOOM",
    "DEFAULT_ORIGIN_X",
    "DEFAULT_ORIGIN_Y",
    "FRAME_RGBA",
    "CROSSHAIR_RGBA",
    "CELL_OUTLINE_RGBA",
    "SETTINGS_SCHEMA_VERSION",
    "DEFAULT_PALETTE_NAME",
    "STORE_ENV_VAR",
    "STORE_FILE_NAME",
    "default_store_path",
]
