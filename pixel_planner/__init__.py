# pixel_planner/__init__.py
"""
pixel_planner package.

Purpose:
  Plan collaborative pixel art (wplace, r/place): pixelate an image onto a
  palette-quantized grid and map screen, cell and world coordinates.
  See pixel_plan.py for the CLI.

Public API:
  quantize / Quantizer : image -> Grid of nearest active palette colours.
  Grid                 : quantized output (flat row-major palette indices).
  Palette              : ordered colours with enabled flags and active pool.
  build_palette        : named palettes ("wplace", "rplace").
  PlannerSession       : explicit reprocess pipeline, decode ordering, settings.
  colour_convert       : sRGB -> XYZ -> Lab and distance metrics.
  viewport             : screen/cell/world transforms, zoom, overlay geometry.
  interaction          : pointer state machine (Idle / Dragging).
  settings_codec       : share-code encode/decode.

Quick start:
  from pixel_planner import build_palette, quantize
  from pixel_planner.image_io import load_image_rgb
  rgb = load_image_rgb("cat.png")
  grid = quantize(rgb, rgb.shape[1], rgb.shape[0], 100, build_palette("wplace"))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import errors
from . import interaction
from . import palette_data
from . import settings_codec
from . import utils
from . import viewport

from .grid import Grid  # noqa: E402,F401
from .palette import Palette  # noqa: E402,F401
from .palette_data import build_palette  # noqa: E402,F401
from .quantizer import Quantizer, quantize  # noqa: E402,F401
from .session import PlannerSession  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "errors",
    "interaction",
    "palette_data",
    "settings_codec",
    "utils",
    "viewport",
    "Grid",
    "Palette",
    "build_palette",
    "Quantizer",
    "quantize",
    "PlannerSession",
]
