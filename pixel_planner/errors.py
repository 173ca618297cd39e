# pixel_planner/errors.py
"""
Error kinds raised by the planner core.

  DecodeFailure   : source image could not be decoded
  DecodeError     : malformed share code
  IndexOutOfRange : palette index outside the palette
  OutOfBounds     : grid cell outside the grid
  PaletteLocked   : palette edit attempted while the lock is set
"""


class PixelPlannerError(Exception):
    """Base class for planner errors."""


class DecodeFailure(PixelPlannerError):
    """Source image unreadable."""


class DecodeError(PixelPlannerError, ValueError):
    """Share code is not a valid settings payload."""


class IndexOutOfRange(PixelPlannerError, IndexError):
    """Palette index outside [0, len(palette))."""


class OutOfBounds(PixelPlannerError, IndexError):
    """Grid cell outside [0, W) x [0, H)."""


class PaletteLocked(PixelPlannerError):
    pass


__all__ = [
    "PixelPlannerError",
    "DecodeFailure",
    "DecodeError",
    "IndexOutOfRange",
    "OutOfBounds",
    "PaletteLocked",
]
