# pixel_planner/colour_convert.py
from __future__ import annotations

"""
Colour conversions and metrics (sRGB, D65).

Exports:
  srgb_to_linear(channel)
  rgb_to_xyz(rgb)
  xyz_to_lab(xyz)
  rgb_to_lab(rgb)
  lab_distance(lab1, lab2)
  rgb_distance(rgb1, rgb2)

All functions are vectorised over a trailing axis of length 3 and return
float64. Inputs are 8-bit channel values [0..255].
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .core_types import Lab, XYZ

# Linear RGB -> XYZ (D65)
SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)

# Reference white (D65)
WHITE_D65 = np.array([0.95047, 1.00000, 1.08883], dtype=np.float64)

_EPSILON = 216.0 / 24389.0
_SLOPE = 841.0 / 108.0
_OFFSET = 4.0 / 29.0


# sRGB to linear


def srgb_to_linear(channel: ArrayLike) -> NDArray[np.float64]:
    """
    Convert an 8-bit sRGB channel (0..255) to linear light (0..1).
    Accepts scalars or arrays of any shape.
    """
    u = np.asarray(channel, dtype=np.float64) / 255.0
    return np.where(u <= 0.04045, u / 12.92, ((u + 0.055) / 1.055) ** 2.4)


# sRGB to XYZ to Lab


def rgb_to_xyz(rgb: ArrayLike) -> XYZ:
    """sRGB [...,3] in 0..255 to CIE XYZ (D65) [...,3]."""
    linear = srgb_to_linear(rgb)
    r, g, b = linear[..., 0], linear[..., 1], linear[..., 2]
    m = SRGB_TO_XYZ
    # elementwise rows, so a colour converts identically alone or in a batch
    out = np.empty(linear.shape, dtype=np.float64)
    out[..., 0] = r * m[0, 0] + g * m[0, 1] + b * m[0, 2]
    out[..., 1] = r * m[1, 0] + g * m[1, 1] + b * m[1, 2]
    out[..., 2] = r * m[2, 0] + g * m[2, 1] + b * m[2, 2]
    return out


def _lab_f(t: np.ndarray) -> np.ndarray:
    # cbrt above the knee, linear segment below
    return np.where(t > _EPSILON, np.cbrt(t), _SLOPE * t + _OFFSET)


def xyz_to_lab(xyz: ArrayLike) -> Lab:
    """CIE XYZ [...,3] to CIE Lab [...,3] against the D65 white."""
    arr = np.asarray(xyz, dtype=np.float64)
    f = _lab_f(arr / WHITE_D65)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]

    out = np.empty(arr.shape, dtype=np.float64)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


def rgb_to_lab(rgb: ArrayLike) -> Lab:
    """
    sRGB to CIE Lab (D65). Accepts uint8 or numeric [0..255] with shape (...,3).
    Shape is preserved.
    """
    return xyz_to_lab(rgb_to_xyz(rgb))


# Metrics


def lab_distance(lab1: ArrayLike, lab2: ArrayLike) -> NDArray[np.float64]:
    """Euclidean distance in Lab (CIE76). Broadcasts over leading axes."""
    diff = np.asarray(lab1, dtype=np.float64) - np.asarray(lab2, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def rgb_distance(rgb1: ArrayLike, rgb2: ArrayLike) -> NDArray[np.float64]:
    """Euclidean distance in raw RGB. Utility only; matching uses Lab."""
    diff = np.asarray(rgb1, dtype=np.float64) - np.asarray(rgb2, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


__all__ = [
    "SRGB_TO_XYZ",
    "WHITE_D65",
    "srgb_to_linear",
    "rgb_to_xyz",
    "xyz_to_lab",
    "rgb_to_lab",
    "lab_distance",
    "rgb_distance",
]
