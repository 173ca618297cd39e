# pixel_planner/settings_codec.py
from __future__ import annotations

"""
Share codes: a settings record as base64 of UTF-8 JSON.

Wire shape (schema version 1):
  {"v": 1, "pixelsAcross": n, "genesisX": n, "genesisY": n, "zoom": n}

decode() rejects anything that is not base64, not UTF-8, not JSON, not a JSON
object, carries v != 1, or lacks a numeric value for one of the four fields.
Extra keys are ignored. Values are returned as decoded; callers clamp
pixels_across and zoom before use (clamp_pixels_across, clamp_zoom).
"""

import base64
import binascii
import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Union

from .constants import (
    PIXELS_ACROSS_MAX,
    PIXELS_ACROSS_MIN,
    SETTINGS_SCHEMA_VERSION,
)
from .core_types import round_half_up
from .errors import DecodeError
from .viewport import clamp_zoom

Number = Union[int, float]

# record attribute -> wire key
_WIRE_KEYS = {
    "pixels_across": "pixelsAcross",
    "origin_x": "genesisX",
    "origin_y": "genesisY",
    "zoom": "zoom",
}


@dataclass(frozen=True)
class SettingsRecord:
    pixels_across: Number
    origin_x: Number
    origin_y: Number
    zoom: Number
    schema_version: int = SETTINGS_SCHEMA_VERSION


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _plain_number(value: Number) -> Number:
    # 3.0 comes back from JSON for some encoders; keep integral values as int
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def encode(record: SettingsRecord) -> str:
    payload: Dict[str, Any] = {"v": record.schema_version}
    for attr, key in _WIRE_KEYS.items():
        payload[key] = getattr(record, attr)
    text = json.dumps(payload, separators=(",", ":"))
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode(code: str) -> SettingsRecord:
    try:
        raw = base64.b64decode(code.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"not a base64 share code: {e}") from e
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"share code is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise DecodeError("share code payload is not an object")

    version = payload.get("v")
    if not _is_number(version) or version != SETTINGS_SCHEMA_VERSION:
        raise DecodeError(
            f"unsupported settings version {version!r}; expected {SETTINGS_SCHEMA_VERSION}"
        )

    values: Dict[str, Number] = {}
    for attr, key in _WIRE_KEYS.items():
        value = payload.get(key)
        if not _is_number(value):
            raise DecodeError(f"field {key!r} missing or not a number")
        values[attr] = _plain_number(value)
    return SettingsRecord(**values)


def clamp_pixels_across(value: Number) -> int:
    return int(min(PIXELS_ACROSS_MAX, max(PIXELS_ACROSS_MIN, round_half_up(value))))


__all__ = [
    "SettingsRecord",
    "encode",
    "decode",
    "clamp_pixels_across",
    "clamp_zoom",
]
