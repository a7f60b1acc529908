# normalize.py
from __future__ import annotations

import math
import re
from typing import Dict, Mapping, Optional

from constants import (
    DEFAULT_EXPOSURE,
    DEFAULT_HEIGHT,
    DEFAULT_KD,
    DEFAULT_KZT,
    DEFAULT_LENGTH_M,
    DEFAULT_MULTIPLIER,
    DEFAULT_SPEED,
    DEFAULT_WIDTH_M,
    MPH_TO_MS,
    MS_TO_MPH,
)
from models import CodeKind, InputMode, SpeedUnit, WindInput

# Leading numeric prefix, e.g. "12.5 m" -> 12.5, "1e2x" -> 100
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Form fields kept in a scenario, with the value restored when a field is missing
FORM_FIELDS: Dict[str, str] = {
    "city": "",
    "height": "",
    "man_v": "",
    "man_unit": "",
    "is_vb": "",
    "is_k1": "1.0", "is_k2": "1.0", "is_k3": "1.0", "is_k4": "1.0",
    "is_w": DEFAULT_WIDTH_M, "is_l": DEFAULT_LENGTH_M,
    "asce_V": "", "asce_exp": "", "asce_kd": "", "asce_kzt": "",
}


def parse_with_default(raw, default: float) -> float:
    """
    Parse a user-entered number, never raising.

    Takes the leading numeric prefix of the text; missing, non-numeric,
    non-finite and zero values all resolve to ``default``.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        m = _FLOAT_PREFIX.match(str(raw))
        if not m:
            return default
        try:
            value = float(m.group(1))
        except ValueError:
            return default
    if not math.isfinite(value) or value == 0:
        return default
    return value


def round_half_up(value: float, decimals: int = 2) -> float:
    """Round to ``decimals`` places with halves going towards +infinity."""
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale


def format_number(value: float) -> str:
    """Shortest text for a number, without a trailing ``.0`` on whole values."""
    if math.isfinite(value) and float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def to_speed_unit(unit: str, code: CodeKind) -> SpeedUnit:
    """
    Resolve the manual speed unit field.

    Only the unit native to ``code`` is taken as-is; a blank or unknown unit
    is treated as the other one (mph for IS 875, m/s for ASCE/GCC).
    """
    u = (unit or "").strip().lower()
    if code is CodeKind.PRIMARY:
        return SpeedUnit.MS if u == SpeedUnit.MS.value else SpeedUnit.MPH
    return SpeedUnit.MPH if u == SpeedUnit.MPH.value else SpeedUnit.MS


def speed_in_ms(value: float, unit: SpeedUnit) -> float:
    return value if unit is SpeedUnit.MS else value * MPH_TO_MS


def speed_in_mph(value: float, unit: SpeedUnit) -> float:
    return value if unit is SpeedUnit.MPH else value * MS_TO_MPH


def complete_form(raw: Mapping[str, str]) -> Dict[str, str]:
    """Fill missing or blank form fields with their restore defaults."""
    out = {}
    for key, default in FORM_FIELDS.items():
        value = raw.get(key)
        out[key] = value if value else default
    return out


def wind_input_from_form(
    raw: Mapping[str, str],
    code: CodeKind,
    mode: InputMode,
) -> WindInput:
    """
    Map the raw form bag (string values keyed like ``FORM_FIELDS``) to a WindInput.

    Nothing here raises: bad numbers fall back to their documented defaults and
    negative heights are clamped to ground level.
    """
    def num(key: str, default: float) -> float:
        return parse_with_default(raw.get(key), default)

    region: Optional[str] = (raw.get("city") or "").strip() or None
    unit = to_speed_unit(raw.get("man_unit", ""), code)
    if code is CodeKind.PRIMARY:
        override = num("is_vb", DEFAULT_SPEED)
    else:
        override = num("asce_V", DEFAULT_SPEED)

    return WindInput(
        code=code,
        mode=mode,
        height=max(0.0, num("height", DEFAULT_HEIGHT)),
        region=region,
        base_speed_override=override,
        manual_speed=num("man_v", DEFAULT_SPEED),
        manual_unit=unit,
        k1=num("is_k1", DEFAULT_MULTIPLIER),
        k2=num("is_k2", DEFAULT_MULTIPLIER),
        k3=num("is_k3", DEFAULT_MULTIPLIER),
        k4=num("is_k4", DEFAULT_MULTIPLIER),
        exposure=num("asce_exp", DEFAULT_EXPOSURE),
        kd=num("asce_kd", DEFAULT_KD),
        kzt=num("asce_kzt", DEFAULT_KZT),
        width=num("is_w", 0.0) or None,
        length=num("is_l", 0.0) or None,
    )
