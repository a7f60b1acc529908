# models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple

from constants import (
    ASCE_LABEL,
    DEFAULT_EXPOSURE,
    DEFAULT_HEIGHT,
    DEFAULT_KD,
    DEFAULT_KZT,
    DEFAULT_MULTIPLIER,
    DEFAULT_SPEED,
    IS_LABEL,
)
from errors import StorageCorruptError


class CodeKind(str, Enum):
    PRIMARY = "is"
    SECONDARY = "asce"

    @property
    def label(self) -> str:
        return IS_LABEL if self is CodeKind.PRIMARY else ASCE_LABEL

    @property
    def speed_unit(self) -> str:
        return "m/s" if self is CodeKind.PRIMARY else "mph"


class InputMode(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class SpeedUnit(str, Enum):
    MS = "ms"
    MPH = "mph"


@dataclass(frozen=True)
class WindInput:
    """
    One computation request, already parsed.

    In AUTO mode the base speed comes from the region lookup, falling back to
    ``base_speed_override``; in MANUAL mode ``manual_speed`` is used, tagged
    with ``manual_unit``.
    """
    code: CodeKind
    mode: InputMode = InputMode.AUTO
    height: float = DEFAULT_HEIGHT
    region: Optional[str] = None
    base_speed_override: float = DEFAULT_SPEED
    manual_speed: float = DEFAULT_SPEED
    manual_unit: SpeedUnit = SpeedUnit.MS
    # PrimaryCode multipliers: risk, terrain, topography, size
    k1: float = DEFAULT_MULTIPLIER
    k2: float = DEFAULT_MULTIPLIER
    k3: float = DEFAULT_MULTIPLIER
    k4: float = DEFAULT_MULTIPLIER
    # SecondaryCode factors
    exposure: float = DEFAULT_EXPOSURE
    kd: float = DEFAULT_KD
    kzt: float = DEFAULT_KZT
    # Informational building footprint [m]
    width: Optional[float] = None
    length: Optional[float] = None

    @property
    def multipliers(self) -> Tuple[float, float, float, float]:
        return (self.k1, self.k2, self.k3, self.k4)


@dataclass(frozen=True)
class ProfilePoint:
    height: float
    pressure: float


Profile = Tuple[ProfilePoint, ...]


@dataclass(frozen=True)
class ComputationResult:
    code: CodeKind
    code_label: str
    base_speed: float
    derived_speed: float
    derived_pressure_base: float
    height: float
    profile: Profile
    pressure_imperial: Optional[float] = None

    @property
    def speed_unit(self) -> str:
        return self.code.speed_unit

    @property
    def last_height(self) -> float:
        return self.profile[-1].height


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    ts = ts.astimezone(timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass
class Scenario:
    """A named snapshot of the raw form fields, restored verbatim on load."""
    name: str
    active_code: CodeKind
    mode: InputMode
    raw_inputs: Dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)

    def label(self) -> str:
        local = self.created_at.astimezone()
        return f"{self.name} • {local.strftime('%Y-%m-%d %H:%M:%S')}"

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "time": format_timestamp(self.created_at),
            "mode": self.mode.value,
            "tab": self.active_code.value,
            "inputs": dict(self.raw_inputs),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Scenario":
        try:
            inputs = d.get("inputs") or {}
            if not isinstance(inputs, dict):
                raise TypeError("inputs must be an object")
            return cls(
                name=str(d["name"]),
                active_code=CodeKind(d["tab"]),
                mode=InputMode(d["mode"]),
                raw_inputs={str(k): "" if v is None else str(v) for k, v in inputs.items()},
                created_at=parse_timestamp(str(d["time"])),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise StorageCorruptError(f"Malformed scenario entry: {exc}") from exc
