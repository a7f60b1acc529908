# reference_data.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from constants import DEFAULT_MULTIPLIER, DEFAULT_SPEED

# IS 875 basic wind speeds Vb [m/s], representative set
IS_VB: Dict[str, float] = {
    "Mumbai": 60, "Delhi": 55, "Bengaluru": 55, "Chennai": 50, "Hyderabad": 55,
    "Ahmedabad": 44, "Pune": 40, "Kolkata": 50, "Lucknow": 47, "Surat": 44,
    "Jaipur": 33, "Nagpur": 39, "Bhopal": 39, "Visakhapatnam": 50, "Thiruvananthapuram": 39,
    "Rajkot": 44, "Indore": 39, "Ranchi": 47, "Coimbatore": 39, "Patna": 47,
}

# GCC / ASCE sample basic wind speeds V [mph]
GCC_V: Dict[str, float] = {
    "Dubai": 110, "Abu Dhabi": 110, "Doha": 120, "Riyadh": 115, "Muscat": 110, "Manama": 110,
}

# k1 by risk category (simplified)
IS_K1: Dict[str, float] = {"normal": 1.00, "important": 1.15, "critical": 1.30}

# k2 by terrain category (approximate)
IS_K2: Dict[str, float] = {"1": 0.95, "2": 1.00, "3": 1.05, "4": 1.10}

# k3 by topography (approximate)
IS_K3: Dict[str, float] = {"flat": 1.0, "small-rise": 1.05, "large-rise": 1.10, "slope": 1.20}

# Rough exposure factors for quick checks
ASCE_EXPOSURES: Dict[str, float] = {"B": 0.7, "C": 0.85, "D": 1.03}


def _frozen(d: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType({str(k): float(v) for k, v in d.items()})


@dataclass(frozen=True)
class ReferenceData:
    """
    Lookup tables used by the profile model.

    Every lookup degrades gracefully: unknown regions resolve to a speed of 0,
    unknown categories to a multiplier of 1.0.
    """
    primary_speeds: Mapping[str, float] = field(default_factory=lambda: _frozen(IS_VB))
    secondary_speeds: Mapping[str, float] = field(default_factory=lambda: _frozen(GCC_V))
    risk_factors: Mapping[str, float] = field(default_factory=lambda: _frozen(IS_K1))
    terrain_factors: Mapping[str, float] = field(default_factory=lambda: _frozen(IS_K2))
    topography_factors: Mapping[str, float] = field(default_factory=lambda: _frozen(IS_K3))
    exposure_factors: Mapping[str, float] = field(default_factory=lambda: _frozen(ASCE_EXPOSURES))

    @classmethod
    def from_tables(cls, **tables: Mapping[str, float]) -> "ReferenceData":
        """Build from plain dicts (fixture tables in tests, extended codal lists)."""
        return cls(**{name: _frozen(table) for name, table in tables.items()})

    def primary_speed(self, region) -> float:
        return _lookup(self.primary_speeds, region, DEFAULT_SPEED)

    def secondary_speed(self, region) -> float:
        return _lookup(self.secondary_speeds, region, DEFAULT_SPEED)

    def risk_factor(self, category) -> float:
        return _lookup(self.risk_factors, category, DEFAULT_MULTIPLIER)

    def terrain_factor(self, category) -> float:
        return _lookup(self.terrain_factors, category, DEFAULT_MULTIPLIER)

    def topography_factor(self, category) -> float:
        return _lookup(self.topography_factors, category, DEFAULT_MULTIPLIER)

    def exposure_factor(self, category) -> float:
        return _lookup(self.exposure_factors, category, DEFAULT_MULTIPLIER)

    def region_options(self) -> List[Tuple[str, str, float]]:
        """
        (group, region, speed) rows for the region picker: primary regions
        sorted by name, then secondary regions in table order.
        """
        rows = [("is", name, self.primary_speeds[name]) for name in sorted(self.primary_speeds)]
        rows += [("asce", name, speed) for name, speed in self.secondary_speeds.items()]
        return rows


def _lookup(table: Mapping[str, float], key, default: float) -> float:
    if key is None:
        return default
    return table.get(str(key), default)


DEFAULT_REFERENCE = ReferenceData()
