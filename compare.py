# compare.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Tuple

import numpy as np

from constants import COMPARE_STEPS, PRESSURE_DECIMALS
from models import CodeKind, ComputationResult, InputMode, Profile, ProfilePoint
from normalize import round_half_up, wind_input_from_form
from profile_model import ProfileModel


@dataclass(frozen=True)
class Overlay:
    """Two profiles resampled onto one height grid."""
    a: Profile
    b: Profile
    label_a: str
    label_b: str

    @property
    def heights(self) -> Tuple[float, ...]:
        return tuple(p.height for p in self.a)


def interpolate(profile: Profile, z: float) -> float:
    """
    Pressure at height z by linear interpolation between bracketing points.
    Outside the profile's own height range the end pressures are held (no
    extrapolation).
    """
    if not profile:
        raise ValueError("Cannot interpolate an empty profile.")
    heights = np.array([p.height for p in profile], dtype=float)
    pressures = np.array([p.pressure for p in profile], dtype=float)
    if z <= heights[0]:
        return float(pressures[0])
    if z >= heights[-1]:
        return float(pressures[-1])
    idx = int(np.searchsorted(heights, z, side="right")) - 1
    idx = int(np.clip(idx, 0, len(heights) - 2))
    z0, z1 = heights[idx], heights[idx + 1]
    p0, p1 = pressures[idx], pressures[idx + 1]
    if z1 - z0 < 1e-9:
        return float(p0)
    t = (z - z0) / (z1 - z0)
    return float(p0 + t * (p1 - p0))


def shared_grid(max_height: float, steps: int = COMPARE_STEPS) -> List[float]:
    return [round_half_up(max_height * (i / steps), 2) for i in range(steps + 1)]


def resample(profile: Profile, grid: List[float]) -> Profile:
    return tuple(
        ProfilePoint(height=z, pressure=round_half_up(interpolate(profile, z), PRESSURE_DECIMALS))
        for z in grid
    )


def overlay(a: ComputationResult, b: ComputationResult) -> Overlay:
    max_height = max(a.last_height, b.last_height)
    grid = shared_grid(max_height)
    return Overlay(
        a=resample(a.profile, grid),
        b=resample(b.profile, grid),
        label_a=a.code_label,
        label_b=b.code_label,
    )


def compare_form(model: ProfileModel, raw: Mapping[str, str], mode: InputMode) -> Overlay:
    """Run both codes on the same form inputs and overlay the results."""
    primary = model.compute_profile(wind_input_from_form(raw, CodeKind.PRIMARY, mode))
    secondary = model.compute_profile(wind_input_from_form(raw, CodeKind.SECONDARY, mode))
    return overlay(primary, secondary)
