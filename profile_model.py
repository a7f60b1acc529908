# profile_model.py
from __future__ import annotations

import math
from typing import List

from constants import (
    ASCE_PRESSURE_COEFF,
    ASCE_PROFILE_SLOPE,
    HEIGHT_DECIMALS,
    IS_PRESSURE_COEFF,
    IS_PROFILE_CAP,
    IS_PROFILE_EXPONENT,
    IS_PROFILE_SLOPE,
    MIN_PROFILE_STEPS,
    PRESSURE_DECIMALS,
    PROFILE_STEP_M,
    PSF_DECIMALS,
    PSF_TO_PA,
    SPEED_DECIMALS,
)
from models import CodeKind, ComputationResult, InputMode, Profile, ProfilePoint, WindInput
from normalize import format_number, round_half_up, speed_in_mph, speed_in_ms
from reference_data import DEFAULT_REFERENCE, ReferenceData


# ---------- Height profiles ----------
def profile_steps(total_height: float) -> int:
    return max(MIN_PROFILE_STEPS, math.ceil(total_height / PROFILE_STEP_M))


def profile_heights(total_height: float) -> List[float]:
    """Equal steps from 0 to ``total_height``, snapped to 0.1 m."""
    steps = profile_steps(total_height)
    return [
        round_half_up(round_half_up(total_height * (i / steps), HEIGHT_DECIMALS), 2)
        for i in range(steps + 1)
    ]


def is_speed_at(design_speed: float, z: float) -> float:
    """
    Height-adjusted design speed: Vz * (1 + 0.05 * min(z/10, 4))^0.6
    Growth is capped above 40 m.
    """
    growth = 1 + IS_PROFILE_SLOPE * min(z / 10, IS_PROFILE_CAP)
    return design_speed * growth ** IS_PROFILE_EXPONENT


def is_pressure(speed_ms: float) -> float:
    """Pd = 0.6 * V^2  [N/m^2]"""
    return IS_PRESSURE_COEFF * speed_ms * speed_ms


def asce_pressure_at(base_pressure: float, z: float) -> float:
    """Linear growth: q(z) = q0 * (1 + 0.03 * z/10)"""
    return base_pressure * (1 + ASCE_PROFILE_SLOPE * (z / 10))


def build_profile(code: CodeKind, base_value: float, total_height: float) -> Profile:
    """
    Expand a base value into (height, pressure) points.

    ``base_value`` is the design speed [m/s] for the primary code and the
    base pressure [N/m^2] for the secondary code.
    """
    points = []
    for z in profile_heights(total_height):
        if code is CodeKind.PRIMARY:
            pd = is_pressure(is_speed_at(base_value, z))
        else:
            pd = asce_pressure_at(base_value, z)
        points.append(ProfilePoint(height=z, pressure=round_half_up(pd, PRESSURE_DECIMALS)))
    return tuple(points)


# ---------- Model ----------
class ProfileModel:
    """Turns a WindInput into a ComputationResult using injected reference tables."""

    def __init__(self, reference: ReferenceData = DEFAULT_REFERENCE):
        self.reference = reference

    def compute_profile(self, wind_input: WindInput) -> ComputationResult:
        if wind_input.code is CodeKind.PRIMARY:
            return self._compute_primary(wind_input)
        return self._compute_secondary(wind_input)

    def base_speed(self, wind_input: WindInput) -> float:
        """Base speed in the code's own unit (m/s primary, mph secondary)."""
        if wind_input.mode is InputMode.MANUAL:
            if wind_input.code is CodeKind.PRIMARY:
                return speed_in_ms(wind_input.manual_speed, wind_input.manual_unit)
            return speed_in_mph(wind_input.manual_speed, wind_input.manual_unit)

        if wind_input.code is CodeKind.PRIMARY:
            looked_up = self.reference.primary_speed(wind_input.region)
        else:
            looked_up = self.reference.secondary_speed(wind_input.region)
        return looked_up or wind_input.base_speed_override

    def _compute_primary(self, wind_input: WindInput) -> ComputationResult:
        vb = self.base_speed(wind_input)
        k1, k2, k3, k4 = wind_input.multipliers
        vz = vb * k1 * k2 * k3 * k4
        pd = is_pressure(vz)
        return ComputationResult(
            code=CodeKind.PRIMARY,
            code_label=CodeKind.PRIMARY.label,
            base_speed=round_half_up(vb, SPEED_DECIMALS),
            derived_speed=round_half_up(vz, SPEED_DECIMALS),
            derived_pressure_base=round_half_up(pd, PRESSURE_DECIMALS),
            height=wind_input.height,
            profile=build_profile(CodeKind.PRIMARY, vz, wind_input.height),
        )

    def _compute_secondary(self, wind_input: WindInput) -> ComputationResult:
        v = self.base_speed(wind_input)
        qz_psf = ASCE_PRESSURE_COEFF * v * v * wind_input.exposure * wind_input.kd * wind_input.kzt
        qz_n = qz_psf * PSF_TO_PA
        return ComputationResult(
            code=CodeKind.SECONDARY,
            code_label=CodeKind.SECONDARY.label,
            base_speed=round_half_up(v, SPEED_DECIMALS),
            derived_speed=round_half_up(v, SPEED_DECIMALS),
            derived_pressure_base=round_half_up(qz_n, PRESSURE_DECIMALS),
            height=wind_input.height,
            profile=build_profile(CodeKind.SECONDARY, qz_n, wind_input.height),
            pressure_imperial=round_half_up(qz_psf, PSF_DECIMALS),
        )


def compute_profile(wind_input: WindInput, reference: ReferenceData = DEFAULT_REFERENCE) -> ComputationResult:
    return ProfileModel(reference).compute_profile(wind_input)


def summary_line(result: ComputationResult) -> str:
    if result.code is CodeKind.PRIMARY:
        return (
            f"{result.code_label} • Vb={format_number(result.base_speed)} m/s"
            f" → Vz={format_number(result.derived_speed)} m/s"
            f" • Pd ≈ {format_number(result.derived_pressure_base)} N/m²"
        )
    return (
        f"{result.code_label} • V={format_number(result.base_speed)} mph"
        f" → qz ≈ {format_number(result.pressure_imperial)} psf"
        f" (~{format_number(result.derived_pressure_base)} N/m²)"
    )
