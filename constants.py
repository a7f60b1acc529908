# constants.py
from __future__ import annotations

import os
from pathlib import Path

# Coefficients used across the calculator. These are simplified, approximate
# values and must stay exactly as they are for numeric parity.

# PrimaryCode (IS 875 style)
IS_PRESSURE_COEFF = 0.6          # Pd = 0.6 * Vz^2  [N/m^2, Vz in m/s]
IS_PROFILE_SLOPE = 0.05          # growth per 10 m of height
IS_PROFILE_CAP = 4.0             # min(z/10, 4) -> growth stops at 40 m
IS_PROFILE_EXPONENT = 0.6

# SecondaryCode (ASCE / GCC style)
ASCE_PRESSURE_COEFF = 0.00256    # qz = 0.00256 * V^2 * ...  [psf, V in mph]
ASCE_PROFILE_SLOPE = 0.03        # linear growth per 10 m of height
PSF_TO_PA = 47.880258

# Unit conversions
MPH_TO_MS = 0.44704
MS_TO_MPH = 2.23694

# Defaults
DEFAULT_MULTIPLIER = 1.0
DEFAULT_SPEED = 0.0
DEFAULT_HEIGHT = 0.0
DEFAULT_EXPOSURE = 0.85
DEFAULT_KD = 0.85
DEFAULT_KZT = 1.0
DEFAULT_WIDTH_M = "12"
DEFAULT_LENGTH_M = "20"

# Profile discretisation
MIN_PROFILE_STEPS = 6
PROFILE_STEP_M = 2.0
COMPARE_STEPS = 12

# Display precision
SPEED_DECIMALS = 2
PRESSURE_DECIMALS = 2
PSF_DECIMALS = 4
HEIGHT_DECIMALS = 1

# Code labels
IS_LABEL = "IS 875"
ASCE_LABEL = "ASCE/GCC"

# Scenario persistence
STORAGE_KEY = "cd_wind_cases"
STORE_DIR = Path(os.environ.get("WIND_CALC_STORE_DIR", Path.home() / ".wind_profile_calc"))

# Export
CSV_HEADER = ("height_m", "pressure_N_per_m2")
REPORT_BRAND = "CivilDoctor"
REPORT_TITLE = f"{REPORT_BRAND} — Wind Report"
REPORT_FOOTER = f"Generated by {REPORT_BRAND}"
REPORT_WATERMARK = f"{REPORT_BRAND} — www.civildoctor.example"
REPORT_FILE_PREFIX = f"{REPORT_BRAND}_WindReport_"

# Plot settings
IS_COLOR = "#0b74d1"
ASCE_COLOR = "#f97316"
