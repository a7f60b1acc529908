# export.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from constants import CSV_HEADER, REPORT_FILE_PREFIX
from models import CodeKind, Profile
from plots import Dataset, profile_frame
from report_wind import build_report_bytes, plot_profiles_png

CHART_FILENAME = "wind_chart.png"


@dataclass
class ExportBundle:
    """
    A simple container for export artifacts so the Streamlit layer can download them.
    """
    profile_csv: Optional[bytes]
    csv_filename: Optional[str]
    chart_png: bytes
    pdf_bytes: bytes
    pdf_filename: str


def to_csv_bytes(profile: Profile) -> bytes:
    """``height_m,pressure_N_per_m2`` header, then one row per point in profile order."""
    df = profile_frame(profile)
    df.columns = list(CSV_HEADER)
    return df.to_csv(index=False, lineterminator="\n").encode("utf-8")


def csv_filename(code: Optional[CodeKind]) -> str:
    if code is None:
        return "wind_profile.csv"
    return f"{code.value}_profile.csv"


def report_filename(exported_at: Optional[datetime] = None) -> str:
    """CivilDoctor_WindReport_YYYY-MM-DD-HH-MM-SS.pdf (UTC)."""
    ts = (exported_at or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stamp = ts.isoformat()[:19].replace(":", "-").replace("T", "-")
    return f"{REPORT_FILE_PREFIX}{stamp}.pdf"


def build_export_bundle(
    datasets: List[Dataset],
    summary: str,
    csv_profile: Optional[Profile] = None,
    code: Optional[CodeKind] = None,
    exported_at: Optional[datetime] = None,
) -> ExportBundle:
    exported_at = exported_at or datetime.now(timezone.utc)
    chart_png = plot_profiles_png(datasets)
    pdf_bytes = build_report_bytes(summary=summary, chart_png=chart_png,
                                   generated_at=exported_at.astimezone())
    return ExportBundle(
        profile_csv=to_csv_bytes(csv_profile) if csv_profile else None,
        csv_filename=csv_filename(code) if csv_profile else None,
        chart_png=chart_png,
        pdf_bytes=pdf_bytes,
        pdf_filename=report_filename(exported_at),
    )
