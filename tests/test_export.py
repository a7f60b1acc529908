from datetime import datetime, timezone

import plotly.graph_objects as go
import pytest

import report_wind
from compare import overlay
from errors import ExportError
from export import build_export_bundle, csv_filename, report_filename, to_csv_bytes
from models import CodeKind, WindInput
from plots import overlay_datasets, plot_pressure_diagram, plot_profiles, result_dataset
from profile_model import compute_profile, summary_line
from report_wind import build_report_bytes, plot_profiles_png


@pytest.fixture
def result():
    return compute_profile(WindInput(code=CodeKind.PRIMARY, height=10.0, base_speed_override=50.0))


def test_csv_layout(result):
    lines = to_csv_bytes(result.profile).decode("utf-8").strip().split("\n")
    assert lines[0] == "height_m,pressure_N_per_m2"
    assert len(lines) == len(result.profile) + 1
    rows = [tuple(float(v) for v in line.split(",")) for line in lines[1:]]
    assert rows == [(p.height, p.pressure) for p in result.profile]


def test_csv_filenames():
    assert csv_filename(CodeKind.PRIMARY) == "is_profile.csv"
    assert csv_filename(CodeKind.SECONDARY) == "asce_profile.csv"
    assert csv_filename(None) == "wind_profile.csv"


def test_report_filename_sanitises_timestamp():
    ts = datetime(2025, 3, 4, 5, 6, 7, 890000, tzinfo=timezone.utc)
    assert report_filename(ts) == "CivilDoctor_WindReport_2025-03-04-05-06-07.pdf"


def test_chart_png(result):
    png = plot_profiles_png([result_dataset(result)])
    assert png.startswith(b"\x89PNG")


def test_pdf_report(result):
    pdf = build_report_bytes(summary=summary_line(result), chart_png=plot_profiles_png([result_dataset(result)]))
    assert pdf.startswith(b"%PDF")


def test_pdf_failure_is_export_error(monkeypatch):
    class Broken:
        def __init__(self, *args, **kwargs):
            raise RuntimeError("disk full")

    monkeypatch.setattr(report_wind, "SimpleDocTemplate", Broken)
    with pytest.raises(ExportError):
        build_report_bytes(summary="x", chart_png=None)


def test_bundle_for_single_result(result):
    ts = datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    bundle = build_export_bundle([result_dataset(result)], summary_line(result), result.profile,
                                 CodeKind.PRIMARY, exported_at=ts)
    assert bundle.csv_filename == "is_profile.csv"
    assert bundle.profile_csv.startswith(b"height_m,pressure_N_per_m2")
    assert bundle.pdf_filename == "CivilDoctor_WindReport_2025-03-04-05-06-07.pdf"
    assert bundle.pdf_bytes.startswith(b"%PDF")


def test_bundle_for_comparison_has_no_csv(result):
    other = compute_profile(WindInput(code=CodeKind.SECONDARY, height=20.0, base_speed_override=110.0))
    ov = overlay(result, other)
    bundle = build_export_bundle(overlay_datasets(ov), "Comparison: IS 875 vs ASCE/GCC")
    assert bundle.profile_csv is None
    assert bundle.csv_filename is None
    assert bundle.chart_png.startswith(b"\x89PNG")


def test_plotly_figures(result):
    fig = plot_profiles([result_dataset(result)])
    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    assert fig.data[0].name == "IS 875"
    assert isinstance(plot_pressure_diagram(result.profile), go.Figure)


def test_pdf_summary_text_survives_extraction(result):
    fitz = pytest.importorskip("fitz")
    summary = summary_line(result)
    pdf = build_report_bytes(summary=summary, chart_png=None)
    doc = fitz.open(stream=pdf, filetype="pdf")
    try:
        text = doc[0].get_text("text")
    finally:
        doc.close()
    assert summary in text
    assert "\x7f" not in text
