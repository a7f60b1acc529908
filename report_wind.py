# report_wind.py
from __future__ import annotations

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import matplotlib
import matplotlib.pyplot as plt
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas
from reportlab.platypus import Image as RLImage
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from constants import REPORT_FOOTER, REPORT_TITLE, REPORT_WATERMARK
from errors import ExportError
from plots import Dataset

logger = logging.getLogger(__name__)

# Unicode monospace face for the summary block (bullets, arrows, approx signs)
SUMMARY_FONT = "DejaVuSansMono"


def _fig_png(fig) -> bytes:
    bio = io.BytesIO()
    fig.savefig(bio, format="png", bbox_inches="tight", dpi=150)
    plt.close(fig)
    bio.seek(0)
    return bio.getvalue()


def _escape(s: str) -> str:
    return str(s).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _summary_font() -> str:
    if SUMMARY_FONT not in pdfmetrics.getRegisteredFontNames():
        path = Path(matplotlib.get_data_path()) / "fonts" / "ttf" / f"{SUMMARY_FONT}.ttf"
        pdfmetrics.registerFont(TTFont(SUMMARY_FONT, str(path)))
    return SUMMARY_FONT


# ---------- Plots ----------
def plot_profiles_png(datasets: List[Dataset], title: str = "Wind pressure profile") -> bytes:
    """Render pressure-vs-height lines to PNG bytes."""
    try:
        fig = plt.figure(figsize=(8.0, 4.0))
        ax = fig.add_subplot(111)
        max_z = 10.0
        for label, profile, color in datasets:
            zs = [p.height for p in profile]
            ps = [p.pressure for p in profile]
            max_z = max([max_z] + zs)
            ax.plot(zs, ps, color=color, linewidth=2.5, label=label)
        ax.set_xlim(0, max_z)
        ax.set_ylim(bottom=0)
        ax.set_xlabel("Height [m]")
        ax.set_ylabel("Pressure [N/m²]")
        ax.set_title(title)
        ax.grid(alpha=0.3)
        if datasets:
            ax.legend(loc="upper left")
        ax.spines["top"].set_visible(False); ax.spines["right"].set_visible(False)
        return _fig_png(fig)
    except Exception as exc:
        logger.exception("Chart rendering failed")
        raise ExportError(f"Chart export failed: {exc}") from exc


# ---------- Footer ----------
def _footer(canv: canvas.Canvas, doc):
    canv.saveState()
    width, _height = doc.pagesize
    canv.setFont("Helvetica", 10)
    canv.setFillColor(colors.Color(150 / 255, 150 / 255, 150 / 255))
    canv.drawRightString(width - 20, 20, REPORT_WATERMARK)
    canv.restoreState()


# ---------- Main writer ----------
def write_pdf(
    out: Union[Path, BinaryIO],
    *,
    summary: str,
    chart_png: Optional[bytes],
    generated_at: Optional[datetime] = None,
):
    """
    One-page report: title, generation time, the summary line, the chart and
    the attribution footer. A watermark is drawn bottom-right on every page.
    """
    generated_at = generated_at or datetime.now()

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="Mono", fontName=_summary_font(), fontSize=9, leading=12,
                              backColor=colors.HexColor("#f6f8fb"), borderPadding=6))
    styles.add(ParagraphStyle(name="Small", parent=styles["Normal"], fontSize=8,
                              textColor=colors.HexColor("#6b7280")))

    target = str(out) if isinstance(out, Path) else out
    doc = SimpleDocTemplate(target, pagesize=A4,
                            rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=36)
    story = []
    story.append(Paragraph(f"<b>{_escape(REPORT_TITLE)}</b>", styles["Heading2"]))
    story.append(Paragraph(f"<b>Generated:</b> {generated_at.strftime('%Y-%m-%d %H:%M:%S')}", styles["Normal"]))
    story.append(Spacer(1, 10))

    story.append(Paragraph("<b>Summary</b>", styles["Normal"]))
    story.append(Spacer(1, 4))
    story.append(Paragraph(_escape(summary or "No summary").replace("\n", "<br/>"), styles["Mono"]))
    story.append(Spacer(1, 12))

    if chart_png:
        img_width = A4[0] - 40
        story.append(RLImage(io.BytesIO(chart_png), width=img_width, height=img_width / 2))
        story.append(Spacer(1, 12))

    story.append(Paragraph(_escape(REPORT_FOOTER), styles["Small"]))

    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
    return out


def build_report_bytes(**kwargs) -> bytes:
    buf = io.BytesIO()
    try:
        write_pdf(buf, **kwargs)
    except Exception as exc:
        logger.exception("PDF report generation failed")
        raise ExportError(f"PDF failed: {exc}") from exc
    return buf.getvalue()
