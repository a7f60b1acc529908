# plots.py
from __future__ import annotations

from typing import List, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from compare import Overlay
from constants import ASCE_COLOR, IS_COLOR
from models import CodeKind, ComputationResult, Profile

Dataset = Tuple[str, Profile, str]  # (label, profile, colour)


def result_dataset(result: ComputationResult) -> Dataset:
    color = IS_COLOR if result.code is CodeKind.PRIMARY else ASCE_COLOR
    return (result.code_label, result.profile, color)


def overlay_datasets(ov: Overlay) -> List[Dataset]:
    return [(ov.label_a, ov.a, IS_COLOR), (ov.label_b, ov.b, ASCE_COLOR)]


def profile_frame(profile: Profile) -> pd.DataFrame:
    return pd.DataFrame(
        {"height_m": [p.height for p in profile], "pressure_N_per_m2": [p.pressure for p in profile]}
    )


def plot_profiles(datasets: List[Dataset], title: str = "Wind pressure profile") -> go.Figure:
    """Pressure against height, one line per dataset."""
    fig = go.Figure()
    for label, profile, color in datasets:
        df = profile_frame(profile)
        fig.add_trace(
            go.Scatter(
                x=df["height_m"], y=df["pressure_N_per_m2"], mode="lines+markers",
                name=label, line=dict(color=color, width=2.5),
            )
        )
    fig.update_layout(
        title=title,
        xaxis_title="Height [m]",
        yaxis_title="Pressure [N/m²]",
        margin=dict(l=20, r=20, t=40, b=20),
    )
    return fig


def plot_pressure_diagram(profile: Profile, title: str = "Pressure diagram") -> go.Figure:
    """Horizontal bars of pressure at each profile height."""
    df = profile_frame(profile)
    df["level"] = [f"{h:g} m" for h in df["height_m"]]
    fig = px.bar(df, x="pressure_N_per_m2", y="level", orientation="h",
                 labels={"pressure_N_per_m2": "Pressure [N/m²]", "level": "Height"}, title=title)
    fig.update_traces(marker_color=IS_COLOR)
    fig.update_layout(margin=dict(l=20, r=20, t=40, b=20))
    return fig
