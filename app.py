# app.py
# Streamlit dashboard for quick wind pressure profiles (IS 875 / ASCE-GCC)
# Requires: streamlit, pandas, numpy, plotly, matplotlib, reportlab
from __future__ import annotations

import logging
from datetime import datetime, timezone

import streamlit as st

from compare import compare_form
from constants import ASCE_LABEL, IS_LABEL
from errors import ExportError, NotFoundError, ValidationError
from export import CHART_FILENAME, build_export_bundle, csv_filename, to_csv_bytes
from models import CodeKind, InputMode, SpeedUnit
from normalize import FORM_FIELDS, complete_form, to_speed_unit, wind_input_from_form
from plots import overlay_datasets, plot_pressure_diagram, plot_profiles, result_dataset
from profile_model import ProfileModel, summary_line
from reference_data import DEFAULT_REFERENCE
from scenarios import ScenarioStore, new_scenario

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Wind Pressure Calculator", layout="wide")


def _get_version(pkg: str) -> str:
    from importlib.metadata import PackageNotFoundError, version
    try:
        return version(pkg)
    except PackageNotFoundError:
        return "n/a"


@st.cache_resource
def get_model() -> ProfileModel:
    return ProfileModel(DEFAULT_REFERENCE)


@st.cache_resource
def get_store() -> ScenarioStore:
    return ScenarioStore()


model = get_model()
store = get_store()
ref = model.reference

# ---- Session defaults ----
st.session_state.setdefault("f_man_unit", SpeedUnit.MS.value)
for name, default in FORM_FIELDS.items():
    st.session_state.setdefault(f"f_{name}", default)
st.session_state.setdefault("f_tab", CodeKind.PRIMARY.value)
st.session_state.setdefault("f_mode", InputMode.AUTO.value)
st.session_state.setdefault("status", "Ready")

# A saved case is applied before any widget is drawn (widget state is frozen afterwards)
if "pending_load" in st.session_state:
    case = st.session_state.pop("pending_load")
    for name, value in complete_form(case.raw_inputs).items():
        st.session_state[f"f_{name}"] = value
    st.session_state["f_tab"] = case.active_code.value
    st.session_state["f_mode"] = case.mode.value
    st.session_state["status"] = f"Loaded: {case.name}"
    logger.info("Loaded scenario %r", case.name)

# The unit select offers only m/s and mph; blank or unknown units resolve per active code
st.session_state["f_man_unit"] = to_speed_unit(st.session_state["f_man_unit"], CodeKind(st.session_state["f_tab"])).value


def form_values() -> dict:
    return {name: str(st.session_state.get(f"f_{name}", "") or "") for name in FORM_FIELDS}


def current_mode() -> InputMode:
    return InputMode(st.session_state["f_mode"])


def _on_region_change():
    region = st.session_state["f_city"]
    if region in ref.secondary_speeds:
        st.session_state["f_asce_V"] = f"{ref.secondary_speed(region):g}"
        st.session_state["f_tab"] = CodeKind.SECONDARY.value
    elif region in ref.primary_speeds:
        st.session_state["f_tab"] = CodeKind.PRIMARY.value


def _apply_category(target: str, source: str, lookup):
    st.session_state[f"f_{target}"] = f"{lookup(st.session_state[source]):.2f}"


def show_result(kind: str, datasets, summary: str, csv_profile=None, code=None):
    st.session_state.pop("bundle", None)
    st.session_state["last"] = {
        "kind": kind, "datasets": datasets, "summary": summary,
        "csv_profile": csv_profile, "code": code,
    }


# ---- Sidebar: Global inputs ----
st.sidebar.header("Case inputs")
st.sidebar.radio(
    "Code", [CodeKind.PRIMARY.value, CodeKind.SECONDARY.value], key="f_tab", horizontal=True,
    format_func=lambda v: IS_LABEL if v == CodeKind.PRIMARY.value else ASCE_LABEL,
)
st.sidebar.radio("Base speed", [InputMode.AUTO.value, InputMode.MANUAL.value], key="f_mode",
                 horizontal=True, format_func=str.capitalize)

regions = [""] + [name for _group, name, _v in ref.region_options()]


def _region_label(name: str) -> str:
    if not name:
        return "-- pick city --"
    if name in ref.primary_speeds:
        return f"{name} — {ref.primary_speed(name):g} m/s"
    return f"{name} — {ref.secondary_speed(name):g} mph (ASCE/GCC tab)"


if st.session_state["f_city"] not in regions:
    st.session_state["f_city"] = ""
st.sidebar.selectbox("City", regions, key="f_city", format_func=_region_label, on_change=_on_region_change)
st.sidebar.text_input("Building height H (m)", key="f_height", placeholder="e.g. 30")

manual_off = current_mode() is not InputMode.MANUAL
col_sb1, col_sb2 = st.sidebar.columns(2)
col_sb1.text_input("Basic wind speed", key="f_man_v", disabled=manual_off)
col_sb2.selectbox("Unit", ["ms", "mph"], key="f_man_unit", disabled=manual_off,
                  format_func=lambda u: "m/s" if u == "ms" else "mph")

st.title("Wind Pressure Calculator")
st.caption("Quick, approximate wind pressure profiles. Coefficients are simplified "
           "illustrations, not codal values; confirm against the governing code before design use.")

tab_calc, tab_compare, tab_cases, tab_about = st.tabs(
    ["1) Calculate", "2) Compare", "3) Saved cases", "4) About"]
)

# ---- Tab 1: Calculate ----
with tab_calc:
    code = CodeKind(st.session_state["f_tab"])
    # Both sections stay rendered so their field values survive a code switch
    with st.expander("IS 875 (k1 · k2 · k3 · k4)", expanded=code is CodeKind.PRIMARY):
        st.text_input("Vb override (m/s, used when no city is picked)", key="f_is_vb")
        c1, c2, c3, c4 = st.columns(4)
        c1.selectbox("Risk", list(ref.risk_factors), key="risk_cat",
                     on_change=_apply_category, args=("is_k1", "risk_cat", ref.risk_factor))
        c1.text_input("k1", key="f_is_k1")
        c2.selectbox("Terrain category", list(ref.terrain_factors), key="terrain_cat", index=1,
                     on_change=_apply_category, args=("is_k2", "terrain_cat", ref.terrain_factor))
        c2.text_input("k2", key="f_is_k2")
        c3.selectbox("Topography", list(ref.topography_factors), key="topo_cat",
                     on_change=_apply_category, args=("is_k3", "topo_cat", ref.topography_factor))
        c3.text_input("k3", key="f_is_k3")
        c4.text_input("k4", key="f_is_k4")
        w1, w2 = st.columns(2)
        w1.text_input("Width (m)", key="f_is_w")
        w2.text_input("Length (m)", key="f_is_l")
    with st.expander("ASCE / GCC (qz = 0.00256 · Kz · Kd · Kzt · V²)", expanded=code is CodeKind.SECONDARY):
        st.text_input("V (mph, used when no city is picked)", key="f_asce_V")
        c1, c2, c3 = st.columns(3)
        c1.selectbox("Exposure", list(ref.exposure_factors), key="exp_cat", index=1,
                     on_change=_apply_category, args=("asce_exp", "exp_cat", ref.exposure_factor))
        c1.text_input("Exposure factor", key="f_asce_exp", placeholder="0.85")
        c2.text_input("Kd", key="f_asce_kd", placeholder="0.85")
        c3.text_input("Kzt", key="f_asce_kzt", placeholder="1.0")

    if st.button("Calculate"):
        res = model.compute_profile(wind_input_from_form(form_values(), code, current_mode()))
        show_result(code.value, [result_dataset(res)], summary_line(res), res.profile, code)
        st.session_state["status"] = f"Calculated: {res.code_label}"

# ---- Tab 2: Compare ----
with tab_compare:
    st.subheader("IS 875 vs ASCE/GCC")
    st.markdown("Both codes run on the current inputs, resampled onto a shared 13-point height grid.")
    if st.button("Compare"):
        ov = compare_form(model, form_values(), current_mode())
        show_result("compare", overlay_datasets(ov), f"Comparison: {ov.label_a} vs {ov.label_b}")
        st.session_state["status"] = "Calculated: Compare"

# ---- Results (shared) ----
last = st.session_state.get("last")
if last:
    with tab_calc if last["kind"] != "compare" else tab_compare:
        st.plotly_chart(plot_profiles(last["datasets"]), use_container_width=True)
        st.code(last["summary"], language=None)

        with st.expander("Pressure diagram"):
            for label, profile, _color in last["datasets"]:
                st.plotly_chart(plot_pressure_diagram(profile, title=label), use_container_width=True)

        col_dl1, col_dl2, col_dl3 = st.columns(3)
        with col_dl1:
            if last["csv_profile"]:
                st.download_button("Download profile (CSV)", data=to_csv_bytes(last["csv_profile"]),
                                   file_name=csv_filename(last["code"]), mime="text/csv")
            else:
                st.caption("CSV export is available for single-code results.")
        with col_dl2:
            if st.button("Prepare chart & PDF"):
                st.session_state["status"] = "Preparing PDF..."
                try:
                    st.session_state["bundle"] = build_export_bundle(
                        last["datasets"], last["summary"], last["csv_profile"], last["code"],
                        exported_at=datetime.now(timezone.utc),
                    )
                    st.session_state["status"] = "PDF Ready"
                except ExportError as e:
                    st.session_state.pop("bundle", None)
                    st.session_state["status"] = "Ready"
                    st.warning(str(e))
        with col_dl3:
            bundle = st.session_state.get("bundle")
            if bundle is not None:
                st.download_button("Download chart (PNG)", data=bundle.chart_png,
                                   file_name=CHART_FILENAME, mime="image/png")
                st.download_button("Download PDF report", data=bundle.pdf_bytes,
                                   file_name=bundle.pdf_filename, mime="application/pdf")

# ---- Tab 3: Saved cases ----
with tab_cases:
    st.subheader("Save / load cases")
    case_name = st.text_input("Case name", key="case_name")
    if st.button("Save current case"):
        try:
            idx = store.save(new_scenario(case_name, CodeKind(st.session_state["f_tab"]),
                                          current_mode(), form_values()))
            st.success(f"Saved locally (#{idx + 1}).")
        except ValidationError as e:
            st.error(str(e))

    # Always re-read before acting on an index
    cases = store.list()
    if not cases:
        st.info("No saved cases yet.")
    else:
        sel = st.selectbox("Saved cases", list(range(len(cases))), format_func=lambda i: cases[i].label())
        col_a, col_b = st.columns(2)
        if col_a.button("Load"):
            try:
                st.session_state["pending_load"] = store.load_at(sel)
                st.rerun()
            except NotFoundError as e:
                st.error(str(e))
        confirm = col_b.checkbox("Confirm delete")
        if col_b.button("Delete", disabled=not confirm):
            try:
                removed = store.delete_at(sel)
                st.success(f"Deleted {removed.name}.")
                st.rerun()
            except NotFoundError as e:
                st.error(str(e))

st.sidebar.caption(st.session_state["status"])

# ---- Tab 4: About ----
with tab_about:
    st.subheader("About this tool")
    st.markdown(
        """
**Wind Pressure Calculator** estimates a height-vs-pressure profile with two simplified methods:

- **IS 875** — Vz = Vb · k1 · k2 · k3 · k4, Pd = 0.6 · Vz², power-law growth with height (capped at 40 m)
- **ASCE/GCC** — qz = 0.00256 · V² · exposure · Kd · Kzt (psf → N/m²), linear growth with height

Cases are kept locally as a single JSON file. Exports: profile CSV, chart PNG and a PDF summary.
        """
    )
    st.write(
        {
            "streamlit": _get_version("streamlit"),
            "pandas": _get_version("pandas"),
            "numpy": _get_version("numpy"),
            "plotly": _get_version("plotly"),
            "matplotlib": _get_version("matplotlib"),
            "reportlab": _get_version("reportlab"),
        }
    )
