from pathlib import Path

import streamlit as st

from tceq_analyzer.charts import onsite_chart, projects_chart
from tceq_analyzer.config import ReportConfig
from tceq_analyzer.report import Report, build_report

st.set_page_config(
    page_title="TCEQ Monitoring: Mobile and OGI Investigations",
    layout="wide",
    page_icon="🔎"
)

# ---------------------------
# Caching Wrappers
# ---------------------------
@st.cache_data
def cached_build_report(data_dir: str, cutoff_year: int, cutoff_fiscal_year: int) -> Report:
    config = ReportConfig.from_env().model_copy(
        update={
            "data_dir": Path(data_dir),
            "cutoff_year": cutoff_year,
            "cutoff_fiscal_year": cutoff_fiscal_year,
        }
    )
    return build_report(config)

# ---------------------------
# Sidebar - User Controls
# ---------------------------
defaults = ReportConfig.from_env()

with st.sidebar:
    st.title("Controls")
    data_dir = st.text_input("Data directory", value=str(defaults.data_dir))
    cutoff_year = st.number_input(
        "First incomplete year",
        value=defaults.cutoff_year,
        step=1,
        help="Projects starting in this year or later are left out of the yearly charts."
    )
    cutoff_fiscal_year = st.number_input(
        "First incomplete fiscal year",
        value=defaults.cutoff_fiscal_year,
        step=1,
        help="On-site investigation totals from this fiscal year on are left out."
    )
    measure = st.radio(
        "Project chart measure",
        ["projects", "days"],
        format_func=lambda m: "Project count" if m == "projects" else "Days monitored"
    )
    if st.button("Reload Data"):
        cached_build_report.clear()

# ---------------------------
# Main Container - Data Displays
# ---------------------------
st.title("TCEQ Air Monitoring")

try:
    report = cached_build_report(data_dir, int(cutoff_year), int(cutoff_fiscal_year))
except FileNotFoundError as e:
    st.error(str(e))
    st.stop()

# KPI Metrics
st.subheader("KPI Metrics")
ccols = st.columns(len(report.kpis))
for i, met in enumerate(report.kpis):
    val = met.value
    ccols[i].metric(met.metric, f"{val:,.1f}" if "%" in met.metric else f"{int(val):,}")

# Charts
st.subheader("Mobile Monitoring Projects")
if report.projects_by_year.empty:
    st.write("No project data before the cutoff year.")
else:
    st.altair_chart(projects_chart(report.projects_by_year, measure), use_container_width=True)

st.subheader("On-Site Investigations")
if report.onsite_breakdown.empty:
    st.write("No fiscal years in common between the on-site totals and OGI investigations.")
else:
    st.altair_chart(onsite_chart(report.onsite_breakdown), use_container_width=True)

# Table
st.subheader("Regional Monitoring Van")
st.table(report.van_table)

st.markdown("---")
st.write("Source: TCEQ records obtained through public information requests.")
