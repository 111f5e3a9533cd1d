"""
report.py

Builds the monitoring report end to end: load the CSV exports, derive and
aggregate them in DuckDB, and shape the results for the charts and table.

Usage:
    python -m tceq_analyzer.report
"""

import logging
from contextlib import closing
from pathlib import Path
from typing import List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict

from tceq_analyzer.charts import (
    ONSITE_CATEGORIES,
    TYPE_ORDER,
    onsite_chart,
    projects_chart,
    van_summary_table,
)
from tceq_analyzer.config import ReportConfig
from tceq_analyzer.db_loader import build_models, connect, load_tables
from tceq_analyzer.utils import ProjectType

logger = logging.getLogger(__name__)


# --------------------------
# Pydantic Models
# --------------------------
class KPIData(BaseModel):
    metric: str
    value: float


class Report(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    cutoff_year: int
    cutoff_fiscal_year: int
    projects_by_year: pd.DataFrame
    onsite_breakdown: pd.DataFrame
    van_summary: pd.DataFrame
    van_table: pd.DataFrame
    kpis: List[KPIData] = []


# --------------------------
# Helpers
# --------------------------
def fetch_model(con, name: str) -> pd.DataFrame:
    return con.execute(f"SELECT * FROM {name}").fetchdf()


def order_categories(df: pd.DataFrame, column: str, categories: List[str]) -> pd.DataFrame:
    """Turns column into an ordered Categorical so charts and sorts follow `categories`."""
    out = df.copy()
    out[column] = pd.Categorical(out[column], categories=categories, ordered=True)
    return out


def projects_by_year(con) -> pd.DataFrame:
    df = fetch_model(con, "agg__projects_by_year_type")
    df["projects"] = df["projects"].astype(int)
    df = order_categories(df, "type", TYPE_ORDER)
    return df.sort_values(["year", "type"]).reset_index(drop=True)


def onsite_breakdown(con) -> pd.DataFrame:
    df = fetch_model(con, "mart__onsite_breakdown")
    df = order_categories(df, "category", ONSITE_CATEGORIES)
    return df.sort_values(["fiscal_year", "category"]).reset_index(drop=True)


def kpi_metrics(report: Report) -> List[KPIData]:
    """Headline numbers shown above the charts."""
    projects = report.projects_by_year
    total_projects = int(projects["projects"].sum())
    proactive = int(projects.loc[projects["type"] == ProjectType.PROACTIVE_MONITORING.value, "projects"].sum())
    proactive_share = round(100.0 * proactive / total_projects, 1) if total_projects else 0.0

    onsite = report.onsite_breakdown
    ogi_share = 0.0
    if not onsite.empty:
        latest = onsite[onsite["fiscal_year"] == onsite["fiscal_year"].max()]
        total = latest["investigations"].sum()
        ogi = latest.loc[latest["category"] == "OGI camera", "investigations"].sum()
        ogi_share = round(100.0 * ogi / total, 1) if total else 0.0

    return [
        KPIData(metric="Monitoring Projects", value=total_projects),
        KPIData(metric="Days Monitored", value=float(projects["days"].fillna(0).sum())),
        KPIData(metric="Proactive Monitoring Share (%)", value=proactive_share),
        KPIData(metric="OGI Share of On-Site Investigations, Latest FY (%)", value=ogi_share),
        KPIData(metric="Regional Van Investigations", value=int(report.van_summary.loc[0, "investigations"])),
    ]


# --------------------------
# Report
# --------------------------
def build_report(config: Optional[ReportConfig] = None, con=None) -> Report:
    """Builds the report on con, or on a fresh connection that is closed afterwards."""
    config = config or ReportConfig.from_env()
    if con is None:
        with closing(connect()) as own_con:
            return build_report(config, own_con)

    frames = load_tables(con, config)
    build_models(
        con,
        config.cutoff_year,
        loaded=frames.keys(),
        cutoff_fiscal_year=config.cutoff_fiscal_year,
    )

    van_summary = fetch_model(con, "summary__van_investigations")
    report = Report(
        cutoff_year=config.cutoff_year,
        cutoff_fiscal_year=config.cutoff_fiscal_year,
        projects_by_year=projects_by_year(con),
        onsite_breakdown=onsite_breakdown(con),
        van_summary=van_summary,
        van_table=van_summary_table(van_summary),
    )
    report.kpis = kpi_metrics(report)
    logger.info(
        "Report built: %d year/type rows, %d fiscal-year rows",
        len(report.projects_by_year),
        len(report.onsite_breakdown),
    )
    return report


def export_report(report: Report, output_dir: Path) -> List[Path]:
    """Writes the charts and the summary table as standalone HTML files."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    outputs = {
        "projects_by_year.html": projects_chart(report.projects_by_year, "projects"),
        "days_by_year.html": projects_chart(report.projects_by_year, "days"),
        "onsite_breakdown.html": onsite_chart(report.onsite_breakdown),
    }
    written = []
    for filename, chart in outputs.items():
        path = output_dir / filename
        chart.save(str(path))
        written.append(path)

    table_path = output_dir / "regional_van_summary.html"
    table_path.write_text(report.van_table.to_html(index=False), encoding="utf-8")
    written.append(table_path)

    for path in written:
        logger.info("Wrote %s", path)
    return written


def main():
    config = ReportConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    report = build_report(config)
    for kpi in report.kpis:
        print(f"{kpi.metric}: {kpi.value:,.1f}")
    export_report(report, config.output_dir)


if __name__ == "__main__":
    main()
