import altair as alt
import pandas as pd

from tceq_analyzer.utils import ProjectType

ONSITE_CATEGORIES = ["Other", "OGI camera"]
ONSITE_COLORS = ["#bdbdbd", "#d95f02"]

TYPE_ORDER = [t.value for t in ProjectType]
TYPE_COLORS = ["#d95f02", "#7570b3", "#1b9e77"]

# measure -> (column, axis title)
PROJECT_MEASURES = {
    "projects": ("projects", "Monitoring projects"),
    "days": ("days", "Days monitored"),
}


def projects_chart(df: pd.DataFrame, measure: str = "projects") -> alt.Chart:
    """
    Stacked bars of monitoring projects per calendar year, one segment per
    project type. `measure` picks the bar height: "projects" or "days".
    """
    if measure not in PROJECT_MEASURES:
        raise ValueError(f"Unknown measure '{measure}', expected one of {sorted(PROJECT_MEASURES)}")
    column, title = PROJECT_MEASURES[measure]

    # first type in TYPE_ORDER sits at the bottom of each stack
    stack_rank = {t: i for i, t in enumerate(TYPE_ORDER)}
    data = df.assign(type_order=df["type"].astype(str).map(stack_rank))

    return alt.Chart(data).mark_bar().encode(
        x=alt.X("year:O", title="Year", axis=alt.Axis(labelAngle=0)),
        y=alt.Y(f"{column}:Q", title=title, stack="zero"),
        color=alt.Color(
            "type:N",
            title="Project type",
            scale=alt.Scale(domain=TYPE_ORDER, range=TYPE_COLORS),
            sort=TYPE_ORDER,
        ),
        order=alt.Order("type_order:Q", sort="ascending"),
        tooltip=["year:O", "type:N", f"{column}:Q"],
    ).properties(width=600, height=360, title=f"{title} by year")


def onsite_chart(df: pd.DataFrame) -> alt.Chart:
    """Stacked bars of on-site investigations per fiscal year, Other beneath OGI camera."""
    stack_rank = {c: i for i, c in enumerate(ONSITE_CATEGORIES)}
    data = df.assign(category_order=df["category"].astype(str).map(stack_rank))

    return alt.Chart(data).mark_bar().encode(
        x=alt.X("fiscal_year:O", title="Fiscal year", axis=alt.Axis(labelAngle=0)),
        y=alt.Y("investigations:Q", title="On-site investigations", stack="zero"),
        color=alt.Color(
            "category:N",
            title="Investigation",
            scale=alt.Scale(domain=ONSITE_CATEGORIES, range=ONSITE_COLORS),
            sort=ONSITE_CATEGORIES,
        ),
        order=alt.Order("category_order:Q", sort="ascending"),
        tooltip=["fiscal_year:O", "category:N", "investigations:Q"],
    ).properties(width=600, height=360, title="On-site investigations using OGI cameras")


def van_summary_table(summary: pd.DataFrame) -> pd.DataFrame:
    """Formats the regional van summary as a one-row presentation table."""
    row = summary.iloc[0]

    def fmt(value):
        if pd.isna(value):
            return ""
        ts = pd.Timestamp(value)
        return f"{ts:%B} {ts.day}, {ts.year}"

    return pd.DataFrame(
        {
            "Investigations": [f"{int(row['investigations']):,}"],
            "First status date": [fmt(row["first_status_date"])],
            "Last status date": [fmt(row["last_status_date"])],
        }
    )
