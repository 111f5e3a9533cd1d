import math
from datetime import date

import pandas as pd

from tceq_analyzer.utils import (
    ProjectType,
    add_fiscal_year,
    add_project_fields,
    fiscal_year,
    project_duration,
    project_type,
)


def test_emergency_flag_wins_over_notes():
    """Any emergency-response value tags the project, whatever the notes say."""
    assert project_type("Yes", "no summary report") == ProjectType.EMERGENCY_RESPONSE
    assert project_type("X", None) == ProjectType.EMERGENCY_RESPONSE
    assert project_type(1.0, "routine") == ProjectType.EMERGENCY_RESPONSE


def test_no_summary_report_any_case():
    assert project_type(None, "NO SUMMARY REPORT on file") == ProjectType.NO_SUMMARY_REPORT
    assert project_type(float("nan"), "Trip had No Summary Report.") == ProjectType.NO_SUMMARY_REPORT


def test_missing_fields_fall_through_to_proactive():
    assert project_type(None, None) == ProjectType.PROACTIVE_MONITORING
    assert project_type("   ", float("nan")) == ProjectType.PROACTIVE_MONITORING
    assert project_type(pd.NA, "summary report sent") == ProjectType.PROACTIVE_MONITORING


def test_single_period_duration_is_inclusive():
    assert project_duration(date(2020, 1, 1), date(2020, 1, 10)) == 10


def test_two_period_duration_sums_both_spans():
    duration = project_duration(
        date(2015, 1, 1), date(2015, 1, 5), date(2015, 2, 1), date(2015, 2, 3)
    )
    assert duration == 8


def test_negative_duration_passes_through():
    """End dates before start dates are kept as entered."""
    assert project_duration(date(2021, 6, 10), date(2021, 6, 1)) == -8


def test_missing_dates_propagate():
    assert math.isnan(project_duration(date(2020, 1, 1), None))
    assert math.isnan(project_duration(date(2020, 1, 1), date(2020, 1, 2), date(2020, 2, 1), pd.NaT))
    # no second start means a single period, even if end2 was filled in
    assert project_duration(date(2020, 1, 1), date(2020, 1, 2), pd.NaT, date(2020, 2, 1)) == 2


def test_fiscal_year_boundary_is_september_first():
    assert fiscal_year(date(2022, 8, 31)) == 2022
    assert fiscal_year(date(2022, 9, 1)) == 2023
    assert fiscal_year(pd.Timestamp("2023-01-01")) == 2023
    assert fiscal_year(pd.NaT) is None


def test_add_project_fields():
    df = pd.DataFrame({
        "start1": pd.to_datetime(["2020-01-01", "2015-01-01", None]),
        "end1": pd.to_datetime(["2020-01-10", "2015-01-05", "2019-01-01"]),
        "start2": pd.to_datetime([None, "2015-02-01", None]),
        "end2": pd.to_datetime([None, "2015-02-03", None]),
        "emergency_response": [None, None, "Y"],
        "notes": ["routine", "no summary report", None],
    })
    out = add_project_fields(df)

    assert list(out["type"]) == [
        "Proactive monitoring", "No summary report", "Emergency response"
    ]
    assert list(out["duration"][:2]) == [10.0, 8.0]
    assert math.isnan(out["duration"][2])
    assert out["year"].tolist()[:2] == [2020, 2015]
    assert pd.isna(out["year"][2])


def test_add_project_fields_without_optional_columns():
    df = pd.DataFrame({
        "start1": pd.to_datetime(["2020-01-01"]),
        "end1": pd.to_datetime(["2020-01-01"]),
    })
    out = add_project_fields(df)
    assert out.loc[0, "type"] == "Proactive monitoring"
    assert out.loc[0, "duration"] == 1.0


def test_negative_duration_is_logged(caplog):
    df = pd.DataFrame({
        "start1": pd.to_datetime(["2021-06-10"]),
        "end1": pd.to_datetime(["2021-06-01"]),
    })
    with caplog.at_level("WARNING"):
        out = add_project_fields(df)
    assert out.loc[0, "duration"] == -8.0
    assert "end date before their start date" in caplog.text


def test_add_fiscal_year():
    df = pd.DataFrame({"status_date": pd.to_datetime(["2022-08-31", "2022-09-01", None])})
    out = add_fiscal_year(df)
    assert out["fiscal_year"].tolist()[:2] == [2022, 2023]
    assert pd.isna(out["fiscal_year"][2])
