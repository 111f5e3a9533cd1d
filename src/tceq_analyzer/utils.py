import logging
from enum import Enum
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)

NO_SUMMARY_REPORT = "no summary report"

# Fiscal year N runs from September 1 of year N-1 through August 31 of year N.
FISCAL_YEAR_START_MONTH = 9


class ProjectType(str, Enum):
    """Monitoring project categories, declared in chart stacking order."""
    EMERGENCY_RESPONSE = "Emergency response"
    NO_SUMMARY_REPORT = "No summary report"
    PROACTIVE_MONITORING = "Proactive monitoring"


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


def project_type(emergency_response: Any, notes: Any) -> ProjectType:
    """
    Tags a monitoring project. The first matching rule wins:
      1. any emergency-response value at all
      2. notes mention "no summary report" (any case)
      3. everything else is proactive monitoring
    """
    if not is_missing(emergency_response):
        return ProjectType.EMERGENCY_RESPONSE
    if not is_missing(notes) and NO_SUMMARY_REPORT in str(notes).lower():
        return ProjectType.NO_SUMMARY_REPORT
    return ProjectType.PROACTIVE_MONITORING


def _inclusive_days(start, end) -> float:
    if is_missing(start) or is_missing(end):
        return float("nan")
    return float((pd.Timestamp(end) - pd.Timestamp(start)).days + 1)


def project_duration(start1, end1, start2=None, end2=None) -> float:
    """
    Number of days monitored, counting both endpoints of each period.

    A project with a second period gets the sum of both spans. Missing dates
    give NaN. End dates before start dates are not corrected, so the result
    can be negative.
    """
    first = _inclusive_days(start1, end1)
    if is_missing(start2):
        return first
    return first + _inclusive_days(start2, end2)


def fiscal_year(value) -> Optional[int]:
    """Returns the TCEQ fiscal year of a date, or None when it is missing."""
    if is_missing(value):
        return None
    d = pd.Timestamp(value)
    return d.year + 1 if d.month >= FISCAL_YEAR_START_MONTH else d.year


def add_project_fields(df: pd.DataFrame) -> pd.DataFrame:
    """Adds type, duration and year columns to a monitoring-project frame."""
    out = df.copy()
    for col in ["start2", "end2", "emergency_response", "notes"]:
        if col not in out.columns:
            out[col] = None
    out["type"] = [
        project_type(flag, notes).value
        for flag, notes in zip(out["emergency_response"], out["notes"])
    ]
    out["duration"] = pd.Series(
        [
            project_duration(s1, e1, s2, e2)
            for s1, e1, s2, e2 in zip(out["start1"], out["end1"], out["start2"], out["end2"])
        ],
        index=out.index,
        dtype="float64",
    )
    out["year"] = pd.to_datetime(out["start1"]).dt.year.astype("Int64")

    negative = int((out["duration"] < 0).sum())
    if negative:
        logger.warning("%d project(s) have an end date before their start date", negative)
    return out


def add_fiscal_year(df: pd.DataFrame, date_column: str = "status_date") -> pd.DataFrame:
    """Adds a fiscal_year column derived from date_column."""
    out = df.copy()
    out["fiscal_year"] = pd.Series(
        [fiscal_year(d) for d in out[date_column]], index=out.index, dtype="Int64"
    )
    return out
