"""
db_loader.py

Reads the TCEQ public-records CSV exports, derives the analysis columns and
loads each dataset into an in-memory DuckDB database, one table per dataset:

    projects         monitoring projects with type, duration and year
    ogi_investigations   optical gas imaging investigations with fiscal_year
    onsite_counts    pre-aggregated on-site investigation totals by fiscal year
    van_investigations   regional monitoring van investigations
"""

import logging
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import duckdb
import pandas as pd

from tceq_analyzer.config import ReportConfig
from tceq_analyzer.db_models import dependencies, models
from tceq_analyzer.utils import add_fiscal_year, add_project_fields, fiscal_year

logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%Y"

# table name -> (config attribute holding the file name, required columns, date columns)
datasets = {
    "projects": (
        "projects_file",
        ["start1", "end1"],
        ["start1", "end1", "start2", "end2"],
    ),
    "ogi_investigations": (
        "ogi_file",
        ["status_date", "investigation_number"],
        ["status_date"],
    ),
    "onsite_counts": (
        "onsite_counts_file",
        ["fiscal_year", "total_count"],
        [],
    ),
    "van_investigations": (
        "van_file",
        ["status_date", "investigation_number"],
        ["status_date"],
    ),
}


class MissingColumnsError(ValueError):
    """Raised when a CSV export lacks columns the analysis needs."""

    def __init__(self, path, missing: List[str]):
        self.path = path
        self.missing = missing
        super().__init__(f"{path} is missing required column(s): {', '.join(missing)}")


class LoggingConnection:
    def __init__(self, connection):
        self._connection = connection

    def execute(self, query, params=None, *args, **kwargs):
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Executing SQL query: %s", query)
            if params:
                logger.debug("With params: %s", params)
        if params is not None:
            return self._connection.execute(query, params, *args, **kwargs)
        else:
            return self._connection.execute(query, *args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._connection, name)


def connect() -> LoggingConnection:
    """Opens a fresh in-memory DuckDB database wrapped for query logging."""
    return LoggingConnection(duckdb.connect(database=":memory:"))


def parse_dates(df: pd.DataFrame, columns: Iterable[str], source: str = "") -> pd.DataFrame:
    """
    Parses month/day/year text columns into datetimes.

    Blank cells become NaT silently. Text that does not parse also becomes NaT,
    with a warning, so one bad cell does not stop the report.
    """
    out = df.copy()
    for col in columns:
        if col not in out.columns:
            out[col] = pd.NaT
            continue
        raw = out[col]
        parsed = pd.to_datetime(raw, format=DATE_FORMAT, errors="coerce")
        present = raw.notna() & (raw.astype(str).str.strip() != "")
        bad = int((present & parsed.isna()).sum())
        if bad:
            logger.warning("%s: %d value(s) in column '%s' are not %s dates", source, bad, col, DATE_FORMAT)
        out[col] = parsed
    return out


def read_csv_export(path: Path, required: Iterable[str], date_columns: Iterable[str] = ()) -> pd.DataFrame:
    """
    Reads one CSV export. Column names are trimmed and lower-cased.

    Raises:
        FileNotFoundError: the file does not exist.
        MissingColumnsError: a required column is absent.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    df.columns = [c.strip().lower() for c in df.columns]

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise MissingColumnsError(path, missing)

    df = parse_dates(df, date_columns, source=path.name)
    logger.info("Read %d rows from %s", len(df), path.name)
    return df


def prepare(table_name: str, df: pd.DataFrame) -> pd.DataFrame:
    """Applies the per-dataset derivations before a frame is loaded."""
    if table_name == "projects":
        return add_project_fields(df)
    if table_name == "onsite_counts":
        out = df.copy()
        out["fiscal_year"] = pd.to_numeric(out["fiscal_year"]).astype("Int64")
        out["total_count"] = pd.to_numeric(out["total_count"]).astype("Int64")
        return out
    # ogi_investigations, van_investigations
    out = df.copy()
    if table_name == "ogi_investigations":
        out = add_fiscal_year(out, "status_date")
    out["investigation_number"] = out["investigation_number"].str.strip()
    duplicates = int(out["investigation_number"].duplicated().sum())
    if duplicates:
        logger.info("%s: %d row(s) repeat an investigation number", table_name, duplicates)
    return out


def load_frame(con, table_name: str, df: pd.DataFrame) -> None:
    """Creates (or replaces) a DuckDB table holding the rows of df."""
    view_name = f"_{table_name}_df"
    con.register(view_name, df)
    try:
        con.execute(f"CREATE OR REPLACE TABLE {table_name} AS SELECT * FROM {view_name}")
    finally:
        con.unregister(view_name)
    logger.info("Loaded %d records into table '%s'", len(df), table_name)


def load_tables(con, config: ReportConfig, only: Optional[Iterable[str]] = None) -> Dict[str, pd.DataFrame]:
    """
    Reads every dataset named in `datasets` (or just those in `only`), loads it
    into con and returns the prepared frames keyed by table name.

    All files are read before any table is created, so a missing file stops
    the run before anything is aggregated.
    """
    names = list(only) if only is not None else list(datasets)
    raw = {}
    for name in names:
        attr, required, date_columns = datasets[name]
        raw[name] = read_csv_export(config.path_for(getattr(config, attr)), required, date_columns)

    frames = {}
    for name, df in raw.items():
        frames[name] = prepare(name, df)
        load_frame(con, name, frames[name])
    return frames


def build_models(
    con,
    cutoff_year: int,
    loaded: Optional[Iterable[str]] = None,
    cutoff_fiscal_year: Optional[int] = None,
) -> List[str]:
    """
    Creates every table in db_models.models, in declaration order, skipping
    models whose source tables were not loaded. Returns the names built.

    Calendar years from cutoff_year on and fiscal years from
    cutoff_fiscal_year on are left out; the fiscal cutoff defaults to the
    fiscal year in progress today.
    """
    if cutoff_fiscal_year is None:
        cutoff_fiscal_year = fiscal_year(date.today())
    available = set(loaded) if loaded is not None else set(datasets)
    built = []
    for model, spec in models.items():
        if not dependencies[model] <= available:
            logger.debug("Skipping model %s; source tables not loaded", model)
            continue
        query = spec["query"].format(
            cutoff_year=int(cutoff_year),
            cutoff_fiscal_year=int(cutoff_fiscal_year),
        )
        if spec["stmt_type"] == "create":
            query = f"CREATE OR REPLACE TABLE {model} AS (" + query + ")"
        try:
            con.execute(query)
        except duckdb.Error as e:
            logger.error("Building model %s failed: %s", model, e)
            raise
        logger.debug("Table %s successfully created.", model)
        built.append(model)
    return built
