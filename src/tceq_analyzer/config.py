import os
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from tceq_analyzer.utils import fiscal_year


def _current_year() -> int:
    return date.today().year


def _current_fiscal_year() -> int:
    return fiscal_year(date.today())


class ReportConfig(BaseModel):
    """Where the report reads its CSV exports from and writes its output to."""
    data_dir: Path = Path("data")
    output_dir: Path = Path("output")
    projects_file: str = "monitoring_projects.csv"
    ogi_file: str = "ogi_investigations.csv"
    onsite_counts_file: str = "onsite_investigation_counts.csv"
    van_file: str = "regional_van_investigations.csv"
    # Years >= cutoff_year are incomplete and left out of the time series.
    cutoff_year: int = Field(default_factory=_current_year)
    # Same for fiscal years in the on-site investigation series.
    cutoff_fiscal_year: int = Field(default_factory=_current_fiscal_year)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ReportConfig":
        overrides = {}
        if os.getenv("TCEQ_DATA_DIR"):
            overrides["data_dir"] = Path(os.environ["TCEQ_DATA_DIR"])
        if os.getenv("TCEQ_OUTPUT_DIR"):
            overrides["output_dir"] = Path(os.environ["TCEQ_OUTPUT_DIR"])
        if os.getenv("TCEQ_CUTOFF_YEAR"):
            overrides["cutoff_year"] = int(os.environ["TCEQ_CUTOFF_YEAR"])
        if os.getenv("TCEQ_CUTOFF_FISCAL_YEAR"):
            overrides["cutoff_fiscal_year"] = int(os.environ["TCEQ_CUTOFF_FISCAL_YEAR"])
        if os.getenv("TCEQ_LOG_LEVEL"):
            overrides["log_level"] = os.environ["TCEQ_LOG_LEVEL"].upper()
        return cls(**overrides)

    def path_for(self, file_name: str) -> Path:
        return self.data_dir / file_name
