import pytest

from tceq_analyzer.config import ReportConfig
from tceq_analyzer.db_loader import connect

PROJECTS_CSV = """start1,end1,start2,end2,emergency_response,notes
01/01/2020,01/10/2020,,,,Routine survey of Houston Ship Channel
01/01/2015,01/05/2015,02/01/2015,02/03/2015,,No Summary Report was written
03/01/2020,03/02/2020,,,Yes,no summary report
06/10/2021,06/01/2021,,,,dates entered backwards
05/01/2023,05/03/2023,,,,current year trip
not a date,01/02/2021,,,,bad start date
"""

OGI_CSV = """status_date,investigation_number
08/31/2021,100
09/01/2021,100
09/01/2021,101
10/15/2021,101
08/31/2022,102
09/01/2022,103
"""

ONSITE_CSV = """fiscal_year,total_count
2021,10
2022,100
2024,50
"""

VAN_CSV = """status_date,investigation_number
01/15/2019,A1
03/02/2020,A2
03/02/2020,A2
12/31/2020,A3
"""


@pytest.fixture
def con():
    """Fresh in-memory DuckDB connection."""
    connection = connect()
    yield connection
    connection.close()


@pytest.fixture
def data_dir(tmp_path):
    """A data directory holding a small copy of each CSV export."""
    d = tmp_path / "data"
    d.mkdir()
    (d / "monitoring_projects.csv").write_text(PROJECTS_CSV)
    (d / "ogi_investigations.csv").write_text(OGI_CSV)
    (d / "onsite_investigation_counts.csv").write_text(ONSITE_CSV)
    (d / "regional_van_investigations.csv").write_text(VAN_CSV)
    return d


@pytest.fixture
def config(data_dir, tmp_path):
    return ReportConfig(data_dir=data_dir, output_dir=tmp_path / "output", cutoff_year=2023, cutoff_fiscal_year=2023)
