# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Put 'src' on the path so tests run from a checkout without installing
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from edgefinder.utils.config_schema import DataPaths  # noqa: E402


@pytest.fixture
def data_paths() -> DataPaths:
    """Absolute paths to the bundled sample data files."""
    return DataPaths(
        quoted_lines=str(project_root / "data" / "quoted_lines.csv"),
        backtest_history=str(project_root / "data" / "backtest_history.csv"),
    )
