# FILE: src/edgefinder/utils/data_loader.py
import pandas as pd
from typing import List

from .config_schema import DataPaths
from .logger import log_error, log_info, log_success
from .models import HistoricalBetRecord, QuotedLine
from .schema import WON_VALUES, validate_data


class DataLoader:
    """Reads the quote and bet-history fixture files into validated records."""

    def __init__(self, paths: DataPaths):
        self.paths = paths

    def load_quoted_lines_frame(self) -> pd.DataFrame:
        try:
            df = pd.read_csv(self.paths.quoted_lines, dtype={"id": str})
        except FileNotFoundError:
            log_error(f"Quoted lines file not found at {self.paths.quoted_lines}.")
            raise
        df = validate_data(df, "quoted_lines", "Quoted Lines")
        df["kickoff"] = pd.to_datetime(df["kickoff"], utc=True)
        return df

    def load_backtest_history_frame(self) -> pd.DataFrame:
        """Loads the bet history sorted by date; the sort is stable for same-day bets."""
        try:
            df = pd.read_csv(
                self.paths.backtest_history,
                dtype={"won": str},
            )
        except FileNotFoundError:
            log_error(
                f"Backtest history file not found at {self.paths.backtest_history}."
            )
            raise
        df = validate_data(df, "backtest_history", "Backtest History")
        df["won"] = df["won"].map(WON_VALUES).astype(bool)
        df["date"] = pd.to_datetime(df["date"]).dt.date
        return df.sort_values("date", kind="stable").reset_index(drop=True)

    def load_quoted_lines(self) -> List[QuotedLine]:
        df = self.load_quoted_lines_frame()
        lines = [QuotedLine.model_validate(row) for row in df.to_dict("records")]
        log_success(f"Loaded {len(lines)} quoted lines.")
        return lines

    def load_backtest_history(self) -> List[HistoricalBetRecord]:
        df = self.load_backtest_history_frame()
        records = [
            HistoricalBetRecord.model_validate(row) for row in df.to_dict("records")
        ]
        log_info(f"Loaded {len(records)} historical bets.")
        return records
