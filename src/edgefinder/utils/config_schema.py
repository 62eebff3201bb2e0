# src/edgefinder/utils/config_schema.py

from pydantic import BaseModel, Field, field_validator
from typing import Literal

from .constants import (
    ALL_FILTER,
    DEFAULT_BANKROLL,
    DEFAULT_KELLY_MULTIPLIER,
    DEFAULT_MAX_STAKE_FRACTION,
    DEFAULT_SORT_KEY,
    DEFAULT_STARTING_BANKROLL,
)
from .models import SORTABLE_FIELDS


class DataPaths(BaseModel):
    quoted_lines: str
    backtest_history: str


class Betting(BaseModel):
    bankroll: float = Field(DEFAULT_BANKROLL, gt=0)
    kelly_multiplier: float = Field(DEFAULT_KELLY_MULTIPLIER, gt=0, le=1)
    max_stake_fraction: float = Field(DEFAULT_MAX_STAKE_FRACTION, ge=0, le=1)


class BacktestParams(BaseModel):
    starting_bankroll: float = Field(DEFAULT_STARTING_BANKROLL, gt=0)
    stake_source: Literal["record", "kelly"] = "record"


class ScannerParams(BaseModel):
    sport_filter: str = ALL_FILTER
    bookmaker_filter: str = ALL_FILTER
    only_positive_ev: bool = False
    sort_key: str = DEFAULT_SORT_KEY
    sort_direction: Literal["asc", "desc"] = "desc"

    @field_validator("sort_key")
    @classmethod
    def _check_sort_key(cls, value: str) -> str:
        if value not in SORTABLE_FIELDS:
            raise ValueError(
                f"Unknown sort key '{value}'. Choose one of: {', '.join(SORTABLE_FIELDS)}"
            )
        return value


class Config(BaseModel):
    data_paths: DataPaths
    betting: Betting = Betting()
    backtest: BacktestParams = BacktestParams()
    scanner: ScannerParams = ScannerParams()
