# src/edgefinder/utils/models.py

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import ALL_FILTER, DEFAULT_SORT_KEY


class QuotedLine(BaseModel):
    """One bookmaker's price for one outcome of one event."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    sport: str
    league: str
    event: str
    market: str
    bookmaker: str
    odds: float = Field(gt=1.0)
    model_prob: float = Field(ge=0.0, le=1.0)
    kickoff: dt.datetime


class EvaluatedOpportunity(QuotedLine):
    """A quoted line with its implied probability, EV and recommended stake fraction."""

    implied_prob: float
    ev: float
    kelly: float

    @property
    def is_value(self) -> bool:
        return self.ev > 0

    def stake_for(self, bankroll: float) -> float:
        return self.kelly * bankroll


class HistoricalBetRecord(BaseModel):
    """A settled wager in a backtest series."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: dt.date
    event: str
    sport: str
    odds: float = Field(gt=1.0)
    model_prob: float = Field(ge=0.0, le=1.0)
    stake_fraction: float = Field(ge=0.0, le=1.0)
    won: bool


class TrajectoryPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    date: Optional[dt.date] = None
    event: Optional[str] = None
    bankroll: float
    stake: float = 0.0
    profit: float = 0.0
    won: bool = False


class BacktestSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    starting_bankroll: float
    final_bankroll: float
    net_profit: float
    roi: float
    win_rate: float
    total_bets: int
    wins: int
    total_staked: float
    peak_bankroll: float
    max_drawdown: float


class BacktestResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    trajectory: List[TrajectoryPoint]
    summary: BacktestSummary


# Fields of EvaluatedOpportunity the scanner table can be ordered by.
SORTABLE_FIELDS = (
    "event",
    "market",
    "bookmaker",
    "sport",
    "league",
    "odds",
    "model_prob",
    "implied_prob",
    "ev",
    "kelly",
    "kickoff",
)


class OpportunityQuery(BaseModel):
    """Filter and sort settings for the opportunity scanner."""

    model_config = ConfigDict(frozen=True)

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
