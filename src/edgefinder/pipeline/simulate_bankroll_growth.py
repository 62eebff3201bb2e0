# src/edgefinder/pipeline/simulate_bankroll_growth.py

import pandas as pd
from pydantic import ValidationError
from typing import Any, Iterable, List, Mapping, Optional, Union

from edgefinder.utils.betting_math import BettingInputError, as_finite_float
from edgefinder.utils.constants import StakeSource
from edgefinder.utils.models import (
    BacktestResult,
    BacktestSummary,
    HistoricalBetRecord,
    TrajectoryPoint,
)
from edgefinder.utils.risk_management import StakeSizer

RecordLike = Union[HistoricalBetRecord, Mapping[str, Any]]


def calculate_max_drawdown(bankroll_series: pd.Series) -> tuple[float, float]:
    """Calculates the peak bankroll and the maximum drawdown (as a negative fraction)."""
    if bankroll_series.empty:
        return 0.0, 0.0
    peak = bankroll_series.expanding(min_periods=1).max()
    drawdown = (bankroll_series - peak) / peak
    max_drawdown = drawdown.min()
    peak_bankroll = peak.max()
    return float(peak_bankroll), float(max_drawdown) if pd.notna(max_drawdown) else 0.0


def _coerce_records(records: Iterable[RecordLike]) -> List[HistoricalBetRecord]:
    """Validates every record up front; one bad record rejects the whole series."""
    validated = []
    for i, record in enumerate(records):
        payload = (
            record.model_dump() if isinstance(record, HistoricalBetRecord) else record
        )
        try:
            validated.append(HistoricalBetRecord.model_validate(payload))
        except ValidationError as e:
            raise BettingInputError(f"Backtest record #{i} is malformed: {e}") from e
    return validated


def run_backtest(
    starting_bankroll: float,
    records: Iterable[RecordLike],
    stake_source: Union[str, StakeSource] = StakeSource.RECORD,
    stake_sizer: Optional[StakeSizer] = None,
) -> BacktestResult:
    """
    Replays an ordered series of settled bets into a bankroll trajectory.

    Each bet stakes a fraction of the bankroll as it stood before the bet. With
    stake_source="record" the fraction comes from the record itself; with
    "kelly" it is sized from the record's odds and model probability by the
    given StakeSizer (half-Kelly capped at 5% when none is given).
    """
    start = as_finite_float(starting_bankroll, "Starting bankroll")
    if start <= 0:
        raise BettingInputError(f"Starting bankroll must be positive, got {start}.")

    try:
        source = StakeSource(stake_source)
    except ValueError as e:
        raise BettingInputError(
            f"Unknown stake source '{stake_source}'. Choose 'record' or 'kelly'."
        ) from e
    sizer = stake_sizer or StakeSizer()

    bets = _coerce_records(records)

    bankroll = start
    wins = 0
    total_staked = 0.0
    trajectory = [TrajectoryPoint(index=0, bankroll=start)]

    for i, bet in enumerate(bets, start=1):
        if source is StakeSource.KELLY:
            fraction = sizer.fraction(bet.model_prob, bet.odds)
        else:
            fraction = bet.stake_fraction

        stake = bankroll * fraction
        total_staked += stake
        if bet.won:
            profit = stake * (bet.odds - 1.0)
            wins += 1
        else:
            profit = -stake
        bankroll += profit

        trajectory.append(
            TrajectoryPoint(
                index=i,
                date=bet.date,
                event=bet.event,
                bankroll=bankroll,
                stake=stake,
                profit=profit,
                won=bet.won,
            )
        )

    peak_bankroll, max_drawdown = calculate_max_drawdown(
        pd.Series([point.bankroll for point in trajectory])
    )
    net_profit = bankroll - start
    summary = BacktestSummary(
        starting_bankroll=start,
        final_bankroll=bankroll,
        net_profit=net_profit,
        roi=net_profit / start,
        win_rate=wins / len(bets) if bets else 0.0,
        total_bets=len(bets),
        wins=wins,
        total_staked=total_staked,
        peak_bankroll=peak_bankroll,
        max_drawdown=max_drawdown,
    )
    return BacktestResult(trajectory=trajectory, summary=summary)


def trajectory_to_frame(result: BacktestResult) -> pd.DataFrame:
    """Flattens a backtest trajectory into a DataFrame for charts and reports."""
    return pd.DataFrame([point.model_dump() for point in result.trajectory])


def simulate_bankroll_growth(
    df: pd.DataFrame,
    initial_bankroll: float,
    stake_source: Union[str, StakeSource] = StakeSource.RECORD,
    stake_sizer: Optional[StakeSizer] = None,
) -> pd.DataFrame:
    """
    Runs the backtest over a DataFrame of bets (one row per bet, in date order)
    and returns a copy with 'stake', 'profit' and 'bankroll' columns added.
    """
    if df.empty:
        return df.assign(stake=[], profit=[], bankroll=[])

    result = run_backtest(
        initial_bankroll,
        df.to_dict("records"),
        stake_source=stake_source,
        stake_sizer=stake_sizer,
    )
    settled = result.trajectory[1:]

    out = df.copy()
    out["stake"] = [point.stake for point in settled]
    out["profit"] = [point.profit for point in settled]
    out["bankroll"] = [point.bankroll for point in settled]
    return out
