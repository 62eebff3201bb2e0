# tests/pipeline/test_simulate_bankroll_growth.py

import datetime as dt
import math

import pandas as pd
import pytest

from edgefinder.pipeline.simulate_bankroll_growth import (
    calculate_max_drawdown,
    run_backtest,
    simulate_bankroll_growth,
    trajectory_to_frame,
)
from edgefinder.utils.betting_math import BettingInputError
from edgefinder.utils.data_loader import DataLoader
from edgefinder.utils.models import HistoricalBetRecord
from edgefinder.utils.risk_management import StakeSizer


def make_record(odds=2.0, stake_fraction=0.02, won=True, day=1, model_prob=0.55):
    return HistoricalBetRecord(
        date=dt.date(2026, 1, day),
        event=f"Event {day}",
        sport="Football",
        odds=odds,
        model_prob=model_prob,
        stake_fraction=stake_fraction,
        won=won,
    )


@pytest.fixture
def sample_bets():
    """Win, Loss, Win."""
    return [
        make_record(odds=2.5, stake_fraction=0.05, won=True, day=1),
        make_record(odds=1.8, stake_fraction=0.025, won=False, day=2),
        make_record(odds=3.0, stake_fraction=0.04, won=True, day=3),
    ]


def test_single_winning_bet():
    result = run_backtest(1000, [make_record(odds=2.0, stake_fraction=0.02, won=True)])

    # Stake = 20, Profit = 20 * (2.0 - 1) = 20
    assert result.trajectory[1].stake == pytest.approx(20.0)
    assert result.summary.final_bankroll == pytest.approx(1020.0)
    assert result.summary.roi == pytest.approx(0.02)
    assert result.summary.net_profit == pytest.approx(20.0)
    assert result.summary.win_rate == 1.0


def test_single_losing_bet():
    result = run_backtest(1000, [make_record(odds=2.0, stake_fraction=0.02, won=False)])

    assert result.summary.final_bankroll == pytest.approx(980.0)
    assert result.summary.roi == pytest.approx(-0.02)
    assert result.summary.net_profit == pytest.approx(-20.0)
    assert result.summary.win_rate == 0.0
    assert result.trajectory[1].profit == pytest.approx(-20.0)


def test_stakes_compound_on_running_bankroll(sample_bets):
    result = run_backtest(100.0, sample_bets)

    # Bet 1 (Win): Stake=100*0.05=5, Profit=5*1.5=7.5, Bankroll=107.5
    # Bet 2 (Loss): Stake=107.5*0.025=2.6875, Bankroll=104.8125
    # Bet 3 (Win): Stake=104.8125*0.04=4.1925, Profit=8.385, Bankroll=113.1975
    bankrolls = [point.bankroll for point in result.trajectory]
    assert bankrolls == pytest.approx([100.0, 107.5, 104.8125, 113.1975])
    assert [p.profit for p in result.trajectory[1:]] == pytest.approx([7.5, -2.6875, 8.385])
    assert result.summary.total_staked == pytest.approx(5 + 2.6875 + 4.1925)
    assert result.summary.wins == 2
    assert result.summary.win_rate == pytest.approx(2 / 3)


def test_trajectory_points_follow_record_order(sample_bets):
    result = run_backtest(100.0, sample_bets)

    start = result.trajectory[0]
    assert (start.index, start.date, start.bankroll, start.won) == (0, None, 100.0, False)
    assert [p.index for p in result.trajectory] == [0, 1, 2, 3]
    assert [p.date for p in result.trajectory[1:]] == [r.date for r in sample_bets]
    assert [p.won for p in result.trajectory[1:]] == [True, False, True]


def test_order_matters():
    bets = [make_record(odds=5.0, stake_fraction=0.5, won=True, day=1),
            make_record(odds=1.5, stake_fraction=0.5, won=False, day=2)]
    forward = run_backtest(100, bets).trajectory
    backward = run_backtest(100, list(reversed(bets))).trajectory
    # Same final value (stakes are proportional) but a different path
    assert forward[-1].bankroll == pytest.approx(backward[-1].bankroll)
    assert forward[1].bankroll != backward[1].bankroll


def test_empty_history_returns_start_point_only():
    result = run_backtest(1000, [])

    assert len(result.trajectory) == 1
    assert result.trajectory[0].bankroll == 1000
    assert result.summary.roi == 0
    assert result.summary.win_rate == 0
    assert result.summary.total_bets == 0
    assert result.summary.final_bankroll == 1000


def test_backtest_is_deterministic(data_paths):
    records = DataLoader(data_paths).load_backtest_history()
    first = run_backtest(1000, records)
    second = run_backtest(1000, records)
    assert first.trajectory == second.trajectory
    assert first.summary == second.summary


def test_bundled_history_matches_compounded_growth(data_paths):
    records = DataLoader(data_paths).load_backtest_history()
    result = run_backtest(1000, records)

    growth = math.prod(
        1 + r.stake_fraction * (r.odds - 1) if r.won else 1 - r.stake_fraction
        for r in records
    )
    assert result.summary.total_bets == 22
    assert result.summary.wins == 15
    assert result.summary.win_rate == pytest.approx(15 / 22)
    assert result.summary.final_bankroll == pytest.approx(1000 * growth)
    assert result.summary.roi == pytest.approx(growth - 1)
    assert result.summary.peak_bankroll >= result.summary.final_bankroll
    assert result.summary.max_drawdown < 0


def test_mappings_are_accepted():
    result = run_backtest(
        500,
        [{"date": "2026-01-05", "event": "A vs B", "sport": "Tennis", "odds": 3.0,
          "model_prob": 0.4, "stake_fraction": 0.1, "won": True}],
    )
    assert result.summary.final_bankroll == pytest.approx(600.0)
    assert result.trajectory[1].date == dt.date(2026, 1, 5)


@pytest.mark.parametrize(
    "bad_field", [{"odds": 1.0}, {"odds": 0.5}, {"stake_fraction": 1.5},
                  {"stake_fraction": -0.1}, {"model_prob": 2.0}]
)
def test_malformed_record_rejects_whole_series(bad_field):
    good = {"date": "2026-01-05", "event": "A vs B", "sport": "Tennis", "odds": 2.0,
            "model_prob": 0.5, "stake_fraction": 0.02, "won": True}
    with pytest.raises(BettingInputError, match="#1"):
        run_backtest(1000, [good, {**good, **bad_field}])


def test_constructed_record_is_revalidated():
    bad = HistoricalBetRecord.model_construct(
        date=dt.date(2026, 1, 1), event="X", sport="Football", odds=1.0,
        model_prob=0.5, stake_fraction=0.02, won=True,
    )
    with pytest.raises(BettingInputError, match="#0"):
        run_backtest(1000, [bad])


@pytest.mark.parametrize("bankroll", [0, -100, math.inf, math.nan])
def test_rejects_non_positive_bankroll(bankroll):
    with pytest.raises(BettingInputError):
        run_backtest(bankroll, [make_record()])


def test_rejects_unknown_stake_source():
    with pytest.raises(BettingInputError, match="stake source"):
        run_backtest(1000, [make_record()], stake_source="martingale")


def test_kelly_stake_source_ignores_record_fraction():
    # p=0.52 at evens: half-Kelly = 0.02, whatever the record says
    bet = make_record(odds=2.0, stake_fraction=0.5, won=True, model_prob=0.52)

    by_record = run_backtest(1000, [bet], stake_source="record")
    by_kelly = run_backtest(1000, [bet], stake_source="kelly")

    assert by_record.summary.final_bankroll == pytest.approx(1500.0)
    assert by_kelly.summary.final_bankroll == pytest.approx(1020.0)


def test_kelly_stake_source_uses_given_sizer():
    bet = make_record(odds=2.0, stake_fraction=0.0, won=False, model_prob=0.6)
    sizer = StakeSizer(kelly_multiplier=1.0, max_stake_fraction=0.1)

    result = run_backtest(1000, [bet], stake_source="kelly", stake_sizer=sizer)

    # Full Kelly 0.2, capped to 0.1
    assert result.trajectory[1].stake == pytest.approx(100.0)
    assert result.summary.final_bankroll == pytest.approx(900.0)


def test_calculate_max_drawdown():
    peak, max_dd = calculate_max_drawdown(pd.Series([100.0, 120.0, 90.0, 110.0, 130.0]))
    assert peak == 130.0
    assert max_dd == pytest.approx(-0.25)


def test_calculate_max_drawdown_monotonic_growth():
    peak, max_dd = calculate_max_drawdown(pd.Series([100.0, 101.0, 102.0]))
    assert peak == 102.0
    assert max_dd == 0.0


def test_simulate_bankroll_growth_frame():
    df = pd.DataFrame(
        {
            "date": ["2023-01-01", "2023-01-02", "2023-01-03"],
            "event": ["A", "B", "C"],
            "sport": ["Tennis"] * 3,
            "odds": [2.5, 1.8, 3.0],
            "model_prob": [0.5, 0.6, 0.4],
            "stake_fraction": [0.05, 0.025, 0.04],
            "won": [True, False, True],
        }
    )
    result_df = simulate_bankroll_growth(df, 100.0)

    assert result_df["bankroll"].tolist() == pytest.approx([107.5, 104.8125, 113.1975])
    assert result_df["profit"].tolist() == pytest.approx([7.5, -2.6875, 8.385])
    assert "bankroll" not in df.columns


def test_simulate_bankroll_growth_empty_frame():
    result_df = simulate_bankroll_growth(pd.DataFrame(), 100.0)
    assert result_df.empty
    assert {"stake", "profit", "bankroll"} <= set(result_df.columns)


def test_trajectory_to_frame(sample_bets):
    frame = trajectory_to_frame(run_backtest(100.0, sample_bets))
    assert len(frame) == 4
    assert list(frame["index"]) == [0, 1, 2, 3]
    assert frame["bankroll"].iloc[-1] == pytest.approx(113.1975)
