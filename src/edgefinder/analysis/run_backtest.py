# src/edgefinder/analysis/run_backtest.py

from edgefinder.pipeline.simulate_bankroll_growth import (
    run_backtest,
    trajectory_to_frame,
)
from edgefinder.utils.config_schema import Config
from edgefinder.utils.data_loader import DataLoader
from edgefinder.utils.logger import log_info, log_success, log_warning
from edgefinder.utils.models import BacktestResult
from edgefinder.utils.risk_management import StakeSizer


def print_report(result: BacktestResult, title: str) -> None:
    """Prints a standardized backtest performance report."""
    summary = result.summary
    print(f"\n{title}")
    print("-" * 50)
    print(f"{'Starting Bankroll:':<28} {summary.starting_bankroll:.2f}")
    print(f"{'Total Bets Placed:':<28} {summary.total_bets}")
    print(f"{'Win Rate:':<28} {summary.win_rate:.2%}")
    print(f"{'Total Staked:':<28} {summary.total_staked:.2f}")
    print(f"{'Net Profit:':<28} {summary.net_profit:+.2f}")
    print(f"{'Return on Investment (ROI):':<28} {summary.roi:+.2%}")
    print(f"{'Final Bankroll:':<28} {summary.final_bankroll:.2f}")
    print(f"{'Peak Bankroll:':<28} {summary.peak_bankroll:.2f}")
    print(f"{'Max Drawdown:':<28} {summary.max_drawdown:.2%}")
    print("-" * 50)


def format_bet_log(result: BacktestResult) -> str:
    """Renders the per-bet ledger (stake, outcome, P&L, running bankroll) as text."""
    df = trajectory_to_frame(result).iloc[1:].copy()
    if df.empty:
        return "No bets in this backtest."
    df["outcome"] = df["won"].map({True: "WIN", False: "LOSS"})
    return df[["index", "date", "event", "stake", "outcome", "profit", "bankroll"]].to_string(
        index=False, float_format=lambda v: f"{v:,.2f}"
    )


def main(config: Config) -> BacktestResult:
    """Loads the bet history, replays it and prints the report and bet log."""
    params = config.backtest
    records = DataLoader(config.data_paths).load_backtest_history()
    if not records:
        log_warning(
            f"Backtest history at {config.data_paths.backtest_history} is empty; "
            "the bankroll stays at its starting value."
        )

    sizer = StakeSizer(
        kelly_multiplier=config.betting.kelly_multiplier,
        max_stake_fraction=config.betting.max_stake_fraction,
    )
    log_info(
        f"Replaying {len(records)} bets from a bankroll of {params.starting_bankroll:.2f} "
        f"(stake source: {params.stake_source})..."
    )
    result = run_backtest(
        params.starting_bankroll,
        records,
        stake_source=params.stake_source,
        stake_sizer=sizer,
    )

    print_report(result, f"Backtest ({params.stake_source} stakes)")
    print(format_bet_log(result))
    log_success(f"Final bankroll: {result.summary.final_bankroll:.2f}")
    return result
