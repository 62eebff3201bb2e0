# src/edgefinder/analysis/scan_opportunities.py

from typing import List

import pandas as pd
from pydantic import ValidationError

from edgefinder.pipeline.value_finder import (
    evaluate_opportunities,
    filter_and_sort,
    summarize_opportunities,
)
from edgefinder.utils.betting_math import BettingInputError
from edgefinder.utils.config_schema import Config
from edgefinder.utils.data_loader import DataLoader
from edgefinder.utils.logger import log_info, log_warning
from edgefinder.utils.models import EvaluatedOpportunity, OpportunityQuery
from edgefinder.utils.risk_management import StakeSizer


def opportunities_to_frame(
    opportunities: List[EvaluatedOpportunity], bankroll: float
) -> pd.DataFrame:
    """Tabulates opportunities with the stake amount and a BET/SKIP verdict."""
    df = pd.DataFrame([o.model_dump() for o in opportunities])
    if df.empty:
        return df
    df["stake"] = [o.stake_for(bankroll) if o.is_value else 0.0 for o in opportunities]
    df["verdict"] = ["BET" if o.is_value else "SKIP" for o in opportunities]
    return df


def format_table(df: pd.DataFrame) -> str:
    if df.empty:
        return "No markets match the current filters."
    shown = df[
        ["sport", "league", "event", "market", "bookmaker", "odds"]
    ].copy()
    shown["model"] = df["model_prob"].map(lambda v: f"{v:.1%}")
    shown["implied"] = df["implied_prob"].map(lambda v: f"{v:.1%}")
    shown["ev"] = df["ev"].map(lambda v: f"{v:+.2%}")
    shown["kelly"] = df["kelly"].map(lambda v: f"{v:.2%}")
    shown["stake"] = df["stake"].map(lambda v: f"{v:,.0f}")
    shown["verdict"] = df["verdict"]
    return shown.to_string(index=False)


def main(config: Config) -> List[EvaluatedOpportunity]:
    """Evaluates the quoted lines, applies the scanner settings and prints the table."""
    lines = DataLoader(config.data_paths).load_quoted_lines()
    sizer = StakeSizer(
        kelly_multiplier=config.betting.kelly_multiplier,
        max_stake_fraction=config.betting.max_stake_fraction,
    )
    opportunities = evaluate_opportunities(lines, sizer)

    bankroll = config.betting.bankroll
    stats = summarize_opportunities(opportunities, bankroll)
    log_info(
        f"Scanned {stats['events_scanned']} markets: {stats['positive_ev_count']} +EV, "
        f"avg edge {stats['avg_edge']:.1%}, max Kelly stake {stats['max_kelly_stake']:.0f}"
    )

    try:
        query = OpportunityQuery(**config.scanner.model_dump())
    except ValidationError as e:
        raise BettingInputError(f"Invalid scanner settings: {e}") from e
    selected = filter_and_sort(opportunities, query)
    if not selected:
        log_warning("No markets match the current scanner filters.")
    print(format_table(opportunities_to_frame(selected, bankroll)))
    print(f"\n{len(selected)} market{'s' if len(selected) != 1 else ''}")
    return selected
