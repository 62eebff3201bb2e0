import sys
from typing import Iterable, List, Tuple

import pandas as pd
import streamlit as st

from edgefinder.analysis.scan_opportunities import opportunities_to_frame
from edgefinder.pipeline.simulate_bankroll_growth import (
    run_backtest,
    trajectory_to_frame,
)
from edgefinder.pipeline.value_finder import (
    evaluate_opportunities,
    filter_and_sort,
    summarize_opportunities,
)
from edgefinder.utils.config import DEFAULT_CONFIG_PATH, load_config
from edgefinder.utils.config_schema import Config
from edgefinder.utils.constants import ALL_FILTER
from edgefinder.utils.data_loader import DataLoader
from edgefinder.utils.logger import setup_logging
from edgefinder.utils.models import (
    SORTABLE_FIELDS,
    EvaluatedOpportunity,
    HistoricalBetRecord,
    OpportunityQuery,
    QuotedLine,
)
from edgefinder.utils.risk_management import StakeSizer


def _config_path() -> str:
    for arg in sys.argv[1:]:
        if arg.startswith("config_path="):
            return arg.split("=", 1)[1]
    return DEFAULT_CONFIG_PATH


def filter_options(values: Iterable[str], configured: str) -> Tuple[List[str], int]:
    """Radio choices built from the loaded data, and the index of the configured one."""
    options = [ALL_FILTER] + sorted(set(values) - {ALL_FILTER})
    return options, options.index(configured) if configured in options else 0


@st.cache_data
def load_inputs(
    config_path: str,
) -> Tuple[Config, List[QuotedLine], List[HistoricalBetRecord]]:
    """Wrapper function to cache the config and fixture loading."""
    config = load_config(config_path)
    loader = DataLoader(config.data_paths)
    return config, loader.load_quoted_lines(), loader.load_backtest_history()


def render_kpis(opportunities: List[EvaluatedOpportunity], bankroll: float) -> None:
    stats = summarize_opportunities(opportunities, bankroll)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Events Scanned", stats["events_scanned"])
    col2.metric(
        "+EV Opportunities",
        stats["positive_ev_count"],
        help=f"of {stats['events_scanned']} markets",
    )
    col3.metric("Avg Edge", f"{stats['avg_edge']:.1%}", help="Across +EV bets")
    col4.metric("Max Kelly Stake", f"€{stats['max_kelly_stake']:,.0f}")


def render_scanner(
    opportunities: List[EvaluatedOpportunity], config: Config, bankroll: float
) -> None:
    st.sidebar.header("Scanner Filters")
    defaults = config.scanner
    sports, sport_index = filter_options(
        (o.sport for o in opportunities), defaults.sport_filter
    )
    bookmakers, bookmaker_index = filter_options(
        (o.bookmaker for o in opportunities), defaults.bookmaker_filter
    )

    query = OpportunityQuery(
        sport_filter=st.sidebar.radio("Sport", sports, index=sport_index),
        bookmaker_filter=st.sidebar.radio("Bookmaker", bookmakers, index=bookmaker_index),
        only_positive_ev=st.sidebar.toggle("+EV Only", value=defaults.only_positive_ev),
        sort_key=st.sidebar.selectbox(
            "Sort By", SORTABLE_FIELDS, index=SORTABLE_FIELDS.index(defaults.sort_key)
        ),
        sort_direction=st.sidebar.radio(
            "Direction", ["desc", "asc"], index=["desc", "asc"].index(defaults.sort_direction)
        ),
    )

    rows = filter_and_sort(opportunities, query)
    st.caption(f"{len(rows)} market{'s' if len(rows) != 1 else ''}")
    if not rows:
        st.info("No markets match the current filters.")
        return

    df = opportunities_to_frame(rows, bankroll)
    st.dataframe(
        df[
            [
                "sport",
                "league",
                "event",
                "market",
                "bookmaker",
                "odds",
                "model_prob",
                "implied_prob",
                "ev",
                "kelly",
                "stake",
                "verdict",
            ]
        ].style.format(
            {
                "odds": "{:.2f}",
                "model_prob": "{:.1%}",
                "implied_prob": "{:.1%}",
                "ev": "{:+.2%}",
                "kelly": "{:.2%}",
                "stake": "€{:,.0f}",
            }
        ),
        use_container_width=True,
        hide_index=True,
    )


def render_backtest(records: List[HistoricalBetRecord], config: Config) -> None:
    sim_col1, sim_col2 = st.columns([1, 3])

    with sim_col1:
        st.subheader("Simulation Settings")
        starting_bankroll = st.number_input(
            "Starting Bankroll", value=config.backtest.starting_bankroll, step=100.0
        )
        stake_source = st.selectbox(
            "Stake Source",
            ["record", "kelly"],
            index=["record", "kelly"].index(config.backtest.stake_source),
        )
        kelly_multiplier = st.slider(
            "Kelly Fraction", 0.05, 1.0, config.betting.kelly_multiplier, 0.05
        )
        max_stake_cap = st.slider(
            "Max Stake Cap (% of Bankroll)",
            1,
            100,
            int(round(config.betting.max_stake_fraction * 100)),
            1,
        )

    result = run_backtest(
        starting_bankroll,
        records,
        stake_source=stake_source,
        stake_sizer=StakeSizer(kelly_multiplier, max_stake_cap / 100.0),
    )
    summary = result.summary

    with sim_col2:
        kpi1, kpi2, kpi3, kpi4 = st.columns(4)
        kpi1.metric("Total ROI", f"{summary.roi:+.1%}")
        kpi2.metric("Net Profit", f"€{summary.net_profit:+,.0f}")
        kpi3.metric("Win Rate", f"{summary.win_rate:.1%}")
        kpi4.metric("Final Bankroll", f"€{summary.final_bankroll:,.0f}")

        curve = trajectory_to_frame(result)
        curve["label"] = curve["date"].map(
            lambda d: "Start" if pd.isna(d) else d.strftime("%m-%d")
        )
        st.line_chart(curve.set_index("index")["bankroll"])
        st.caption(
            f"Starting €{starting_bankroll:,.0f} · {summary.total_bets} bets · "
            f"Peak €{summary.peak_bankroll:,.0f} · Max drawdown {summary.max_drawdown:.1%}"
        )

    st.subheader("Bet Log")
    log = curve.iloc[1:].copy()
    log["outcome"] = log["won"].map({True: "WIN", False: "LOSS"})
    st.dataframe(
        log[["label", "event", "stake", "outcome", "profit", "bankroll"]].style.format(
            {"stake": "€{:,.0f}", "profit": "€{:+,.0f}", "bankroll": "€{:,.0f}"}
        ),
        use_container_width=True,
        hide_index=True,
    )


def run() -> None:
    """Main function to run the EdgeFinder Streamlit dashboard."""
    st.set_page_config(layout="wide", page_title="EdgeFinder")
    setup_logging()

    st.title("EdgeFinder")
    st.markdown(
        "Comparing bookmaker odds against model win probabilities to surface value bets. "
        "All odds and probabilities are sample data. Not financial advice."
    )

    try:
        config, lines, records = load_inputs(_config_path())
    except Exception as e:
        st.error(f"Failed to load configuration or data. Error: {e}")
        return

    bankroll = config.betting.bankroll
    sizer = StakeSizer(config.betting.kelly_multiplier, config.betting.max_stake_fraction)
    opportunities = evaluate_opportunities(lines, sizer)

    render_kpis(opportunities, bankroll)

    scanner_tab, backtest_tab = st.tabs(["Live Scanner", "Backtest"])
    with scanner_tab:
        render_scanner(opportunities, config, bankroll)
    with backtest_tab:
        render_backtest(records, config)


if __name__ == "__main__":
    run()
