# FILE: src/edgefinder/pipeline/value_finder.py

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..utils.betting_math import BettingInputError, calc_ev, implied_probability
from ..utils.constants import ALL_FILTER
from ..utils.models import (
    SORTABLE_FIELDS,
    EvaluatedOpportunity,
    OpportunityQuery,
    QuotedLine,
)
from ..utils.risk_management import StakeSizer

LineLike = Union[QuotedLine, Mapping[str, Any]]


def evaluate_line(
    line: LineLike, stake_sizer: Optional[StakeSizer] = None
) -> EvaluatedOpportunity:
    """Derives implied probability, EV and the recommended stake for one quote."""
    quote = line if isinstance(line, QuotedLine) else QuotedLine.model_validate(line)
    sizer = stake_sizer or StakeSizer()
    return EvaluatedOpportunity(
        **quote.model_dump(),
        implied_prob=implied_probability(quote.odds),
        ev=calc_ev(quote.model_prob, quote.odds),
        kelly=sizer.fraction(quote.model_prob, quote.odds),
    )


def evaluate_opportunities(
    lines: Iterable[LineLike], stake_sizer: Optional[StakeSizer] = None
) -> List[EvaluatedOpportunity]:
    sizer = stake_sizer or StakeSizer()
    return [evaluate_line(line, sizer) for line in lines]


def filter_and_sort(
    opportunities: Iterable[EvaluatedOpportunity], query: OpportunityQuery
) -> List[EvaluatedOpportunity]:
    """
    Applies the scanner filters and ordering, returning a new list.
    The sort is stable, so ties keep their input order in either direction.
    """
    if query.sort_key not in SORTABLE_FIELDS:
        raise BettingInputError(f"Unknown sort key '{query.sort_key}'.")

    rows = list(opportunities)
    if query.sport_filter != ALL_FILTER:
        rows = [o for o in rows if o.sport == query.sport_filter]
    if query.bookmaker_filter != ALL_FILTER:
        rows = [o for o in rows if o.bookmaker == query.bookmaker_filter]
    if query.only_positive_ev:
        rows = [o for o in rows if o.is_value]

    return sorted(
        rows,
        key=lambda o: getattr(o, query.sort_key),
        reverse=query.sort_direction == "desc",
    )


def summarize_opportunities(
    opportunities: Iterable[EvaluatedOpportunity], bankroll: float
) -> Dict[str, Any]:
    """Headline figures for a scan: markets scanned, +EV count, average edge, largest stake."""
    rows = list(opportunities)
    positive = [o for o in rows if o.is_value]
    avg_edge = sum(o.ev for o in positive) / len(positive) if positive else 0.0
    max_stake = max((o.stake_for(bankroll) for o in rows), default=0.0)
    return {
        "events_scanned": len(rows),
        "positive_ev_count": len(positive),
        "avg_edge": avg_edge,
        "max_kelly_stake": max_stake,
    }
