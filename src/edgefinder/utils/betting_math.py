import math

import numpy as np
import pandas as pd

from .constants import DEFAULT_KELLY_MULTIPLIER, DEFAULT_MAX_STAKE_FRACTION


class BettingInputError(ValueError):
    """Raised when odds, probabilities, stakes or bankrolls are out of domain."""


def as_finite_float(value: float, name: str) -> float:
    if isinstance(value, (bool, np.bool_)):
        raise BettingInputError(f"{name} must be a number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise BettingInputError(f"{name} must be a number, got {value!r}.") from e
    if not math.isfinite(number):
        raise BettingInputError(f"{name} must be finite, got {value!r}.")
    return number


def validate_odds(decimal_odds: float) -> float:
    """
    Returns the odds as a float, rejecting anything that is not a finite
    decimal price strictly above 1.0 (a price of 1.0 pays nothing back).
    """
    odds = as_finite_float(decimal_odds, "Decimal odds")
    if odds <= 1.0:
        raise BettingInputError(f"Decimal odds must be greater than 1.0, got {odds}.")
    return odds


def validate_probability(prob: float, name: str = "Model probability") -> float:
    p = as_finite_float(prob, name)
    if not 0.0 <= p <= 1.0:
        raise BettingInputError(f"{name} must lie in [0, 1], got {p}.")
    return p


def implied_probability(decimal_odds: float) -> float:
    """Converts decimal odds to the implied probability (bookmaker margin included)."""
    return 1.0 / validate_odds(decimal_odds)


def calc_ev(model_prob: float, decimal_odds: float) -> float:
    """
    Expected value per unit staked: model_prob * odds - 1.
    Positive means the model rates the outcome above the market price.
    """
    return validate_probability(model_prob) * validate_odds(decimal_odds) - 1.0


def add_ev_and_kelly(
    df: pd.DataFrame,
    prob_col: str = "model_prob",
    odds_col: str = "odds",
    kelly_multiplier: float = DEFAULT_KELLY_MULTIPLIER,
    max_fraction: float = DEFAULT_MAX_STAKE_FRACTION,
    inplace: bool = True,
) -> pd.DataFrame:
    """
    Adds implied probability, Expected Value (EV) and capped fractional Kelly
    columns to a DataFrame of quotes.
    """
    if not inplace:
        df = df.copy()

    odds = df[odds_col].astype(float)
    prob = df[prob_col].astype(float)

    df["implied_prob"] = np.where(odds > 1, 1 / odds, np.nan)
    df["expected_value"] = prob * odds - 1

    # b = odds - 1 is zero at odds of 1.0, so those rows never get a stake
    net_odds = (odds - 1).where(odds > 1)
    full_kelly = (net_odds * prob - (1 - prob)) / net_odds
    df["kelly_fraction"] = (
        (full_kelly * kelly_multiplier).fillna(0.0).clip(lower=0.0, upper=max_fraction)
    )

    return df
