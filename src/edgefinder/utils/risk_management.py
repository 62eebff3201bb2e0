# src/edgefinder/utils/risk_management.py

from .betting_math import (
    BettingInputError,
    as_finite_float,
    validate_odds,
    validate_probability,
)
from .constants import DEFAULT_KELLY_MULTIPLIER, DEFAULT_MAX_STAKE_FRACTION


def kelly_stake(model_prob: float, decimal_odds: float) -> float:
    """
    Half-Kelly stake as a fraction of bankroll, capped at 5%.

    f* = (b * p - q) / b, with b = odds - 1 and q = 1 - p. The result is
    halved and clamped to [0, 0.05]; a negative Kelly means no bet.
    """
    return StakeSizer().fraction(model_prob, decimal_odds)


def stake_amount(fraction: float, bankroll: float) -> float:
    """Converts a stake fraction into a currency amount for the given bankroll."""
    f = validate_probability(fraction, "Stake fraction")
    current = as_finite_float(bankroll, "Bankroll")
    if current < 0:
        raise BettingInputError(f"Bankroll cannot be negative, got {current}.")
    return current * f


class StakeSizer:
    """Fractional Kelly sizing with a hard cap on the share of bankroll at risk."""

    def __init__(
        self,
        kelly_multiplier: float = DEFAULT_KELLY_MULTIPLIER,
        max_stake_fraction: float = DEFAULT_MAX_STAKE_FRACTION,
    ):
        multiplier = as_finite_float(kelly_multiplier, "Kelly multiplier")
        if not 0.0 < multiplier <= 1.0:
            raise BettingInputError(
                f"Kelly multiplier must lie in (0, 1], got {multiplier}."
            )
        self.kelly_multiplier = multiplier
        self.max_stake_fraction = validate_probability(
            max_stake_fraction, "Max stake fraction"
        )

    def full_kelly(self, model_prob: float, decimal_odds: float) -> float:
        p = validate_probability(model_prob)
        b = validate_odds(decimal_odds) - 1.0
        q = 1.0 - p
        return (b * p - q) / b

    def fraction(self, model_prob: float, decimal_odds: float) -> float:
        scaled = self.full_kelly(model_prob, decimal_odds) * self.kelly_multiplier
        return max(0.0, min(self.max_stake_fraction, scaled))

    def amount(self, model_prob: float, decimal_odds: float, bankroll: float) -> float:
        return stake_amount(self.fraction(model_prob, decimal_odds), bankroll)

    def __repr__(self) -> str:
        return (
            f"StakeSizer(kelly_multiplier={self.kelly_multiplier}, "
            f"max_stake_fraction={self.max_stake_fraction})"
        )
