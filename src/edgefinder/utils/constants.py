# src/edgefinder/utils/constants.py
from enum import Enum

# --- Staking ---
DEFAULT_KELLY_MULTIPLIER = 0.5  # Half-Kelly
DEFAULT_MAX_STAKE_FRACTION = 0.05  # Never stake more than 5% of bankroll

# --- Simulation Defaults ---
DEFAULT_BANKROLL = 1000.0
DEFAULT_STARTING_BANKROLL = 1000.0

# --- Scanner ---
ALL_FILTER = "All"
DEFAULT_SORT_KEY = "ev"


class StakeSource(Enum):
    RECORD = "record"
    KELLY = "kelly"
