import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series
from typing import cast

from .logger import log_info, log_error, log_success

ISO_DATE = r"^\d{4}-\d{2}-\d{2}$"
ISO_DATETIME = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2})?(\.\d+)?(Z|[+-]\d{2}:?\d{2})?$"

# Accepted spellings of a settled outcome in the history file.
WON_VALUES = {"true": True, "True": True, "1": True, "false": False, "False": False, "0": False}


class QuotedLinesSchema(pa.DataFrameModel):
    """Schema for bookmaker quotes paired with model probabilities."""

    id: Series[str] = pa.Field(nullable=False, unique=True)
    sport: Series[str] = pa.Field(nullable=False)
    league: Series[str] = pa.Field(nullable=False)
    event: Series[str] = pa.Field(nullable=False)
    market: Series[str] = pa.Field(nullable=False)
    bookmaker: Series[str] = pa.Field(nullable=False)
    odds: Series[float] = pa.Field(gt=1.0, coerce=True)
    model_prob: Series[float] = pa.Field(ge=0, le=1, coerce=True)
    kickoff: Series[str] = pa.Field(str_matches=ISO_DATETIME)

    class Config:
        strict = "filter"
        coerce = True


class BacktestHistorySchema(pa.DataFrameModel):
    """Schema for the settled bets replayed by the backtest."""

    date: Series[str] = pa.Field(str_matches=ISO_DATE)
    event: Series[str] = pa.Field(nullable=False)
    sport: Series[str] = pa.Field(nullable=False)
    odds: Series[float] = pa.Field(gt=1.0, coerce=True)
    model_prob: Series[float] = pa.Field(ge=0, le=1, coerce=True)
    stake_fraction: Series[float] = pa.Field(ge=0, le=1, coerce=True)
    won: Series[str] = pa.Field(isin=list(WON_VALUES))

    class Config:
        strict = "filter"
        coerce = True


SCHEMA_REGISTRY = {
    "quoted_lines": QuotedLinesSchema,
    "backtest_history": BacktestHistorySchema,
}


def validate_data(df: pd.DataFrame, schema_name: str, context: str) -> pd.DataFrame:
    """
    Validates a DataFrame against a specified schema from the registry.
    """
    if schema_name not in SCHEMA_REGISTRY:
        raise ValueError(f"Schema '{schema_name}' not found in registry.")

    schema = SCHEMA_REGISTRY[schema_name]
    try:
        log_info(f"Validating schema for: {context}...")
        validated_df = schema.validate(df, lazy=True)
        log_success(f"Schema validation successful for: {context}")
        return cast(pd.DataFrame, validated_df)
    except pa.errors.SchemaErrors as err:
        log_error(f"Schema validation failed for: {context}")

        failure_cases = err.failure_cases
        failure_cases["failure_case"] = failure_cases["failure_case"].astype(str)

        log_error("Validation error summary:")
        log_error(
            failure_cases.groupby(["column", "check"])["failure_case"]
            .first()
            .to_string()
        )
        raise
