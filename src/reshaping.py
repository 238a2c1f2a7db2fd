"""
reshaping.py
Wide-to-long reshape of the cleaned neighbourhood table.

The cleaned table has one column per (crime type, year) pair, e.g. "assault 2014".
Each column name is parsed strictly: exactly one separator, a non-empty crime
type, and a four-digit year inside the covered range. Anything else aborts the
run instead of guessing a split point.
"""

import logging

import pandas as pd

from config import COLUMN_SEPARATOR, NEIGHBOURHOOD_COL, YEAR_RANGE
from exceptions import DataIntegrityError, SchemaError

log = logging.getLogger(__name__)

LONG_COLUMNS = ["neighbourhood", "crime_type", "year", "count"]


# ── Column-Name Parser ────────────────────────────────────────────────────────

def parse_feature_column(
    name: str,
    separator: str = COLUMN_SEPARATOR,
    year_range: tuple[int, int] = YEAR_RANGE,
) -> tuple[str, int]:
    """
    Split a feature column name into (crime_type, year).

    >>> parse_feature_column("assault 2014")
    ('assault', 2014)
    """
    if not isinstance(name, str):
        raise SchemaError(str(name), "column name is not text")

    occurrences = name.count(separator)
    if occurrences != 1:
        raise SchemaError(name, f"expected exactly one {separator!r} separator, found {occurrences}")

    crime_type, year_text = name.split(separator)
    if not crime_type:
        raise SchemaError(name, "crime type is empty")
    if len(year_text) != 4 or not year_text.isdigit():
        raise SchemaError(name, f"year part {year_text!r} is not a four-digit year")

    year = int(year_text)
    low, high = year_range
    if not low <= year <= high:
        raise SchemaError(name, f"year {year} outside [{low}, {high}]")

    return crime_type.lower(), year


def parse_feature_columns(columns, separator: str = COLUMN_SEPARATOR,
                          year_range: tuple[int, int] = YEAR_RANGE) -> dict:
    """Parse every feature column; two names mapping to the same pair is a schema error."""
    parsed = {}
    seen = {}
    for col in columns:
        pair = parse_feature_column(col, separator, year_range)
        if pair in seen:
            raise SchemaError(col, f"same crime type and year as {seen[pair]!r}")
        seen[pair] = col
        parsed[col] = pair
    return parsed


# ── Counts ────────────────────────────────────────────────────────────────────

def _validate_counts(values: pd.Series) -> pd.Series:
    counts = pd.to_numeric(values, errors="coerce")

    non_numeric = counts.isna() & values.notna()
    if non_numeric.any():
        raise DataIntegrityError(f"{non_numeric.sum():,} crime counts are not numeric")

    present = counts.dropna()
    if (present < 0).any():
        raise DataIntegrityError(f"{(present < 0).sum():,} crime counts are negative")
    if (present % 1 != 0).any():
        raise DataIntegrityError(f"{(present % 1 != 0).sum():,} crime counts are not whole numbers")
    return counts


# ── Reshape ───────────────────────────────────────────────────────────────────

def check_long_row_count(clean_df: pd.DataFrame, long_df: pd.DataFrame,
                         key: str = NEIGHBOURHOOD_COL):
    n_features = len([c for c in clean_df.columns if c != key])
    expected = len(clean_df) * n_features
    if len(long_df) != expected:
        raise DataIntegrityError(
            f"Reshape produced {len(long_df):,} records, expected "
            f"{len(clean_df):,} neighbourhoods × {n_features} columns = {expected:,}"
        )


def reshape_to_long(
    clean_df: pd.DataFrame,
    key: str = NEIGHBOURHOOD_COL,
    separator: str = COLUMN_SEPARATOR,
    year_range: tuple[int, int] = YEAR_RANGE,
) -> pd.DataFrame:
    """
    One record per (neighbourhood, feature column) with a non-missing value,
    ordered by cleaned row order, then by column order.
    """
    if key not in clean_df.columns:
        raise DataIntegrityError(f"Cleaned table is missing the key column {key!r}")

    feature_cols = [c for c in clean_df.columns if c != key]
    if not feature_cols:
        raise DataIntegrityError("Cleaned table has no crime-count columns")

    parsed = parse_feature_columns(feature_cols, separator, year_range)
    col_order = {c: i for i, c in enumerate(feature_cols)}

    wide = clean_df.reset_index(drop=True)
    long = wide.melt(id_vars=[key], value_vars=feature_cols,
                     var_name="column", value_name="count", ignore_index=False)
    long["_row"] = long.index
    long["_col"] = long["column"].map(col_order)
    long = long.sort_values(["_row", "_col"], kind="stable").reset_index(drop=True)

    long["count"] = _validate_counts(long["count"])
    long = long.dropna(subset=["count"])

    long["crime_type"] = long["column"].map(lambda c: parsed[c][0])
    long["year"] = long["column"].map(lambda c: parsed[c][1]).astype("int64")
    long["count"] = long["count"].astype("int64")
    long = long.rename(columns={key: "neighbourhood"})[LONG_COLUMNS].reset_index(drop=True)

    check_long_row_count(wide, long, key)
    log.info(f"Reshaped {len(wide):,} neighbourhoods × {len(feature_cols)} columns "
             f"→ {len(long):,} long records")
    return long
