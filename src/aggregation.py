"""
aggregation.py
Reductions over the long crime records.

Sums are exact int64 sums and a missing count contributes zero. Neighbourhood
rows keep the order of the cleaned table, years and categories are ascending /
fixed order, so every aggregate table is reproducible byte for byte.
"""

import logging

import pandas as pd

from crime_taxonomy import CATEGORIES, categorize_crime_type
from exceptions import DataIntegrityError

log = logging.getLogger(__name__)


def _neighbourhood_order(long_df: pd.DataFrame) -> list:
    return long_df["neighbourhood"].drop_duplicates().tolist()


def _sum_counts(df: pd.DataFrame, by: list) -> pd.Series:
    return df.assign(count=df["count"].fillna(0).astype("int64")).groupby(by)["count"].sum()


# ── Categorisation ────────────────────────────────────────────────────────────

def categorize(long_df: pd.DataFrame) -> pd.DataFrame:
    """Attach crime_category (Violent / Non-Violent) to every long record."""
    df = long_df.copy()
    df["crime_category"] = df["crime_type"].map(categorize_crime_type)
    return df


# ── Aggregates ────────────────────────────────────────────────────────────────

def summarize_by_year(long_df: pd.DataFrame) -> pd.DataFrame:
    """One row per neighbourhood, one column per year."""
    table = (
        _sum_counts(long_df, ["neighbourhood", "year"])
        .unstack(fill_value=0)
        .reindex(_neighbourhood_order(long_df))
        .sort_index(axis=1)
    )
    table.columns.name = None
    table.index.name = "neighbourhood"
    return table.astype("int64")


def summarize_by_category(cat_df: pd.DataFrame) -> pd.DataFrame:
    """Violent / Non-Violent totals per neighbourhood."""
    table = (
        _sum_counts(cat_df, ["neighbourhood", "crime_category"])
        .unstack(fill_value=0)
        .reindex(index=_neighbourhood_order(cat_df), columns=list(CATEGORIES), fill_value=0)
    )
    table.columns.name = None
    table.index.name = "neighbourhood"
    return table.astype("int64")


def summarize_category_trend(cat_df: pd.DataFrame) -> pd.DataFrame:
    """City-wide Violent / Non-Violent counts per year."""
    table = (
        _sum_counts(cat_df, ["year", "crime_category"])
        .unstack(fill_value=0)
        .reindex(columns=list(CATEGORIES), fill_value=0)
        .sort_index()
    )
    table.columns.name = None
    table.index.name = "year"
    return table.astype("int64")


def summarize_by_crime_type(long_df: pd.DataFrame) -> pd.DataFrame:
    """City-wide counts per year, one column per crime type."""
    table = (
        _sum_counts(long_df, ["year", "crime_type"])
        .unstack(fill_value=0)
        .sort_index()
        .sort_index(axis=1)
    )
    table.columns.name = None
    table.index.name = "year"
    return table.astype("int64")


def neighbourhood_totals(long_df: pd.DataFrame) -> pd.Series:
    """Total count over every year and crime type, in cleaned row order."""
    totals = _sum_counts(long_df, ["neighbourhood"]).reindex(_neighbourhood_order(long_df))
    totals.name = "total"
    return totals.astype("int64")


# ── Cross-Check ───────────────────────────────────────────────────────────────

def verify_category_totals(long_df: pd.DataFrame, cat_df: pd.DataFrame):
    """
    Violent + Non-Violent must equal the unsplit total for every
    (neighbourhood, year). Raises DataIntegrityError listing the mismatches.
    """
    unsplit = _sum_counts(long_df, ["neighbourhood", "year"])
    split = (
        _sum_counts(cat_df, ["neighbourhood", "year", "crime_category"])
        .groupby(level=["neighbourhood", "year"])
        .sum()
    )
    unsplit, split = unsplit.align(split, fill_value=0)
    mismatched = unsplit[unsplit != split]
    if not mismatched.empty:
        pairs = [f"{nb} {yr}" for nb, yr in mismatched.index[:5]]
        raise DataIntegrityError(
            f"Category sub-totals disagree with totals for {len(mismatched):,} "
            f"(neighbourhood, year) pairs, e.g. {pairs}"
        )
    log.info(f"Category cross-check passed for {len(unsplit):,} (neighbourhood, year) pairs")


def build_aggregates(long_df: pd.DataFrame) -> dict:
    """Run every reduction once and cross-check the category split."""
    cat_df = categorize(long_df)
    verify_category_totals(long_df, cat_df)

    aggregates = {
        "categorized": cat_df,
        "year_summary": summarize_by_year(long_df),
        "category_summary": summarize_by_category(cat_df),
        "category_trend": summarize_category_trend(cat_df),
        "crime_type_summary": summarize_by_crime_type(long_df),
        "totals": neighbourhood_totals(long_df),
    }
    log.info(f"Aggregated {len(long_df):,} records across "
             f"{len(aggregates['totals']):,} neighbourhoods and "
             f"{aggregates['year_summary'].shape[1]} years")
    return aggregates
