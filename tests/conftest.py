"""
Pytest configuration and shared fixtures.

The sample table mirrors the raw neighbourhood file: identifier, geometry and
population columns around "<crime_type> <year>" count columns. Thirteen rows,
one with a missing count, two with equal totals.
"""

import os

# Render figures off-screen
os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pandas as pd
import pytest

FEATURE_COLUMNS = [
    "assault 2014", "autotheft 2014", "robbery 2014", "theftover 2014",
    "assault 2015", "autotheft 2015", "robbery 2015", "theftover 2015",
]

SAMPLE_COUNTS = {
    "West Humber-Clairville":  [100, 50, 20, 10, 110, 60, 25, 12],
    "Moss Park":               [300, 10, 40, 5, 320, 12, 45, 6],
    "Downtown Yonge East":     [250, 20, 35, 8, 260, 18, 30, 9],
    "Yorkdale-Glen Park":      [90, 80, 15, 20, 95, 85, 14, 22],
    "Kensington-Chinatown":    [150, 15, 25, 6, 140, 14, 20, 7],
    "Wexford/Maryvale":        [120, 40, 18, 9, 118, 42, 19, 10],
    "York University Heights": [160, 30, 22, 11, 155, 28, 21, 10],
    "Annex":                   [80, 12, 10, 4, 85, 11, 9, 5],
    "Bay-Cloverhill":          [60, 5, 8, 3, 62, 6, 7, 3],
    "Church-Wellesley":        [70, 6, 9, 3, 72, 7, 8, 4],
    "Islington":               [40, 20, 5, 2, 42, 22, 5, 2],
    "Etobicoke City Centre":   [40, 20, 5, 2, 42, 22, 5, 2],
    "Rosedale-Moore Park":     [30, np.nan, 4, 1, 33, 5, 3, 1],
}

# Totals over both years for the twelve complete rows
EXPECTED_TOTALS = {
    "West Humber-Clairville": 387,
    "Moss Park": 738,
    "Downtown Yonge East": 630,
    "Yorkdale-Glen Park": 421,
    "Kensington-Chinatown": 377,
    "Wexford/Maryvale": 376,
    "York University Heights": 437,
    "Annex": 216,
    "Bay-Cloverhill": 154,
    "Church-Wellesley": 179,
    "Islington": 138,
    "Etobicoke City Centre": 138,
}

EXPECTED_TOP_10 = [
    "Moss Park",
    "Downtown Yonge East",
    "York University Heights",
    "Yorkdale-Glen Park",
    "West Humber-Clairville",
    "Kensington-Chinatown",
    "Wexford/Maryvale",
    "Annex",
    "Church-Wellesley",
    "Bay-Cloverhill",
]


@pytest.fixture
def raw_crime_df() -> pd.DataFrame:
    """Raw table as published, including columns the cleaner removes."""
    names = list(SAMPLE_COUNTS)
    counts = pd.DataFrame([SAMPLE_COUNTS[n] for n in names], columns=FEATURE_COLUMNS)
    df = pd.DataFrame({
        "_id": range(1, len(names) + 1),
        "AREA_NAME": names,
        "HOOD_ID": range(101, 101 + len(names)),
    })
    df = pd.concat([df, counts], axis=1)
    df["POPULATION_2023"] = [20000 + 500 * i for i in range(len(names))]
    df["geometry"] = [f"POINT ({i} {i})" for i in range(len(names))]
    return df


@pytest.fixture
def raw_csv_path(tmp_path, raw_crime_df):
    path = tmp_path / "raw" / "neighbourhood_crime_rates.csv"
    path.parent.mkdir(parents=True)
    raw_crime_df.to_csv(path, index=False)
    return path


@pytest.fixture
def clean_df(raw_crime_df) -> pd.DataFrame:
    """Cleaned table for the twelve complete neighbourhoods."""
    from data_cleaning import AuditTrail, clean

    return clean(raw_crime_df, AuditTrail(total_rows=len(raw_crime_df)))


@pytest.fixture
def long_df(clean_df) -> pd.DataFrame:
    from reshaping import reshape_to_long

    return reshape_to_long(clean_df)


@pytest.fixture
def aggregates(long_df) -> dict:
    from aggregation import build_aggregates

    return build_aggregates(long_df)
