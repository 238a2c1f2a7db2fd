"""
data_collection.py
Loads the raw Toronto neighbourhood crime table.

Headers are kept exactly as they appear in the file. pandas would silently
rename a duplicated header to "name.1", so the header row is read separately
and checked before the full load.
"""

import logging
from pathlib import Path

import pandas as pd

from config import NEIGHBOURHOOD_COL
from exceptions import DataIntegrityError, SchemaError

log = logging.getLogger(__name__)

# pandas' default missing-value markers; applied to count columns only, so a
# neighbourhood called "NA" or "None" keeps its name
COUNT_NA_VALUES = [
    "", "#N/A", "#N/A N/A", "#NA", "-1.#IND", "-1.#QNAN", "-NaN", "-nan",
    "1.#IND", "1.#QNAN", "<NA>", "N/A", "NA", "NULL", "NaN", "None",
    "n/a", "nan", "null",
]


def na_values_for(columns, key: str = NEIGHBOURHOOD_COL) -> dict:
    """Per-column NA markers: only a blank key counts as missing."""
    return {col: ([""] if col == key else COUNT_NA_VALUES) for col in columns}


def _read_header(filepath: Path) -> list:
    try:
        header = pd.read_csv(filepath, header=None, nrows=1, dtype=str)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DataIntegrityError(f"Could not parse header of {filepath}: {exc}") from exc
    return header.iloc[0].tolist()


def check_header(columns: list, key: str = NEIGHBOURHOOD_COL):
    """Reject blank or duplicated header names and a missing neighbourhood key."""
    seen = set()
    for col in columns:
        if pd.isna(col) or str(col).strip() == "":
            raise SchemaError("", "blank header name")
        if col in seen:
            raise SchemaError(col, "header name appears more than once")
        seen.add(col)

    if key not in seen:
        raise DataIntegrityError(f"Dataset is missing the neighbourhood key column {key!r}")


def load_raw_data(filepath, key: str = NEIGHBOURHOOD_COL) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {filepath}")

    log.info(f"Loading: {filepath}")
    header = _read_header(path)
    check_header(header, key=key)

    try:
        df = pd.read_csv(path, low_memory=False, keep_default_na=False,
                         na_values=na_values_for(header, key))
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DataIntegrityError(f"Could not parse {filepath}: {exc}") from exc

    if df.empty:
        raise DataIntegrityError(f"{filepath} has a header but no neighbourhood rows")

    names = df[key].dropna()
    dupes = names[names.duplicated()].tolist()
    if dupes:
        raise DataIntegrityError(f"Neighbourhood names are not unique: {dupes}")

    log.info(f"Loaded {len(df):,} rows × {len(df.columns)} columns")
    return df
