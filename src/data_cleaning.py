"""
data_cleaning.py
Cleaning Pipeline for the Toronto Neighbourhood Crime Report

Design principles:
- Every transformation is logged with before/after counts
- Rows with missing values are dropped, and every drop is recorded in the audit trail
- Functions are pure (input → output), no global state
- A single `run_pipeline()` call reproduces results end-to-end
- The cleaned CSV is written only after every step has succeeded
"""

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from config import (
    AUDIT_PATH,
    CLEANED_DATA_PATH,
    EXCLUDED_COLUMNS,
    NEIGHBOURHOOD_COL,
    RAW_DATA_PATH,
)
from data_collection import load_raw_data, na_values_for
from exceptions import DataIntegrityError
from reshaping import parse_feature_columns

log = logging.getLogger(__name__)


# ── Audit Trail ───────────────────────────────────────────────────────────────

class AuditTrail:
    """Tracks every cleaning decision with before/after row counts and change stats."""

    def __init__(self, total_rows: int):
        self.total_rows = total_rows
        self.steps: list[dict] = []

    def record(self, step: str, description: str, changed: int, detail: str = ""):
        pct = changed / self.total_rows * 100 if self.total_rows else 0.0
        self.steps.append({
            "step": step,
            "description": description,
            "rows_affected": changed,
            "pct_affected": round(pct, 2),
            "detail": detail,
        })
        log.info(f"[{step}] {description} → {changed:,} rows affected ({pct:.1f}%) {detail}")

    def to_dict(self) -> dict:
        return {"total_rows": self.total_rows, "steps": self.steps}

    def save(self, path):
        class _NumpyEncoder(json.JSONEncoder):
            """Convert numpy int/float types to native Python before serialising."""
            def default(self, obj):
                if isinstance(obj, np.integer):
                    return int(obj)
                if isinstance(obj, np.floating):
                    return float(obj)
                if isinstance(obj, np.ndarray):
                    return obj.tolist()
                return super().default(obj)

        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, cls=_NumpyEncoder)
        log.info(f"Audit trail saved → {path}")

    def summary(self):
        print("\n" + "=" * 65)
        print("CLEANING AUDIT SUMMARY")
        print("=" * 65)
        print(f"{'Step':<22} {'Affected':>10} {'%':>7}  Description")
        print("-" * 65)
        for s in self.steps:
            print(f"{s['step']:<22} {s['rows_affected']:>10,} {s['pct_affected']:>6.1f}%  {s['description']}")
        print("=" * 65)


# ── Step 1: Project Out Excluded Columns ──────────────────────────────────────

def drop_excluded_columns(
    df: pd.DataFrame,
    audit: AuditTrail,
    excluded: list[str] = EXCLUDED_COLUMNS,
) -> pd.DataFrame:
    """
    Remove identifier, geometry and population columns.
    They must all be present: a missing one means the file is not the dataset we expect.
    """
    missing_cols = [c for c in excluded if c not in df.columns]
    if missing_cols:
        raise DataIntegrityError(f"Dataset is missing columns expected for exclusion: {missing_cols}")

    df = df.drop(columns=list(excluded))
    audit.record("Excluded columns", "Identifier/geometry/population columns dropped", 0,
                 f"({list(excluded)})")
    return df


# ── Step 2: Drop Incomplete Rows ──────────────────────────────────────────────

def drop_incomplete_rows(df: pd.DataFrame, audit: AuditTrail,
                         key: str = NEIGHBOURHOOD_COL) -> pd.DataFrame:
    incomplete = df.isna().any(axis=1)
    dropped = df.loc[incomplete, key].fillna("<unnamed>").tolist()

    df = df.loc[~incomplete].reset_index(drop=True)
    audit.record("Incomplete rows", "Rows with any missing value removed", len(dropped),
                 f"({dropped})" if dropped else "")
    return df


# ── Step 3: Restore Integer Counts ────────────────────────────────────────────

def restore_integer_counts(df: pd.DataFrame, key: str = NEIGHBOURHOOD_COL) -> pd.DataFrame:
    """
    A column holding a NaN is read as float; once those rows are gone the
    counts are integral again, so store them as int64.
    """
    df = df.copy()
    for col in df.columns:
        if col == key or not pd.api.types.is_float_dtype(df[col]):
            continue
        if (df[col] % 1 == 0).all():
            df[col] = df[col].astype("int64")
    return df


# ── Persistence ───────────────────────────────────────────────────────────────

def write_csv_atomic(df: pd.DataFrame, output_path) -> Path:
    """Write via a sibling temp file so readers never see a half-written table."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        df.to_csv(tmp, index=False)
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()
    return path


def load_cleaned_data(filepath=CLEANED_DATA_PATH, key: str = NEIGHBOURHOOD_COL) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Cleaned data not found: {filepath} (run the cleaning step first)")

    log.info(f"Loading cleaned data from: {filepath}")
    columns = pd.read_csv(path, nrows=0).columns
    df = pd.read_csv(path, dtype={key: str}, keep_default_na=False,
                     na_values=na_values_for(columns, key))
    if df.isna().any().any():
        raise DataIntegrityError(f"Cleaned table {filepath} contains missing values")
    log.info(f"Loaded {len(df):,} rows × {df.shape[1]} columns")
    return df


# ── Pipeline Orchestrator ─────────────────────────────────────────────────────

def clean(df: pd.DataFrame, audit: AuditTrail,
          excluded: list[str] = EXCLUDED_COLUMNS,
          key: str = NEIGHBOURHOOD_COL) -> pd.DataFrame:
    df = drop_excluded_columns(df, audit, excluded)
    # Malformed "<crime_type> <year>" headers abort before anything is written
    parse_feature_columns([c for c in df.columns if c != key])
    df = drop_incomplete_rows(df, audit, key)
    df = restore_integer_counts(df, key)
    return df


def run_pipeline(
    input_path=RAW_DATA_PATH,
    output_path=CLEANED_DATA_PATH,
    audit_path=AUDIT_PATH,
    excluded: list[str] = EXCLUDED_COLUMNS,
    key: str = NEIGHBOURHOOD_COL,
) -> tuple[pd.DataFrame, AuditTrail]:
    """
    End-to-end cleaning pipeline. Call this to fully reproduce cleaned data.

    Parameters
    ----------
    input_path  : path to the raw neighbourhood crime CSV
    output_path : path for the cleaned CSV output
    audit_path  : path for JSON audit log (records every decision)
    excluded    : columns projected out before the missing-value check

    Returns
    -------
    Cleaned DataFrame and the audit trail of the run
    """
    log.info("=" * 60)
    log.info("TORONTO NEIGHBOURHOOD CRIME — CLEANING PIPELINE START")
    log.info("=" * 60)

    df = load_raw_data(input_path, key=key)
    audit = AuditTrail(total_rows=len(df))

    df = clean(df, audit, excluded, key)

    write_csv_atomic(df, output_path)
    log.info(f"Cleaned data saved → {output_path}")
    log.info(f"Final shape: {df.shape[0]:,} rows × {df.shape[1]} columns")

    audit.save(audit_path)
    audit.summary()

    return df, audit


# ── Entry Point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    run_pipeline()
