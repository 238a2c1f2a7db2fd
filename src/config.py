"""
config.py
Paths and fixed constants for the Toronto neighbourhood crime report.
"""

from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR = PROJECT_ROOT / "data"
RAW_DIR = DATA_DIR / "raw"
PROCESSED_DIR = DATA_DIR / "processed"
AGGREGATES_DIR = PROCESSED_DIR / "aggregates"

RAW_DATA_PATH = RAW_DIR / "neighbourhood_crime_rates.csv"
CLEANED_DATA_PATH = PROCESSED_DIR / "neighbourhood_crime_cleaned.csv"
AUDIT_PATH = DATA_DIR / "cleaning_audit.json"

REPORTS_DIR = PROJECT_ROOT / "reports"
FIGURES_DIR = REPORTS_DIR / "figures"
REPORT_PATH = REPORTS_DIR / "report.md"
METRICS_PATH = REPORTS_DIR / "report_metrics.json"

# ── Schema ────────────────────────────────────────────────────────────────────

NEIGHBOURHOOD_COL = "AREA_NAME"

# Identifier, geometry and population columns carry no crime counts
EXCLUDED_COLUMNS = ["_id", "HOOD_ID", "geometry", "POPULATION_2023"]

# Feature columns are named "<crime_type><SEP><year>", e.g. "assault 2014"
COLUMN_SEPARATOR = " "

YEAR_RANGE = (2014, 2023)

# ── Analysis ──────────────────────────────────────────────────────────────────

TOP_N = 10

DATA_SOURCE = "Source: Toronto Police Service / City of Toronto Open Data"
