"""
run_report.py
End-to-end batch run: clean → reshape → aggregate → select → figures → report.

Any failure aborts the run; no stage works from a partially derived table.
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

import config
from aggregation import build_aggregates
from data_cleaning import load_cleaned_data, run_pipeline as run_cleaning, write_csv_atomic
from eda import run_eda
from exceptions import PipelineError
from report import write_report
from reshaping import reshape_to_long
from selection import rank_neighbourhoods, select_top_neighbourhoods

log = logging.getLogger(__name__)


def resolve_paths(output_dir=None) -> dict:
    """Output locations; everything moves under `output_dir` when one is given."""
    if output_dir is None:
        return {
            "cleaned": config.CLEANED_DATA_PATH,
            "audit": config.AUDIT_PATH,
            "aggregates": config.AGGREGATES_DIR,
            "figures": config.FIGURES_DIR,
            "report": config.REPORT_PATH,
            "metrics": config.METRICS_PATH,
        }
    root = Path(output_dir)
    return {
        "cleaned": root / "data" / "processed" / config.CLEANED_DATA_PATH.name,
        "audit": root / "data" / config.AUDIT_PATH.name,
        "aggregates": root / "data" / "processed" / "aggregates",
        "figures": root / "reports" / "figures",
        "report": root / "reports" / config.REPORT_PATH.name,
        "metrics": root / "reports" / config.METRICS_PATH.name,
    }


def write_aggregates(aggregates: dict, top: list[str], aggregates_dir) -> dict[str, Path]:
    out = Path(aggregates_dir)
    tables = {
        "long_records": (aggregates["categorized"], False),
        "year_summary": (aggregates["year_summary"], True),
        "category_summary": (aggregates["category_summary"], True),
        "category_trend": (aggregates["category_trend"], True),
        "crime_type_summary": (aggregates["crime_type_summary"], True),
        "neighbourhood_ranking": (rank_neighbourhoods(aggregates["totals"]), False),
        "top_neighbourhoods": (pd.DataFrame({"rank": range(1, len(top) + 1),
                                             "neighbourhood": top}), False),
    }
    paths = {}
    for name, (table, with_index) in tables.items():
        path = out / f"{name}.csv"
        if with_index:
            table = table.reset_index()
        write_csv_atomic(table, path)
        paths[name] = path
    log.info(f"Wrote {len(paths)} aggregate tables → {out}")
    return paths


def run_analysis(cleaned_path, aggregates_dir, top_n: int = config.TOP_N):
    """Reshape, aggregate and select from the persisted cleaned table."""
    clean_df = load_cleaned_data(cleaned_path)
    long_df = reshape_to_long(clean_df)
    aggregates = build_aggregates(long_df)
    top = select_top_neighbourhoods(aggregates["totals"], n=top_n)
    write_aggregates(aggregates, top, aggregates_dir)
    return long_df, aggregates, top


def run(input_path=config.RAW_DATA_PATH, output_dir=None, top_n: int = config.TOP_N,
        render: bool = True) -> dict:
    paths = resolve_paths(output_dir)

    _, audit = run_cleaning(input_path, paths["cleaned"], paths["audit"])
    long_df, aggregates, top = run_analysis(paths["cleaned"], paths["aggregates"], top_n)

    if render:
        figures = run_eda(aggregates, top, paths["figures"])
        write_report(aggregates, top, figures, audit.to_dict(),
                     paths["report"], paths["metrics"])
    return paths


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build the Toronto neighbourhood crime report.")
    parser.add_argument("--input", type=Path, default=config.RAW_DATA_PATH,
                        help="Raw neighbourhood crime CSV.")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Write every artifact under this directory instead of the project tree.")
    parser.add_argument("--top-n", type=int, default=config.TOP_N,
                        help="Number of neighbourhoods in the analysis subset.")
    parser.add_argument("--no-figures", action="store_true",
                        help="Stop after the aggregate tables.")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        run(args.input, args.output_dir, args.top_n, render=not args.no_figures)
    except (PipelineError, FileNotFoundError) as exc:
        log.error(f"Pipeline aborted: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
