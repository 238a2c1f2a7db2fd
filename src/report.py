"""
report.py
Markdown report that embeds the figures and summary table next to headline facts.

Only facts computed from the aggregates are stated. Interpretation of the trends
is left to whoever edits the report prose.
"""

import json
import logging
import os
from pathlib import Path

from config import DATA_SOURCE, METRICS_PATH, REPORT_PATH
from crime_taxonomy import NON_VIOLENT, VIOLENT, crime_type_label, expand_categories
from eda import summary_table_markdown

log = logging.getLogger(__name__)

FIGURE_CAPTIONS = {
    "top_totals": "Total reported crime for the ten highest-crime neighbourhoods",
    "violent_split": "Violent and non-violent crime in the top neighbourhoods",
    "yearly_trends": "Year-by-year reported crime in the top neighbourhoods",
    "category_trend": "City-wide violent and non-violent crime by year",
    "crime_type_composition": "City-wide crime by type and year",
    "summary_table": "Year-by-year summary table",
}


def compute_headlines(aggregates: dict, top: list[str]) -> dict:
    totals = aggregates["totals"]
    trend = aggregates["category_trend"]
    year_totals = trend.sum(axis=1)
    grand_total = int(totals.sum())

    first_year, last_year = int(year_totals.index.min()), int(year_totals.index.max())
    first_total, last_total = int(year_totals.loc[first_year]), int(year_totals.loc[last_year])

    return {
        "neighbourhoods": int(len(totals)),
        "grand_total": grand_total,
        "first_year": first_year,
        "last_year": last_year,
        "top_neighbourhood": top[0],
        "top_neighbourhood_total": int(totals.loc[top[0]]),
        "top_n_share": float(totals.loc[top].sum() / grand_total) if grand_total else 0.0,
        "peak_year": int(year_totals.idxmax()),
        "peak_year_total": int(year_totals.max()),
        "low_year": int(year_totals.idxmin()),
        "low_year_total": int(year_totals.min()),
        "first_year_total": first_total,
        "last_year_total": last_total,
        "period_change": float((last_total - first_total) / first_total) if first_total else 0.0,
        "violent_share": float(trend[VIOLENT].sum() / grand_total) if grand_total else 0.0,
    }


def _relative(path, start) -> str:
    return Path(os.path.relpath(path, start)).as_posix()


def describe_audit(audit: dict) -> str:
    bullets = [
        f"- **{s['step']}**: {s['description']} ({s['rows_affected']:,} rows, {s['pct_affected']:.1f}%)"
        for s in audit["steps"]
    ]
    return "\n".join(bullets) if bullets else "- No cleaning steps recorded."


def describe_taxonomy(crime_types) -> str:
    grouped = expand_categories(crime_types)
    lines = []
    for category in (VIOLENT, NON_VIOLENT):
        names = ", ".join(crime_type_label(t) for t in grouped.get(category, ()))
        lines.append(f"- **{category}:** {names or 'none'}")
    return "\n".join(lines)


def build_report_markdown(
    headlines: dict,
    aggregates: dict,
    top: list[str],
    figures: dict,
    audit: dict,
    report_dir,
) -> str:
    crime_types = sorted(aggregates["crime_type_summary"].columns)
    h = headlines

    md_lines = [
        "# Crime in Toronto Neighbourhoods",
        "",
        "## Dataset Snapshot",
        f"- **Neighbourhoods analysed:** {h['neighbourhoods']:,} "
        f"(of {audit['total_rows']:,} in the raw file)",
        f"- **Period covered:** {h['first_year']} to {h['last_year']}",
        f"- **Crime types:** {', '.join(crime_type_label(t) for t in crime_types)}",
        f"- **Reported crimes, all years:** {h['grand_total']:,}",
        "",
        "## Cleaning Audit",
        describe_audit(audit),
        "",
        "## Crime Categories",
        describe_taxonomy(crime_types),
        "",
        "## Highlights",
        f"- {h['top_neighbourhood']} reported the most crime, {h['top_neighbourhood_total']:,} "
        f"incidents over {h['first_year']}-{h['last_year']}.",
        f"- The top {len(top)} neighbourhoods account for {h['top_n_share']:.1%} of all reported crime.",
        f"- City-wide crime peaked in {h['peak_year']} ({h['peak_year_total']:,}) and was lowest "
        f"in {h['low_year']} ({h['low_year_total']:,}).",
        f"- Between {h['first_year']} and {h['last_year']} the city-wide count went from "
        f"{h['first_year_total']:,} to {h['last_year_total']:,} ({h['period_change']:+.1%}).",
        f"- Violent crime makes up {h['violent_share']:.1%} of the total.",
        "",
        f"## Top {len(top)} Neighbourhoods",
        summary_table_markdown(aggregates["year_summary"], aggregates["totals"], top),
        "",
        "## Figures",
    ]
    for name, path in figures.items():
        caption = FIGURE_CAPTIONS.get(name, name)
        md_lines += [f"![{caption}]({_relative(path, report_dir)})", ""]

    md_lines += ["---", f"_{DATA_SOURCE}_", ""]
    return "\n".join(md_lines)


def write_report(
    aggregates: dict,
    top: list[str],
    figures: dict,
    audit: dict,
    report_path=REPORT_PATH,
    metrics_path=METRICS_PATH,
) -> Path:
    report_path = Path(report_path)
    report_path.parent.mkdir(parents=True, exist_ok=True)

    headlines = compute_headlines(aggregates, top)
    markdown = build_report_markdown(headlines, aggregates, top, figures, audit,
                                     report_dir=report_path.parent)
    report_path.write_text(markdown, encoding="utf-8")
    log.info(f"Report saved → {report_path}")

    payload = {
        "headlines": headlines,
        "top_neighbourhoods": top,
        "figures": {name: _relative(p, report_path.parent) for name, p in figures.items()},
        "cleaning_audit": audit,
    }
    Path(metrics_path).parent.mkdir(parents=True, exist_ok=True)
    Path(metrics_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    log.info(f"Report metrics saved → {metrics_path}")
    return report_path
