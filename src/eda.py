"""
eda.py
Charts and tables for the Toronto Neighbourhood Crime Report

Design principles:
- Every figure is keyed to one aggregate table; nothing is recomputed here
- The top-10 neighbourhood set is the same in every figure
- Visuals are publication-ready (labeled, titled, sourced)
- All outputs are reproducible and saved with descriptive names
"""

from pathlib import Path

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd
import seaborn as sns

from config import DATA_SOURCE, FIGURES_DIR
from crime_taxonomy import NON_VIOLENT, VIOLENT, crime_type_label

# ── Style ─────────────────────────────────────────────────────────────────────
PALETTE  = "YlOrRd"
ACCENT   = "#D62728"   # red — violent crime / highest-ranked neighbourhood
NEUTRAL  = "#4C72B0"   # blue — standard bars / non-violent crime
BG_GRAY  = "#F7F7F7"

CATEGORY_COLORS = {VIOLENT: ACCENT, NON_VIOLENT: NEUTRAL}

plt.rcParams.update({
    "figure.facecolor": BG_GRAY,
    "axes.facecolor":   BG_GRAY,
    "axes.spines.top":  False,
    "axes.spines.right": False,
    "axes.labelsize":   11,
    "axes.titlesize":   13,
    "axes.titleweight": "bold",
    "xtick.labelsize":  9,
    "ytick.labelsize":  9,
    "font.family":      "sans-serif",
})


# ── Helpers ───────────────────────────────────────────────────────────────────

def _save(fig: plt.Figure, name: str, fig_dir=FIGURES_DIR) -> Path:
    fig_dir = Path(fig_dir)
    fig_dir.mkdir(parents=True, exist_ok=True)
    path = fig_dir / f"{name}.png"
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  ✓ Saved → {path}")
    return path


def _source_note(ax, note=DATA_SOURCE):
    ax.annotate(note, xy=(0, -0.12), xycoords="axes fraction",
                fontsize=7, color="gray")


def fmt_thousands(ax, axis="y"):
    fmt = mticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    if axis == "y":
        ax.yaxis.set_major_formatter(fmt)
    else:
        ax.xaxis.set_major_formatter(fmt)


# ── Chart 1: Top-10 Totals ────────────────────────────────────────────────────

def plot_top_totals(totals: pd.Series, top: list[str], fig_dir=FIGURES_DIR) -> Path:
    """
    Q: Which neighbourhoods reported the most crime over the whole period?
    """
    selected = totals.loc[top]

    fig, ax = plt.subplots(figsize=(11, 6))
    colors = [ACCENT if i == 0 else NEUTRAL for i in range(len(selected))]
    ax.barh(selected.index[::-1], selected.values[::-1], color=colors[::-1])
    ax.set_title(f"Total Reported Crime — Top {len(top)} Neighbourhoods")
    ax.set_xlabel("Number of Crimes")
    fmt_thousands(ax, axis="x")
    for i, v in enumerate(selected.values[::-1]):
        ax.text(v, i, f" {v:,}", va="center", fontsize=8)
    _source_note(ax)

    plt.tight_layout()
    return _save(fig, "01_top_neighbourhood_totals", fig_dir)


# ── Chart 2: Violent vs Non-Violent ───────────────────────────────────────────

def plot_violent_split(category_summary: pd.DataFrame, top: list[str],
                       fig_dir=FIGURES_DIR) -> Path:
    """
    Q: How much of each top neighbourhood's crime is violent?
    """
    selected = category_summary.loc[top, [VIOLENT, NON_VIOLENT]]

    fig, ax = plt.subplots(figsize=(12, 6))
    selected.plot(kind="bar", stacked=True, ax=ax,
                  color=[CATEGORY_COLORS[c] for c in selected.columns], edgecolor="white")
    ax.set_title("Violent vs Non-Violent Crime — Top Neighbourhoods")
    ax.set_xlabel("")
    ax.set_ylabel("Number of Crimes")
    ax.set_xticklabels(selected.index, rotation=35, ha="right")
    ax.legend(title="Category", fontsize=9)
    fmt_thousands(ax)
    _source_note(ax)

    plt.tight_layout()
    return _save(fig, "02_violent_vs_non_violent", fig_dir)


# ── Chart 3: Year-by-Year Trends ──────────────────────────────────────────────

def plot_yearly_trends(year_summary: pd.DataFrame, top: list[str],
                       fig_dir=FIGURES_DIR) -> Path:
    """
    Q: How has crime in each top neighbourhood moved year to year?
    One line per neighbourhood.
    """
    selected = year_summary.loc[top]
    colors = sns.color_palette("tab10", n_colors=len(top))

    fig, ax = plt.subplots(figsize=(13, 7))
    for color, (name, row) in zip(colors, selected.iterrows()):
        ax.plot(row.index, row.values, marker="o", linewidth=2, color=color, label=name)
    ax.set_xticks(list(selected.columns))
    ax.set_title("Reported Crime per Year — Top Neighbourhoods")
    ax.set_xlabel("Year")
    ax.set_ylabel("Number of Crimes")
    ax.legend(title="Neighbourhood", bbox_to_anchor=(1.01, 1), loc="upper left", fontsize=8)
    fmt_thousands(ax)
    _source_note(ax)

    plt.tight_layout()
    return _save(fig, "03_yearly_trends_top_neighbourhoods", fig_dir)


# ── Chart 4: City-Wide Category Trend ─────────────────────────────────────────

def plot_category_trend(category_trend: pd.DataFrame, fig_dir=FIGURES_DIR) -> Path:
    """
    Q: Across the whole city, how have violent and non-violent crime changed over time?
    """
    fig, ax = plt.subplots(figsize=(11, 6))
    for category in [VIOLENT, NON_VIOLENT]:
        ax.plot(category_trend.index, category_trend[category], marker="o", linewidth=2,
                color=CATEGORY_COLORS[category], label=category)
    ax.set_xticks(list(category_trend.index))
    ax.set_title("City-Wide Violent vs Non-Violent Crime by Year")
    ax.set_xlabel("Year")
    ax.set_ylabel("Number of Crimes")
    ax.legend()
    fmt_thousands(ax)
    _source_note(ax)

    plt.tight_layout()
    return _save(fig, "04_city_category_trend", fig_dir)


# ── Chart 5: Crime-Type Composition ───────────────────────────────────────────

def plot_crime_type_composition(crime_type_summary: pd.DataFrame, fig_dir=FIGURES_DIR) -> Path:
    """
    Q: Which crime types drive the city-wide total each year?
    """
    labelled = crime_type_summary.rename(columns=crime_type_label)

    fig, ax = plt.subplots(figsize=(12, 6))
    labelled.plot(kind="bar", stacked=True, ax=ax, colormap="tab20", edgecolor="white")
    ax.set_title("Crime Composition by Type and Year")
    ax.set_xlabel("Year")
    ax.set_ylabel("Number of Crimes")
    ax.set_xticklabels(labelled.index, rotation=0)
    ax.legend(title="Crime Type", bbox_to_anchor=(1.01, 1), loc="upper left", fontsize=8)
    fmt_thousands(ax)
    _source_note(ax)

    plt.tight_layout()
    return _save(fig, "05_crime_type_composition", fig_dir)


# ── Table: Year-by-Year Summary ───────────────────────────────────────────────

def summary_table(year_summary: pd.DataFrame, totals: pd.Series, top: list[str]) -> pd.DataFrame:
    """Year-by-year counts for the top neighbourhoods with their period total."""
    table = year_summary.loc[top].copy()
    table.columns = [str(c) for c in table.columns]
    table["Total"] = totals.loc[top]
    table.index.name = "Neighbourhood"
    return table


def summary_table_markdown(year_summary: pd.DataFrame, totals: pd.Series, top: list[str]) -> str:
    return summary_table(year_summary, totals, top).to_markdown()


def render_summary_table(year_summary: pd.DataFrame, totals: pd.Series, top: list[str],
                         fig_dir=FIGURES_DIR) -> Path:
    """
    Annotated table image; shading runs per year column so each column reads on its own scale.
    Also writes the same table as markdown next to the image.
    """
    table = summary_table(year_summary, totals, top)
    years = table.drop(columns="Total")
    shading = years / years.max().where(years.max() > 0, 1)

    fig, ax = plt.subplots(figsize=(14, 0.55 * len(table) + 2))
    sns.heatmap(shading, ax=ax, cmap=PALETTE, annot=years, fmt=",d",
                linewidths=0.5, cbar=False)
    ax.set_title("Reported Crime by Year — Top Neighbourhoods")
    ax.set_xlabel("Year")
    ax.set_ylabel("")
    for i, total in enumerate(table["Total"]):
        ax.text(len(years.columns) + 0.1, i + 0.5, f"{total:,}", va="center", fontsize=9,
                fontweight="bold")
    ax.text(len(years.columns) + 0.1, -0.2, "Total", fontsize=9, fontweight="bold")

    plt.tight_layout()
    path = _save(fig, "06_summary_table", fig_dir)

    md_path = Path(fig_dir) / "06_summary_table.md"
    md_path.write_text(table.to_markdown() + "\n", encoding="utf-8")
    return path


# ── Pipeline Orchestrator ─────────────────────────────────────────────────────

def run_eda(aggregates: dict, top: list[str], fig_dir=FIGURES_DIR) -> dict[str, Path]:
    """
    Render every report figure in one call.
    Returns {figure name: saved path}.
    """
    print("=" * 60)
    print("RENDERING REPORT FIGURES")
    print("=" * 60)

    figures = {
        "top_totals": plot_top_totals(aggregates["totals"], top, fig_dir),
        "violent_split": plot_violent_split(aggregates["category_summary"], top, fig_dir),
        "yearly_trends": plot_yearly_trends(aggregates["year_summary"], top, fig_dir),
        "category_trend": plot_category_trend(aggregates["category_trend"], fig_dir),
        "crime_type_composition": plot_crime_type_composition(
            aggregates["crime_type_summary"], fig_dir),
        "summary_table": render_summary_table(
            aggregates["year_summary"], aggregates["totals"], top, fig_dir),
    }

    print("\n" + "=" * 60)
    print(f"✓ FIGURES COMPLETE — {len(figures)} figures saved to {fig_dir}/")
    print("=" * 60)
    return figures
