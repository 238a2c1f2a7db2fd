"""Tests for the report figures and summary table."""

import pytest

from conftest import EXPECTED_TOP_10
from eda import (
    plot_category_trend,
    plot_crime_type_composition,
    plot_top_totals,
    plot_violent_split,
    plot_yearly_trends,
    render_summary_table,
    run_eda,
    summary_table,
    summary_table_markdown,
)


@pytest.fixture
def top():
    return EXPECTED_TOP_10


class TestCharts:
    """Each chart writes one PNG into the figures directory."""

    def test_top_totals(self, tmp_path, aggregates, top):
        path = plot_top_totals(aggregates["totals"], top, tmp_path)
        assert path == tmp_path / "01_top_neighbourhood_totals.png"
        assert path.stat().st_size > 0

    def test_violent_split(self, tmp_path, aggregates, top):
        path = plot_violent_split(aggregates["category_summary"], top, tmp_path)
        assert path.exists()

    def test_yearly_trends(self, tmp_path, aggregates, top):
        path = plot_yearly_trends(aggregates["year_summary"], top, tmp_path)
        assert path.exists()

    def test_category_trend(self, tmp_path, aggregates):
        path = plot_category_trend(aggregates["category_trend"], tmp_path)
        assert path.exists()

    def test_crime_type_composition(self, tmp_path, aggregates):
        path = plot_crime_type_composition(aggregates["crime_type_summary"], tmp_path)
        assert path.exists()

    def test_creates_missing_directory(self, tmp_path, aggregates, top):
        fig_dir = tmp_path / "reports" / "figures"
        plot_top_totals(aggregates["totals"], top, fig_dir)
        assert fig_dir.is_dir()


class TestSummaryTable:
    """Test cases for the year-by-year summary table."""

    def test_rows_follow_top_order(self, aggregates, top):
        table = summary_table(aggregates["year_summary"], aggregates["totals"], top)
        assert table.index.tolist() == top
        assert list(table.columns) == ["2014", "2015", "Total"]

    def test_values_taken_from_aggregates(self, aggregates, top):
        table = summary_table(aggregates["year_summary"], aggregates["totals"], top)
        assert table.loc["Moss Park", "2014"] == 355
        assert table.loc["Moss Park", "Total"] == 738

    def test_markdown(self, aggregates, top):
        text = summary_table_markdown(aggregates["year_summary"], aggregates["totals"], top)
        assert "Moss Park" in text
        assert "Total" in text
        assert "Islington" not in text

    def test_render_writes_png_and_markdown(self, tmp_path, aggregates, top):
        path = render_summary_table(aggregates["year_summary"], aggregates["totals"], top, tmp_path)
        assert path.exists()
        assert "Moss Park" in (tmp_path / "06_summary_table.md").read_text()


def test_run_eda_renders_everything(tmp_path, aggregates, top):
    figures = run_eda(aggregates, top, tmp_path)
    assert set(figures) == {
        "top_totals", "violent_split", "yearly_trends",
        "category_trend", "crime_type_composition", "summary_table",
    }
    assert all(p.exists() for p in figures.values())
