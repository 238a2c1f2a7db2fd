"""Unit tests for column-name parsing and the wide-to-long reshape."""

import numpy as np
import pandas as pd
import pytest

from conftest import FEATURE_COLUMNS
from exceptions import DataIntegrityError, SchemaError
from reshaping import (
    LONG_COLUMNS,
    check_long_row_count,
    parse_feature_column,
    parse_feature_columns,
    reshape_to_long,
)


class TestParseFeatureColumn:
    """Test cases for the strict column-name parser."""

    def test_simple_name(self):
        assert parse_feature_column("assault 2014") == ("assault", 2014)

    def test_crime_type_lower_cased(self):
        assert parse_feature_column("BreakEnter 2023") == ("breakenter", 2023)

    @pytest.mark.parametrize("name", [
        "assault2014",        # no separator
        "theft over 2014",    # two separators
        "assault_2014",       # wrong separator
        " 2014",              # empty crime type
        "assault 14",         # short year
        "assault 20x4",       # non-numeric year
        "assault 2013",       # before covered range
        "assault 2024",       # after covered range
    ])
    def test_malformed_names_rejected(self, name):
        with pytest.raises(SchemaError):
            parse_feature_column(name)

    def test_custom_separator(self):
        assert parse_feature_column("assault_2014", separator="_") == ("assault", 2014)

    def test_custom_year_range(self):
        assert parse_feature_column("assault 2024", year_range=(2014, 2024)) == ("assault", 2024)

    def test_non_text_name(self):
        with pytest.raises(SchemaError):
            parse_feature_column(2014)

    def test_colliding_names_rejected(self):
        with pytest.raises(SchemaError, match="same crime type and year"):
            parse_feature_columns(["assault 2014", "ASSAULT 2014"])


class TestReshapeToLong:
    """Test cases for reshape_to_long."""

    def test_row_count_invariant(self, clean_df):
        long_df = reshape_to_long(clean_df)
        assert len(long_df) == len(clean_df) * len(FEATURE_COLUMNS)

    def test_output_columns_and_types(self, long_df):
        assert list(long_df.columns) == LONG_COLUMNS
        assert long_df["year"].dtype == "int64"
        assert long_df["count"].dtype == "int64"

    def test_first_neighbourhood_records(self, long_df):
        first = long_df.head(len(FEATURE_COLUMNS))
        assert set(first["neighbourhood"]) == {"West Humber-Clairville"}

        records = list(first.itertuples(index=False, name=None))
        assert records[0] == ("West Humber-Clairville", "assault", 2014, 100)
        assert records[1] == ("West Humber-Clairville", "autotheft", 2014, 50)
        assert records[4] == ("West Humber-Clairville", "assault", 2015, 110)

    def test_rows_follow_cleaned_order(self, clean_df, long_df):
        order = long_df["neighbourhood"].drop_duplicates().tolist()
        assert order == clean_df["AREA_NAME"].tolist()

    def test_missing_value_breaks_invariant(self, clean_df):
        df = clean_df.astype({"robbery 2015": "float64"})
        df.loc[0, "robbery 2015"] = np.nan
        with pytest.raises(DataIntegrityError, match="expected"):
            reshape_to_long(df)

    def test_negative_count_rejected(self, clean_df):
        df = clean_df.copy()
        df.loc[0, "assault 2014"] = -1
        with pytest.raises(DataIntegrityError, match="negative"):
            reshape_to_long(df)

    def test_fractional_count_rejected(self, clean_df):
        df = clean_df.astype({"assault 2014": "float64"})
        df.loc[0, "assault 2014"] = 1.5
        with pytest.raises(DataIntegrityError, match="whole numbers"):
            reshape_to_long(df)

    def test_non_numeric_count_rejected(self, clean_df):
        df = clean_df.astype({"assault 2014": "object"})
        df.loc[0, "assault 2014"] = "n/a"
        with pytest.raises(DataIntegrityError, match="not numeric"):
            reshape_to_long(df)

    def test_malformed_column_aborts(self, clean_df):
        df = clean_df.rename(columns={"assault 2014": "assault2014"})
        with pytest.raises(SchemaError):
            reshape_to_long(df)

    def test_missing_key_column(self, clean_df):
        with pytest.raises(DataIntegrityError):
            reshape_to_long(clean_df.drop(columns="AREA_NAME"))

    def test_no_feature_columns(self, clean_df):
        with pytest.raises(DataIntegrityError, match="no crime-count columns"):
            reshape_to_long(clean_df[["AREA_NAME"]])


class TestCheckLongRowCount:
    """Test cases for check_long_row_count."""

    def test_mismatch_raises(self, clean_df, long_df):
        with pytest.raises(DataIntegrityError):
            check_long_row_count(clean_df, long_df.iloc[1:])

    def test_match_passes(self, clean_df, long_df):
        check_long_row_count(clean_df, long_df)

    def test_empty_table(self):
        empty = pd.DataFrame(columns=["AREA_NAME", "assault 2014"])
        check_long_row_count(empty, pd.DataFrame(columns=LONG_COLUMNS))
