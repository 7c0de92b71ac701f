"""
Tests for the column schema and the dataset wrapper.
"""

import pandas as pd
import pytest

from fraud_detector.data import Attribute, ColumnKind, Schema, TabularDataset
from fraud_detector.exceptions import DataFormatError


def sample_frame():
    return pd.DataFrame({
        "amount": [1.5, 2.0, None],
        "merchant": ["M1", "M2", None],
        "fraud": pd.Categorical(["0", None, "1"], categories=["0", "1"]),
    })


class TestSchema:

    def test_from_frame(self):
        schema = Schema.from_frame(sample_frame())

        assert schema.names == ["amount", "merchant", "fraud"]
        assert [a.kind for a in schema.attributes] == [ColumnKind.NUMERIC, ColumnKind.STRING, ColumnKind.NOMINAL]
        assert schema.label.categories == ("0", "1")
        assert schema.label_index == 2
        assert len(schema.feature_attributes) == 2

    def test_vocabulary_order_matters(self):
        first = Schema((Attribute("gender", ColumnKind.NOMINAL, ("M", "F")),))
        second = Schema((Attribute("gender", ColumnKind.NOMINAL, ("F", "M")),))

        assert first != second
        assert "categories" in first.diff(second)[0]

    def test_diff_reports_count_and_names(self):
        first = Schema((Attribute("a", ColumnKind.NUMERIC), Attribute("b", ColumnKind.NUMERIC)))
        second = Schema((Attribute("c", ColumnKind.NUMERIC),))

        problems = first.diff(second)
        assert any("count" in p for p in problems)
        assert any("name 'a' != 'c'" in p for p in problems)

    def test_index_of(self):
        attr = Attribute("category", ColumnKind.NOMINAL, ("es_travel", "es_food"))
        assert attr.index_of("es_food") == 1
        with pytest.raises(DataFormatError, match="vocabulary"):
            attr.index_of("es_tech")
        with pytest.raises(DataFormatError, match="not nominal"):
            Attribute("amount", ColumnKind.NUMERIC).index_of("1")

    def test_unknown_attribute(self):
        with pytest.raises(DataFormatError, match="Unknown attribute"):
            Schema.from_frame(sample_frame()).attribute("zip")

    def test_describe(self):
        text = Schema.from_frame(sample_frame()).describe()
        assert "1. amount numeric" in text
        assert "3. fraud {0,1}" in text


class TestTabularDataset:

    def test_label_helpers(self):
        dataset = TabularDataset(sample_frame())

        assert dataset.label_name == "fraud"
        assert list(dataset.features.columns) == ["amount", "merchant"]
        assert list(dataset.label_codes()) == [0, -1, 1]

    def test_label_must_be_nominal(self):
        dataset = TabularDataset(pd.DataFrame({"amount": [1.0], "fraud": [0.0]}))
        with pytest.raises(DataFormatError, match="not nominal"):
            dataset.label_codes()

    def test_subset_resets_index(self):
        subset = TabularDataset(sample_frame()).subset([2, 0])
        assert list(subset.frame.index) == [0, 1]
        assert pd.isna(subset.frame["amount"].iloc[0])
        assert subset.frame["amount"].iloc[1] == 1.5

    def test_empty_copy_keeps_schema(self):
        dataset = TabularDataset(sample_frame())
        empty = dataset.empty_copy()

        assert empty.num_rows == 0
        assert empty.schema == dataset.schema

    def test_no_columns(self):
        with pytest.raises(DataFormatError):
            TabularDataset(pd.DataFrame())
