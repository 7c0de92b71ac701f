"""
Tests for the column transforms.
"""

import pandas as pd
import pytest

from fraud_detector.data import (
    ColumnKind, NumericToCategorical, RemoveColumns, StringToCategorical, TabularDataset, parse_index_ranges
)
from fraud_detector.data.transforms import format_number, resolve_columns
from fraud_detector.exceptions import DataFormatError

from conftest import HEADER


class TestIndexRanges:

    def test_ranges_and_singles(self):
        assert parse_index_ranges("2,5-7", 10) == [1, 4, 5, 6]

    def test_first_last_keywords(self):
        assert parse_index_ranges("first-last", 4) == [0, 1, 2, 3]
        assert parse_index_ranges("last", 4) == [3]

    def test_int_and_list(self):
        assert parse_index_ranges(3, 5) == [2]
        assert parse_index_ranges([1, 3], 5) == [0, 2]

    def test_out_of_range(self):
        with pytest.raises(DataFormatError, match="out of range"):
            parse_index_ranges("2,5-7", 6)

    def test_invalid_token(self):
        with pytest.raises(DataFormatError):
            parse_index_ranges("two", 6)

    def test_resolve_names(self):
        assert resolve_columns(["merchant", "customer"], HEADER) == ["customer", "merchant"]
        with pytest.raises(DataFormatError, match="Unknown columns"):
            resolve_columns(["nope"], HEADER)

    def test_format_number(self):
        assert format_number(1.0) == "1"
        assert format_number(0.5) == "0.5"


class TestRemoveColumns:

    def test_removes_four_identifier_columns(self, transactions_csv, loader):
        raw = loader.load(transactions_csv)
        transform = RemoveColumns("2,5-7")
        params, result = transform.fit_apply(raw)

        assert result.num_attributes == raw.num_attributes - 4
        for name in ("customer", "zipcodeOri", "merchant", "zipMerchant"):
            assert name not in result.schema.names
        assert params.removed == ("customer", "zipcodeOri", "merchant", "zipMerchant")

    def test_remove_by_name(self, transactions_csv, loader):
        raw = loader.load(transactions_csv)
        _, result = RemoveColumns(["customer", "merchant"]).fit_apply(raw)
        assert result.schema.names == [n for n in HEADER if n not in ("customer", "merchant")]

    def test_position_beyond_column_count(self):
        dataset = TabularDataset(pd.DataFrame({"a": [1.0], "b": [2.0], "c": [0.0]}))
        with pytest.raises(DataFormatError):
            RemoveColumns("2,5-7").fit(dataset)

    def test_replay_requires_same_columns(self, transactions_csv, loader):
        raw = loader.load(transactions_csv)
        transform = RemoveColumns("2,5-7")
        params = transform.fit(raw)

        renamed = TabularDataset(raw.frame.rename(columns={"customer": "client"}))
        with pytest.raises(DataFormatError, match="do not match"):
            transform.apply(params, renamed)


class TestStringToCategorical:

    def test_vocabulary_in_first_appearance_order(self):
        frame = pd.DataFrame({"g": ["b", "a", "b", None, "c"], "y": [0.0, 1.0, 0.0, 1.0, 0.0]})
        transform = StringToCategorical("first-last")
        params, result = transform.fit_apply(TabularDataset(frame))

        assert params.as_dict() == {"g": ("b", "a", "c")}
        attr = result.schema.attribute("g")
        assert attr.kind == ColumnKind.NOMINAL
        assert attr.categories == ("b", "a", "c")
        assert result.schema.attribute("y").kind == ColumnKind.NUMERIC

    def test_replay_uses_training_vocabulary(self):
        transform = StringToCategorical("first-last")
        params = transform.fit(TabularDataset(pd.DataFrame({"g": ["x", "y"], "y": [0.0, 1.0]})))

        later = TabularDataset(pd.DataFrame({"g": ["y"], "y": [1.0]}))
        result = transform.apply(params, later)
        assert result.schema.attribute("g").categories == ("x", "y")
        assert list(result.frame["g"].cat.codes) == [1]

    def test_replay_rejects_unseen_value(self):
        transform = StringToCategorical("first-last")
        params = transform.fit(TabularDataset(pd.DataFrame({"g": ["x", "y"], "y": [0.0, 1.0]})))

        with pytest.raises(DataFormatError, match="training vocabulary"):
            transform.apply(params, TabularDataset(pd.DataFrame({"g": ["z"], "y": [1.0]})))


class TestNumericToCategorical:

    def test_label_becomes_nominal(self):
        frame = pd.DataFrame({"amount": [1.5, 2.5, 3.5], "fraud": [1.0, 0.0, 1.0]})
        params, result = NumericToCategorical("last").fit_apply(TabularDataset(frame))

        assert params.as_dict() == {"fraud": ("0", "1")}
        assert result.schema.label.categories == ("0", "1")
        assert list(result.label_codes()) == [1, 0, 1]
        assert result.schema.attribute("amount").kind == ColumnKind.NUMERIC

    def test_string_label_left_untouched(self):
        frame = pd.DataFrame({"amount": [1.0], "fraud": ["yes"]})
        params = NumericToCategorical("last").fit(TabularDataset(frame))
        assert params.as_dict() == {}

    def test_replay_rejects_unseen_value(self):
        transform = NumericToCategorical("last")
        params = transform.fit(TabularDataset(pd.DataFrame({"a": [1.0], "fraud": [0.0]})))

        with pytest.raises(DataFormatError):
            transform.apply(params, TabularDataset(pd.DataFrame({"a": [1.0], "fraud": [2.0]})))


class TestCategoricalTransformBase:

    def test_convert_must_be_implemented(self):
        from fraud_detector.data.transforms import _CategoricalTransform

        class NoConvert(_CategoricalTransform):
            def fit(self, dataset):
                return None

        with pytest.raises(TypeError):
            NoConvert("last")
