"""
Tests for the preprocessing pipeline.
"""

import pytest

from fraud_detector.data import ColumnKind, PreprocessingPipeline
from fraud_detector.exceptions import DataFormatError

from conftest import HEADER, write_csv


class TestPreprocessingPipeline:

    def test_train_mode_output_schema(self, processed):
        dataset, state = processed
        schema = dataset.schema

        assert schema.names == ["step", "age", "gender", "category", "amount", "fraud"]
        assert schema.attribute("step").kind == ColumnKind.NUMERIC
        assert schema.attribute("age").categories == ("1", "2", "3", "4", "5", "U")
        assert schema.attribute("gender").categories == ("M", "F")
        assert schema.attribute("category").categories == (
            "es_travel", "es_food", "es_transportation", "es_health"
        )
        assert schema.label.categories == ("0", "1")
        assert state.output_schema == schema

    def test_stages_recorded_in_order(self, processed):
        _, state = processed
        assert [s['name'] for s in state.stages] == ['remove', 'string_to_nominal', 'numeric_to_nominal']
        assert state.stages[0]['n_features_in'] == 10
        assert state.stages[0]['n_features_out'] == 6

    def test_structure_replay_matches_training_schema(self, processed, transactions_csv, loader):
        dataset, state = processed
        structure = PreprocessingPipeline().structure(loader.load(transactions_csv), state)
        assert structure == dataset.schema
        assert structure.diff(dataset.schema) == []

    def test_inference_replay_on_full_data(self, processed, transactions_csv, loader):
        dataset, state = processed
        replayed = PreprocessingPipeline().execute_pipeline(
            loader.load(transactions_csv), mode='inference', saved_state=state
        )
        assert replayed.schema == dataset.schema
        assert replayed.frame.equals(dataset.frame)

    def test_replay_on_file_with_new_category(self, processed, tmp_path, transaction_rows, loader):
        _, state = processed
        rows = [list(r) for r in transaction_rows]
        rows[0][7] = "es_sportsandtoys"
        other = loader.load(write_csv(tmp_path / "other.csv", rows))

        with pytest.raises(DataFormatError, match="training vocabulary"):
            PreprocessingPipeline().execute_pipeline(other, mode='inference', saved_state=state)

    def test_structure_on_renamed_columns(self, processed, tmp_path, transaction_rows, loader):
        _, state = processed
        header = list(HEADER)
        header[1] = "customer_id"
        other = loader.load(write_csv(tmp_path / "other.csv", transaction_rows, header))

        with pytest.raises(DataFormatError, match="do not match"):
            PreprocessingPipeline().structure(other, state)

    def test_custom_removal_config(self, transactions_csv, loader):
        pipeline = PreprocessingPipeline({'remove': {'columns': ['customer', 'merchant']}})
        dataset, _ = pipeline.execute_pipeline(loader.load(transactions_csv), mode='train')
        assert "zipcodeOri" in dataset.schema.names
        assert "customer" not in dataset.schema.names

    def test_invalid_mode(self, transactions_csv, loader):
        with pytest.raises(ValueError, match="Invalid mode"):
            PreprocessingPipeline().execute_pipeline(loader.load(transactions_csv), mode='predict')

    def test_inference_requires_state(self, transactions_csv, loader):
        with pytest.raises(ValueError, match="saved_state"):
            PreprocessingPipeline().execute_pipeline(loader.load(transactions_csv), mode='inference')

    def test_validate_inference_state(self, processed):
        _, state = processed
        state.stages = list(reversed(state.stages))
        with pytest.raises(DataFormatError, match="Invalid preprocessing stages"):
            PreprocessingPipeline().validate_inference_state(state)
