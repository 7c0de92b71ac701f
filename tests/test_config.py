"""
Tests for configuration loading and logging setup.
"""

import pytest
import yaml
from loguru import logger

from fraud_detector.utils import Config, deep_merge, setup_logging


class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.get_model_name() == 'decision_tree'
        assert config.get_model_config()['criterion'] == 'entropy'
        assert config.get_evaluation_config()['n_folds'] == 10
        assert config.get_preprocessing_config()['remove']['columns'] == "2,5-7"
        assert config.get_data_config()['quotechar'] == "'"
        assert [e['name'] for e in config.get_examples()] == [
            "High-Risk Travel Transaction", "Low-Risk Food Transaction"
        ]

    def test_user_file_is_merged_over_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({'models': {'decision_tree': {'min_samples_leaf': 4}}}))

        config = Config(path)
        model_config = config.get_model_config()
        assert model_config['min_samples_leaf'] == 4
        assert model_config['criterion'] == 'entropy'
        assert config['evaluation']['random_state'] == 1

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            Config(path)

    def test_unknown_model(self):
        config = Config.from_dict({'training': {'model': 'random_forest'}})
        with pytest.raises(ValueError, match="not found"):
            config.get_model_config()

    def test_examples_are_copies(self):
        config = Config()
        config.get_examples()[0]['name'] = "changed"
        assert config.get_examples()[0]['name'] == "High-Risk Travel Transaction"

    def test_get_with_default(self):
        assert Config().get('missing_section', {}) == {}


class TestDeepMerge:

    def test_nested_merge_keeps_base(self):
        base = {'a': {'b': 1, 'c': 2}, 'd': [1, 2]}
        merged = deep_merge(base, {'a': {'c': 3}, 'd': [9]})
        assert merged == {'a': {'b': 1, 'c': 3}, 'd': [9]}
        assert base['a']['c'] == 2


class TestSetupLogging:

    def test_log_file_created(self, tmp_path):
        log_file = setup_logging(debug=True, log_dir=tmp_path / "logs")
        logger.debug("hello from the test")
        logger.remove()

        assert log_file.parent == tmp_path / "logs"
        assert "hello from the test" in log_file.read_text()

    def test_no_log_dir(self):
        assert setup_logging() is None
        logger.remove()
