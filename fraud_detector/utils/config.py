"""Configuration management for the fraud detector."""

import yaml
import copy
from typing import Dict, List, Optional, Any, Union
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'configs' / 'default.yaml'


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Config:
    """
    YAML configuration loader.

    The packaged defaults are always loaded first; a user file only needs the
    keys it changes. Lists (such as prediction examples) are replaced, not
    merged.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Load configuration from YAML file."""
        with open(DEFAULT_CONFIG_PATH, 'r') as f:
            self.config = yaml.safe_load(f) or {}

        self.config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        if config_path is not None:
            with open(self.config_path, 'r') as f:
                overrides = yaml.safe_load(f) or {}
            if not isinstance(overrides, dict):
                raise ValueError(f"Configuration file must contain a mapping: {self.config_path}")
            self.config = deep_merge(self.config, overrides)

    @classmethod
    def from_dict(cls, overrides: Dict[str, Any]) -> 'Config':
        """Build a configuration from defaults plus an in-memory override."""
        config = cls()
        config.config = deep_merge(config.config, overrides)
        return config

    def get_model_config(self, model_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Get model hyperparameters.

        Args:
            model_name: Model name from 'models' section; defaults to training.model

        Returns:
            Deep copy of the model config

        Raises:
            ValueError: If model not found
        """
        model_name = model_name or self.get_model_name()
        models = self.config.get('models', {})
        if model_name not in models:
            raise ValueError(f"Model '{model_name}' not found")
        return copy.deepcopy(models[model_name] or {})

    def get_model_name(self) -> str:
        return self.get_training_config().get('model', 'decision_tree')

    # Simple getters for other sections
    def get_data_config(self) -> Dict[str, Any]:
        """Get data configuration."""
        return self.config.get('data', {})

    def get_preprocessing_config(self) -> Dict[str, Any]:
        """Get preprocessing configuration."""
        return self.config.get('preprocessing', {})

    def get_training_config(self) -> Dict[str, Any]:
        """Get training configuration."""
        return self.config.get('training', {})

    def get_evaluation_config(self) -> Dict[str, Any]:
        """Get evaluation configuration."""
        return self.config.get('evaluation', {})

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration."""
        return self.config.get('output', {})

    def get_prediction_config(self) -> Dict[str, Any]:
        """Get prediction configuration."""
        return self.config.get('prediction', {})

    def get_examples(self) -> List[Dict[str, Any]]:
        """Example records classified after training."""
        return copy.deepcopy(self.get_prediction_config().get('examples', []))

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access to config."""
        return self.config[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with default."""
        return self.config.get(key, default)
