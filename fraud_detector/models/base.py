"""Base model interface and factory classes.

This module provides the foundation for the classifiers in the fraud detector.
It includes the abstract base class, a factory for model creation by name, and
utility functions for safe type conversion of YAML hyperparameters.

Key Components:
    - BaseModel: Abstract base class for all models
    - ModelFactory: Factory for model creation and registration
"""

from abc import ABC, abstractmethod
import numpy as np
import pandas as pd
from typing import Any, Dict, Optional

from ..data.dataset import TabularDataset


def safe_int(value: Any, default: int) -> int:
    """
    Safely convert value to integer.

    Handles strings with scientific notation, floats, and None values.
    Returns default if conversion fails.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Converted integer value or default
    """
    if value is None:
        return default
    try:
        return int(float(str(value)))
    except (TypeError, ValueError):
        return default


def safe_float(value: Any, default: float) -> float:
    """
    Safely convert value to float.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Converted float value or default
    """
    if value is None:
        return default
    try:
        return float(str(value))
    except (TypeError, ValueError):
        return default


class BaseModel(ABC):
    """
    Abstract base class for all classifiers.

    Models are fit on a TabularDataset whose last column is a nominal label
    and predict label category indices, never label values.

    Attributes:
        config: Configuration dictionary for the model
        model: The underlying model implementation
        fitted: Whether the model has been trained
        model_name: Name of the model class
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize base model.

        Args:
            config: Model configuration dictionary containing hyperparameters
        """
        self.config = config or {}
        self.model = None
        self.fitted = False
        self.model_name = self.__class__.__name__

    @abstractmethod
    def train(self, dataset: TabularDataset) -> None:
        """
        Train the model on the provided dataset.

        Args:
            dataset: Preprocessed dataset with a nominal label column
        """
        pass

    @abstractmethod
    def predict(self, features: pd.DataFrame) -> np.ndarray:
        """
        Predict label category indices.

        Args:
            features: Feature columns in training order, label excluded

        Returns:
            Label indices of shape (n_samples,)
        """
        pass

    @abstractmethod
    def predict_proba(self, features: pd.DataFrame) -> np.ndarray:
        """
        Predict a distribution over every label category.

        Returns:
            Probabilities of shape (n_samples, n_labels)
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable structure of the fitted model."""
        pass

    def spawn(self) -> 'BaseModel':
        """Return a fresh, unfitted model with the same configuration."""
        return self.__class__(config=dict(self.config))


# ============================================================================
# FACTORY CLASSES
# ============================================================================

class ModelFactory:
    """
    Factory class for creating and managing model instances.

    Models must be registered before they can be created by name.
    """

    _models = {}

    @classmethod
    def register_model(cls, name: str, model_class: type) -> None:
        """
        Register a model class with the factory.

        Args:
            name: Name to register the model under
            model_class: Model class that inherits from BaseModel
        """
        cls._models[name] = model_class

    @classmethod
    def create_model(cls, name: str, config: Optional[Dict[str, Any]] = None, **kwargs) -> BaseModel:
        """
        Create a model instance by name.

        Args:
            name: Registered name of the model
            config: Configuration dictionary for the model
            **kwargs: Additional keyword arguments merged into config

        Returns:
            Instantiated model object

        Raises:
            ValueError: If the model name is not registered
        """
        if name not in cls._models:
            raise ValueError(f"Unknown model: {name}")

        full_config = {**(config or {}), **kwargs}
        return cls._models[name](config=full_config)

    @classmethod
    def list_models(cls) -> list:
        """Get list of all registered model names."""
        return list(cls._models.keys())
