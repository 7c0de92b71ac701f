"""Models module for the fraud detector.

This module provides the classifier interface, the scikit-learn decision
tree, and the model store used to persist fitted models.
"""

# Base classes and factories
from .base import (
    BaseModel,
    ModelFactory,
    safe_int,
    safe_float
)

# Classical models
from .classical import (
    SklearnModel,
    DecisionTreeModel
)

# Persistence
from .store import FittedModel, ModelStore

# Public API
__all__ = [
    'BaseModel',
    'ModelFactory',
    'safe_int',
    'safe_float',
    'SklearnModel',
    'DecisionTreeModel',
    'FittedModel',
    'ModelStore',
]
