"""Decision-tree fraud detection for transaction files."""

from .data import DataLoader, PreprocessingPipeline, TabularDataset, Schema
from .models import ModelFactory, DecisionTreeModel, FittedModel, ModelStore
from .evaluation import CrossValidator, EvaluationReport
from .metrics import MetricsWrapper
from .prediction import Prediction, PredictionDriver
from .utils import Config
from .workflow import FraudDetectionTrainer
from .exceptions import FraudDetectorError, UsageError, DataFormatError, StorageError

__version__ = '1.0.0'

__all__ = [
    'DataLoader',
    'PreprocessingPipeline',
    'TabularDataset',
    'Schema',
    'ModelFactory',
    'DecisionTreeModel',
    'FittedModel',
    'ModelStore',
    'CrossValidator',
    'EvaluationReport',
    'MetricsWrapper',
    'Prediction',
    'PredictionDriver',
    'Config',
    'FraudDetectionTrainer',
    'FraudDetectorError',
    'UsageError',
    'DataFormatError',
    'StorageError',
]
