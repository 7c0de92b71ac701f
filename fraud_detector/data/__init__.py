"""Data handling module."""

from .schema import Attribute, ColumnKind, Schema
from .dataset import TabularDataset
from .loader import DataLoader
from .transforms import NumericToCategorical, RemoveColumns, StringToCategorical, parse_index_ranges
from .preprocessing_pipeline import PreprocessingPipeline, PreprocessingState

__all__ = [
    "Attribute",
    "ColumnKind",
    "Schema",
    "TabularDataset",
    "DataLoader",
    "RemoveColumns",
    "StringToCategorical",
    "NumericToCategorical",
    "parse_index_ranges",
    "PreprocessingPipeline",
    "PreprocessingState"
]
