"""Model evaluation module."""

from .cross_validation import CrossValidator
from .report import ClassMetrics, EvaluationReport

__all__ = ['CrossValidator', 'ClassMetrics', 'EvaluationReport']
