"""
Exception classes for the fraud detector.
"""


class FraudDetectorError(Exception):
    """Base exception for fraud detector errors."""
    pass


class UsageError(FraudDetectorError):
    """Raised when the command line is missing its input path."""
    pass


class DataFormatError(FraudDetectorError):
    """Raised when source data or a replayed schema is malformed."""
    pass


class StorageError(FraudDetectorError):
    """Raised when a model file cannot be read back."""
    pass
