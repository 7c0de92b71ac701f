"""
Model Store
===========

Persists a fitted classifier together with the preprocessing parameters it
was trained behind. The file is a small versioned container:

    bytes 0-5   format tag  b'FDTREE'
    bytes 6-7   big-endian format version
    bytes 8-    joblib-serialized FittedModel

"""

import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

import joblib
from loguru import logger

from .base import BaseModel
from ..data.preprocessing_pipeline import PreprocessingState
from ..data.schema import Schema
from ..exceptions import StorageError

FORMAT_TAG = b'FDTREE'
FORMAT_VERSION = 1
_HEADER = struct.Struct('>6sH')


@dataclass
class FittedModel:
    """A trained classifier plus everything needed to feed it new records."""
    classifier: BaseModel
    preprocessing_state: PreprocessingState
    schema: Schema
    source_name: str = ''
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec='seconds'))


class ModelStore:
    """Reads and writes FittedModel containers."""

    @staticmethod
    def write(filepath: Union[str, Path], fitted: FittedModel) -> Path:
        """
        Save a fitted model to disk.

        Args:
            filepath: Destination file
            fitted: Model to persist

        Returns:
            The path written

        Raises:
            ValueError: If the classifier has not been trained
        """
        if not fitted.classifier.fitted:
            raise ValueError("Cannot save unfitted model")

        filepath = Path(filepath)
        if filepath.parent != Path('.'):
            filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'wb') as f:
            f.write(_HEADER.pack(FORMAT_TAG, FORMAT_VERSION))
            joblib.dump(fitted, f)

        logger.info(f"Saved {fitted.classifier.model_name}: {filepath}")
        return filepath

    @staticmethod
    def read(filepath: Union[str, Path]) -> FittedModel:
        """
        Load a fitted model from disk.

        Raises:
            StorageError: If the file is missing, has the wrong format or
                version, or its payload is corrupt
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise StorageError(f"Model file not found: {filepath}")

        with open(filepath, 'rb') as f:
            header = f.read(_HEADER.size)
            if len(header) < _HEADER.size:
                raise StorageError(f"Not a fraud detector model file (truncated header): {filepath}")

            tag, version = _HEADER.unpack(header)
            if tag != FORMAT_TAG:
                raise StorageError(f"Not a fraud detector model file (format tag {tag!r}): {filepath}")
            if version != FORMAT_VERSION:
                raise StorageError(
                    f"Unsupported model format version {version} in {filepath}; expected {FORMAT_VERSION}"
                )

            try:
                fitted = joblib.load(f)
            except Exception as exc:
                raise StorageError(f"Corrupt model payload in {filepath}: {exc}") from exc

        if not isinstance(fitted, FittedModel):
            raise StorageError(f"Unexpected payload type {type(fitted).__name__} in {filepath}")

        logger.info(f"Loaded {fitted.classifier.model_name}: {filepath}")
        return fitted
