"""
Prediction Driver
=================

Classifies new transactions with a persisted model. The record structure is
rebuilt by replaying the model's captured preprocessing parameters against the
original source file with zero rows, so category vocabularies are exactly the
training-time ones.

"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

from .data.loader import DataLoader
from .data.preprocessing_pipeline import PreprocessingPipeline
from .data.schema import ColumnKind, Schema
from .exceptions import DataFormatError
from .models.store import FittedModel

Record = Union[Mapping[str, Any], Sequence[Any]]

MISSING = (None, '', '?')


@dataclass(frozen=True)
class Prediction:
    name: str
    label: str
    label_index: int
    is_fraud: bool

    @property
    def verdict(self) -> str:
        return "FRAUD" if self.is_fraud else "LEGIT"

    def __str__(self) -> str:
        return f"Prediction for '{self.name}': {self.verdict}"


class PredictionDriver:
    """Builds records against a reconstructed schema and classifies them."""

    def __init__(self, fitted: FittedModel, structure: Schema, positive_label: str = "1"):
        problems = fitted.schema.diff(structure)
        if problems:
            raise DataFormatError("Prediction schema does not match the trained model: " + '; '.join(problems))
        self.fitted = fitted
        self.structure = structure
        self.positive_label = str(positive_label)

    @classmethod
    def from_source(
        cls,
        fitted: FittedModel,
        source_path: Union[str, Path],
        loader: Optional[DataLoader] = None,
        positive_label: str = "1"
    ) -> 'PredictionDriver':
        """
        Reconstruct the record structure from the training source file.

        Raises:
            DataFormatError: If the replayed schema differs from the model's
        """
        loader = loader or DataLoader()
        raw = loader.load(source_path)
        state = fitted.preprocessing_state
        structure = PreprocessingPipeline(state.config).structure(raw, state)
        logger.info(f"Reconstructed prediction structure with {structure.num_attributes} attributes")
        logger.debug(f"Structure:\n{structure.describe()}")
        return cls(fitted, structure, positive_label)

    def build_records(self, records: Sequence[Record]) -> pd.DataFrame:
        """
        Convert records to a feature frame in the trained column order.

        Mapping records are keyed by column name and may carry the label,
        which is ignored. Sequence records list values in feature order,
        optionally followed by the label.
        """
        features = self.structure.feature_attributes
        names = [a.name for a in features]
        rows = [self._as_mapping(record, names) for record in records]

        columns = {}
        for attr in features:
            values = [row.get(attr.name) for row in rows]
            if attr.kind == ColumnKind.NUMERIC:
                columns[attr.name] = pd.Series([self._to_number(attr.name, v) for v in values], dtype='float64')
            else:
                labels = [None if v in MISSING else str(v) for v in values]
                for label in labels:
                    if label is not None:
                        attr.index_of(label)
                columns[attr.name] = pd.Categorical(labels, categories=list(attr.categories))

        return pd.DataFrame(columns, columns=names)

    def _as_mapping(self, record: Record, names: List[str]) -> Mapping[str, Any]:
        label_name = self.structure.label.name
        if isinstance(record, Mapping):
            unknown = set(record) - set(names) - {label_name}
            if unknown:
                raise DataFormatError(f"Unknown columns in record: {sorted(unknown)}")
            return record

        values = list(record)
        if len(values) not in (len(names), len(names) + 1):
            raise DataFormatError(
                f"Record has {len(values)} values; expected {len(names)} features in order {names}"
            )
        return dict(zip(names, values))

    @staticmethod
    def _to_number(name: str, value: Any) -> float:
        if value in MISSING:
            return np.nan
        try:
            return float(value)
        except (TypeError, ValueError):
            raise DataFormatError(f"Value {value!r} for numeric column '{name}' is not a number") from None

    def predict(self, records: Iterable[Record], names: Optional[Sequence[str]] = None) -> List[Prediction]:
        """
        Classify a batch of records.

        Args:
            records: Records conforming to the trained structure
            names: Display names, defaults to "Record 1", "Record 2", ...

        Returns:
            One prediction per record, in input order
        """
        records = list(records)
        if not records:
            return []
        names = list(names) if names is not None else [f"Record {i}" for i in range(1, len(records) + 1)]
        if len(names) != len(records):
            raise ValueError(f"Got {len(names)} names for {len(records)} records")

        frame = self.build_records(records)
        indices = self.fitted.classifier.predict(frame)
        categories = self.structure.label.categories

        predictions = []
        for name, index in zip(names, indices):
            label = categories[int(index)]
            predictions.append(Prediction(name, label, int(index), label == self.positive_label))
        return predictions

    def predict_one(self, record: Record, name: str = "Record") -> Prediction:
        return self.predict([record], [name])[0]
