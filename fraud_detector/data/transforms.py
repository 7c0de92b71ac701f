"""
Column Transforms
=================

Reversible column transforms used by the preprocessing pipeline. Each
transform is split into ``fit`` (derive parameters from a dataset) and
``apply`` (replay parameters on any dataset with the same raw structure), so
the parameters captured at training time are the only source of truth at
prediction time.

Transforms:
1. RemoveColumns - drop columns by 1-based position or by name
2. StringToCategorical - text columns to nominal with a captured vocabulary
3. NumericToCategorical - numeric columns to nominal over observed values

"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from loguru import logger

from .dataset import TabularDataset
from .schema import ColumnKind
from ..exceptions import DataFormatError

ColumnSelection = Union[str, int, Sequence[Union[str, int]]]


def parse_index_ranges(selection: ColumnSelection, n_columns: int) -> List[int]:
    """
    Resolve a 1-based range expression to sorted 0-based column indices.

    Accepts ``"2,5-7"``, ``"first-last"``, ``"last"``, a single int or a list
    of ints.

    Raises:
        DataFormatError: If a position falls outside ``1..n_columns``
    """
    if isinstance(selection, int):
        tokens = [str(selection)]
    elif isinstance(selection, str):
        tokens = [t.strip() for t in selection.split(',') if t.strip()]
    else:
        tokens = [str(t).strip() for t in selection]

    def position(token: str) -> int:
        token = token.lower()
        if token == 'first':
            return 1
        if token == 'last':
            return n_columns
        try:
            value = int(token)
        except ValueError:
            raise DataFormatError(f"Invalid column position: {token!r}") from None
        if not 1 <= value <= n_columns:
            raise DataFormatError(f"Column position {value} out of range 1-{n_columns}")
        return value

    indices = set()
    for token in tokens:
        if '-' in token:
            start, end = token.split('-', 1)
            lo, hi = position(start), position(end)
            if lo > hi:
                raise DataFormatError(f"Invalid column range: {token!r}")
            indices.update(range(lo - 1, hi))
        else:
            indices.add(position(token) - 1)
    return sorted(indices)


def resolve_columns(selection: ColumnSelection, columns: Sequence[str]) -> List[str]:
    """Resolve a position expression or a list of names to column names."""
    names = list(columns)
    if isinstance(selection, (list, tuple)) and selection and all(
        isinstance(s, str) and not s.strip().isdigit() for s in selection
    ):
        unknown = [s for s in selection if s not in names]
        if unknown:
            raise DataFormatError(f"Unknown columns {unknown}; available: {names}")
        return [n for n in names if n in selection]
    return [names[i] for i in parse_index_ranges(selection, len(names))]


def format_number(value: float) -> str:
    """Render a numeric category label; integral values lose the ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class RemovalParams:
    input_columns: Tuple[str, ...]
    removed: Tuple[str, ...]


@dataclass(frozen=True)
class VocabularyParams:
    vocabularies: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self.vocabularies)


class Transform(ABC):
    """A column transform with separate fit and replay steps."""

    name = 'transform'

    def __init__(self, columns: ColumnSelection):
        self.columns = columns

    @abstractmethod
    def fit(self, dataset: TabularDataset) -> Any:
        """Derive parameters from ``dataset``."""
        pass

    @abstractmethod
    def apply(self, params: Any, dataset: TabularDataset) -> TabularDataset:
        """Transform ``dataset`` using previously fitted ``params``."""
        pass

    def fit_apply(self, dataset: TabularDataset) -> Tuple[Any, TabularDataset]:
        params = self.fit(dataset)
        return params, self.apply(params, dataset)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(columns={self.columns!r})"


class RemoveColumns(Transform):
    """Drop columns selected by 1-based position or name."""

    name = 'remove'

    def fit(self, dataset: TabularDataset) -> RemovalParams:
        columns = [str(c) for c in dataset.frame.columns]
        removed = resolve_columns(self.columns, columns)
        if len(removed) == len(columns):
            raise DataFormatError("Column removal would drop every column")
        logger.debug(f"Removing columns {removed}")
        return RemovalParams(tuple(columns), tuple(removed))

    def apply(self, params: RemovalParams, dataset: TabularDataset) -> TabularDataset:
        columns = tuple(str(c) for c in dataset.frame.columns)
        if columns != params.input_columns:
            raise DataFormatError(
                f"Input columns {list(columns)} do not match training columns {list(params.input_columns)}"
            )
        return TabularDataset(dataset.frame.drop(columns=list(params.removed)))


class _CategoricalTransform(Transform):
    """Shared replay for transforms that map values into a fixed vocabulary."""

    @abstractmethod
    def _convert(self, values: pd.Series, vocabulary: Tuple[str, ...]) -> pd.Categorical:
        """Map ``values`` onto ``vocabulary``."""
        pass

    def apply(self, params: VocabularyParams, dataset: TabularDataset) -> TabularDataset:
        frame = dataset.frame.copy()
        for column, vocabulary in params.vocabularies:
            if column not in frame.columns:
                raise DataFormatError(f"Column '{column}' missing from dataset")
            frame[column] = self._convert(frame[column], vocabulary)
        return TabularDataset(frame)

    @staticmethod
    def _check_vocabulary(column: str, labels: pd.Series, vocabulary: Tuple[str, ...]) -> None:
        unknown = sorted(set(labels.dropna()) - set(vocabulary))
        if unknown:
            raise DataFormatError(
                f"Values {unknown[:10]} in column '{column}' are not in the training vocabulary"
            )


class StringToCategorical(_CategoricalTransform):
    """
    Convert text columns to nominal columns.

    The vocabulary is the distinct values in order of first appearance in the
    fit-time data and is never refit on later data.
    """

    name = 'string_to_nominal'

    def fit(self, dataset: TabularDataset) -> VocabularyParams:
        schema = dataset.schema
        selected = resolve_columns(self.columns, schema.names)
        vocabularies = []
        for column in selected:
            if schema.attribute(column).kind != ColumnKind.STRING:
                continue
            values = dataset.frame[column].dropna().astype(str)
            vocabulary = tuple(pd.unique(values))
            vocabularies.append((column, vocabulary))
            logger.debug(f"  {column}: {len(vocabulary)} categories")
        return VocabularyParams(tuple(vocabularies))

    def _convert(self, values: pd.Series, vocabulary: Tuple[str, ...]) -> pd.Categorical:
        labels = values.astype(object).where(values.notna(), None)
        labels = labels.map(lambda v: None if v is None else str(v))
        self._check_vocabulary(values.name, labels, vocabulary)
        return pd.Categorical(labels, categories=list(vocabulary))


class NumericToCategorical(_CategoricalTransform):
    """Convert numeric columns to nominal columns over their sorted distinct values."""

    name = 'numeric_to_nominal'

    def fit(self, dataset: TabularDataset) -> VocabularyParams:
        schema = dataset.schema
        selected = resolve_columns(self.columns, schema.names)
        vocabularies = []
        for column in selected:
            if schema.attribute(column).kind != ColumnKind.NUMERIC:
                continue
            distinct = np.unique(dataset.frame[column].dropna().to_numpy(dtype=float))
            vocabulary = tuple(format_number(v) for v in distinct)
            vocabularies.append((column, vocabulary))
            logger.debug(f"  {column}: {list(vocabulary)}")
        return VocabularyParams(tuple(vocabularies))

    def _convert(self, values: pd.Series, vocabulary: Tuple[str, ...]) -> pd.Categorical:
        if isinstance(values.dtype, pd.CategoricalDtype):
            values = values.astype(object)
        numbers = pd.to_numeric(values, errors='coerce')
        invalid = values.notna() & numbers.isna()
        if invalid.any():
            raise DataFormatError(
                f"Non-numeric values {list(values[invalid].unique()[:10])} in column '{values.name}'"
            )
        labels = numbers.map(lambda v: None if pd.isna(v) else format_number(v)).astype(object)
        self._check_vocabulary(values.name, labels, vocabulary)
        return pd.Categorical(labels, categories=list(vocabulary))
