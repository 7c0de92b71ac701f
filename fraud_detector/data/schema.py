"""
Column Schema
=============

Ordered description of a table's columns. The last attribute is always the
label. Schemas are immutable and compare equal only when every attribute
matches, including the order of nominal vocabularies.

"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

import pandas as pd

from ..exceptions import DataFormatError


class ColumnKind(str, Enum):
    """Type of a single column."""
    NUMERIC = 'numeric'
    NOMINAL = 'nominal'
    STRING = 'string'


@dataclass(frozen=True)
class Attribute:
    """A named, typed column. ``categories`` is empty unless nominal."""
    name: str
    kind: ColumnKind
    categories: Tuple[str, ...] = ()

    @property
    def is_nominal(self) -> bool:
        return self.kind == ColumnKind.NOMINAL

    def index_of(self, value: str) -> int:
        """Return the category index of ``value`` for a nominal attribute."""
        if not self.is_nominal:
            raise DataFormatError(f"Attribute '{self.name}' is not nominal")
        try:
            return self.categories.index(value)
        except ValueError:
            raise DataFormatError(
                f"Value {value!r} is not in the vocabulary of '{self.name}': {list(self.categories)}"
            ) from None

    def __str__(self) -> str:
        if self.is_nominal:
            return f"{self.name} {{{','.join(self.categories)}}}"
        return f"{self.name} {self.kind.value}"


@dataclass(frozen=True)
class Schema:
    """Ordered attributes of a dataset; the last one is the label."""
    attributes: Tuple[Attribute, ...]

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> 'Schema':
        """Derive a schema from DataFrame dtypes."""
        attributes = []
        for name in frame.columns:
            dtype = frame[name].dtype
            if isinstance(dtype, pd.CategoricalDtype):
                categories = tuple(str(c) for c in dtype.categories)
                attributes.append(Attribute(str(name), ColumnKind.NOMINAL, categories))
            elif pd.api.types.is_numeric_dtype(dtype):
                attributes.append(Attribute(str(name), ColumnKind.NUMERIC))
            else:
                attributes.append(Attribute(str(name), ColumnKind.STRING))
        return cls(tuple(attributes))

    @property
    def names(self) -> List[str]:
        return [a.name for a in self.attributes]

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def label_index(self) -> int:
        return len(self.attributes) - 1

    @property
    def label(self) -> Attribute:
        if not self.attributes:
            raise DataFormatError("Schema has no attributes")
        return self.attributes[-1]

    @property
    def feature_attributes(self) -> Tuple[Attribute, ...]:
        return self.attributes[:-1]

    def attribute(self, name: str) -> Attribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise DataFormatError(f"Unknown attribute: {name}")

    def diff(self, other: 'Schema') -> List[str]:
        """List human-readable differences between two schemas."""
        problems = []
        if self.num_attributes != other.num_attributes:
            problems.append(f"attribute count {self.num_attributes} != {other.num_attributes}")
        for i, (mine, theirs) in enumerate(zip(self.attributes, other.attributes)):
            if mine.name != theirs.name:
                problems.append(f"attribute {i}: name '{mine.name}' != '{theirs.name}'")
            elif mine.kind != theirs.kind:
                problems.append(f"attribute '{mine.name}': kind {mine.kind.value} != {theirs.kind.value}")
            elif mine.categories != theirs.categories:
                problems.append(
                    f"attribute '{mine.name}': categories {list(mine.categories)} != {list(theirs.categories)}"
                )
        return problems

    def describe(self) -> str:
        return '\n'.join(f"  {i + 1}. {attr}" for i, attr in enumerate(self.attributes))

    def __len__(self) -> int:
        return len(self.attributes)
