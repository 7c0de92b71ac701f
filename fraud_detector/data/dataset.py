"""In-memory labeled table."""

from typing import Sequence

import numpy as np
import pandas as pd

from .schema import Schema
from ..exceptions import DataFormatError


class TabularDataset:
    """
    A DataFrame whose last column is the label.

    The schema is derived from the frame's dtypes, so transforms only have to
    produce a correctly typed frame.
    """

    def __init__(self, frame: pd.DataFrame):
        if frame.shape[1] == 0:
            raise DataFormatError("Dataset has no columns")
        self.frame = frame

    @property
    def schema(self) -> Schema:
        return Schema.from_frame(self.frame)

    @property
    def num_rows(self) -> int:
        return len(self.frame)

    @property
    def num_attributes(self) -> int:
        return self.frame.shape[1]

    @property
    def label_name(self) -> str:
        return str(self.frame.columns[-1])

    @property
    def features(self) -> pd.DataFrame:
        return self.frame.iloc[:, :-1]

    @property
    def labels(self) -> pd.Series:
        return self.frame.iloc[:, -1]

    def label_codes(self) -> np.ndarray:
        """Category index of every label value; -1 where missing."""
        labels = self.labels
        if not isinstance(labels.dtype, pd.CategoricalDtype):
            raise DataFormatError(f"Label column '{self.label_name}' is not nominal")
        return labels.cat.codes.to_numpy()

    def subset(self, indices: Sequence[int]) -> 'TabularDataset':
        return TabularDataset(self.frame.iloc[list(indices)].reset_index(drop=True))

    def empty_copy(self) -> 'TabularDataset':
        """Same columns and dtypes, zero rows."""
        return TabularDataset(self.frame.iloc[0:0].copy())

    def __len__(self) -> int:
        return self.num_rows

    def __repr__(self) -> str:
        return f"TabularDataset(rows={self.num_rows}, attributes={self.num_attributes})"
