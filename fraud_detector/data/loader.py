"""Data loading utilities for delimited transaction files."""

import csv

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union
from loguru import logger

from .dataset import TabularDataset
from ..exceptions import DataFormatError

NAN_TOKENS = ('nan',)


class DataLoader:
    """Loads a delimited text file with a header row into a TabularDataset."""

    def __init__(
        self,
        delimiter: str = ',',
        quotechar: str = '"',
        missing_values: Iterable[str] = ('', '?')
    ):
        """
        Initialize the loader.

        Args:
            delimiter: Field separator
            quotechar: Character enclosing quoted fields
            missing_values: Field values treated as missing
        """
        self.delimiter = delimiter
        self.quotechar = quotechar
        self.missing_values = set(missing_values)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> 'DataLoader':
        """Create a loader from the ``data`` configuration section."""
        config = config or {}
        return cls(
            delimiter=config.get('delimiter', ','),
            quotechar=config.get('quotechar', '"'),
            missing_values=config.get('missing_values', ('', '?'))
        )

    def load(self, file_path: Union[str, Path]) -> TabularDataset:
        """
        Load a file and infer column types.

        A column is numeric when every non-missing value parses as a number,
        otherwise it is kept as text. The last column is the label.

        Args:
            file_path: Path to the delimited file

        Returns:
            Loaded dataset

        Raises:
            DataFormatError: If the file is absent, empty, or has rows whose
                field count disagrees with the header
        """
        file_path = Path(file_path)
        raw = self._read_raw(file_path)

        header = [str(name).strip() for name in raw.iloc[0]]
        if len(set(header)) != len(header):
            raise DataFormatError(f"Duplicate column names in header of {file_path}: {header}")

        rows = raw.iloc[1:].reset_index(drop=True)
        if rows.empty:
            raise DataFormatError(f"File has a header but no data rows: {file_path}")

        self._check_field_counts(file_path, len(header))

        rows.columns = header
        frame = pd.DataFrame({name: self._infer_column(rows[name]) for name in header})

        logger.info(f"Loaded {file_path.name}: {len(frame)} rows, {len(header)} columns")
        logger.debug(f"Column types: {dict(frame.dtypes.astype(str))}")
        return TabularDataset(frame)

    def _read_raw(self, file_path: Path) -> pd.DataFrame:
        """Read every field as text, header included."""
        if not file_path.exists():
            raise DataFormatError(f"File not found: {file_path}")

        try:
            return pd.read_csv(
                file_path,
                sep=self.delimiter,
                quotechar=self.quotechar,
                header=None,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True
            )
        except pd.errors.EmptyDataError as exc:
            raise DataFormatError(f"File is empty: {file_path}") from exc
        except pd.errors.ParserError as exc:
            raise DataFormatError(f"Malformed delimited file {file_path}: {exc}") from exc

    def _check_field_counts(self, file_path: Path, n_fields: int) -> None:
        """
        Reject records with fewer fields than the header.

        The parser pads short records, so the count is taken from the file
        itself rather than from the parsed frame.
        """
        with open(file_path, 'r', newline='') as f:
            reader = csv.reader(f, delimiter=self.delimiter, quotechar=self.quotechar, skipinitialspace=True)
            for record in reader:
                if record and len(record) < n_fields:
                    raise DataFormatError(
                        f"Line {reader.line_num} of {file_path} has fewer fields "
                        f"than the header ({len(record)} < {n_fields})"
                    )

    def _infer_column(self, values: pd.Series) -> pd.Series:
        """
        Convert a text column to float when every present value is numeric.

        ``nan`` spellings count as missing; infinite values are rejected.
        """
        values = values.str.strip()
        missing = values.isin(self.missing_values) | values.str.lower().isin(NAN_TOKENS)
        present = values[~missing]

        numbers = pd.to_numeric(present, errors='coerce')
        if numbers.notna().all():
            if np.isinf(numbers.to_numpy(dtype=float)).any():
                raise DataFormatError(f"Column '{values.name}' contains infinite values")
            column = pd.Series(np.nan, index=values.index, dtype='float64')
            column[~missing] = numbers.astype('float64')
            return column

        return values.where(~missing, None).astype(object)
