"""
Dataset coercion for TableView.

Turns the accepted dataset shapes into an ordered stream of (label, entry)
pairs and normalizes each entry into a tuple of cell values.

Accepted datasets:
- Mapping: label -> entry, in insertion order
- list / tuple: positional labels 0..n-1
- pandas.DataFrame: column label -> column values
- pandas.Series: index label -> scalar
- numpy.ndarray: 1-D (index -> scalar) or 2-D (row index -> row values)
- None: empty dataset
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

import numpy as np
import pandas as pd


def _require_unique(index: pd.Index, what: str) -> None:
    if not index.is_unique:
        duplicates = index[index.duplicated()].unique().tolist()
        raise ValueError(f"{what} labels must be unique, duplicated: {duplicates}")


def iter_entries(data: Any) -> Iterator[tuple[Any, Any]]:
    """
    Yield (label, raw entry) pairs of a dataset in its natural order.

    Raises:
        TypeError: If `data` is not one of the accepted dataset shapes.
        ValueError: If a pandas object carries duplicated labels or an array has more than two dimensions.
    """
    if data is None:
        return

    if isinstance(data, pd.DataFrame):
        _require_unique(data.columns, "DataFrame column")
        yield from data.items()
    elif isinstance(data, pd.Series):
        _require_unique(data.index, "Series index")
        yield from data.items()
    elif isinstance(data, np.ndarray):
        if data.ndim == 0 or data.ndim > 2:
            raise ValueError(f"arrays must be 1-D or 2-D, got {data.ndim}-D")
        yield from enumerate(data.tolist())
    elif isinstance(data, Mapping):
        yield from data.items()
    elif isinstance(data, (list, tuple)):
        yield from enumerate(data)
    else:
        raise TypeError(
            f"Unsupported dataset type {type(data).__name__}: expected a mapping, "
            "list, tuple, pandas DataFrame/Series or numpy array"
        )


def is_scalar_entry(entry: Any) -> bool:
    """Strings and anything that is not a sequence, mapping or array count as one cell."""
    if isinstance(entry, (str, bytes, bytearray)):
        return True
    if isinstance(entry, (Mapping, pd.Series, pd.Index)):
        return False
    if isinstance(entry, np.ndarray):
        return entry.ndim == 0
    return not isinstance(entry, Sequence)


def entry_values(entry: Any) -> tuple:
    """
    Normalize one dataset entry into a tuple of cell values.

    Scalars become one-element tuples; mappings contribute their values in insertion order.
    """
    if is_scalar_entry(entry):
        if isinstance(entry, np.ndarray):
            return (entry.item(),)
        return (entry,)
    if isinstance(entry, Mapping):
        return tuple(entry.values())
    if isinstance(entry, (pd.Series, pd.Index, np.ndarray)):
        return tuple(entry.tolist())
    return tuple(entry)


def as_ordered_sequence(value: Any) -> tuple | None:
    """
    Return `value` as a tuple when it is an ordered sequence, else None.

    Strings, mappings, sets and scalars are not ordered sequences of labels.
    """
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return None
    if isinstance(value, np.ndarray):
        return tuple(value.tolist()) if value.ndim == 1 else None
    if isinstance(value, (pd.Series, pd.Index)):
        return tuple(value.tolist())
    if isinstance(value, Sequence):
        return tuple(value)
    return None
