"""
Cell & attribute formatting for TableView markup.
Driven by central configuration from config.py

Content is inserted verbatim: escaping is the caller's responsibility.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from config import CONFIG


def is_missing(value: Any) -> bool:
    """True for None, NaN, pandas.NA and NaT; False for containers and everything else."""
    if value is None:
        return True
    try:
        if np.ndim(value) != 0:
            return False
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def format_cell(value: Any) -> str:
    """
    Convert a cell value into the text placed between its tags.

    Missing values use CONFIG['table.missing_text']; numpy scalars are unwrapped
    to their Python value so they print the same as plain numbers.
    """
    if is_missing(value):
        return str(CONFIG.get("table.missing_text", ""))
    if isinstance(value, np.generic):
        value = value.item()
    return str(value)


def format_label(label: Any) -> str:
    if isinstance(label, np.generic):
        label = label.item()
    return str(label)


def label_class(prefix: Any, label: Any) -> str:
    """Class name derived from a label, e.g. prefix 'data' + label 'x' -> 'datax'."""
    return f"{'' if prefix is None else prefix}{format_label(label)}"


def build_class_attr(*classes: str) -> str:
    """
    Build a ` class="..."` attribute from the non-empty class names.

    Returns an empty string when no class name remains.
    """
    names = [c for c in classes if c]
    if not names:
        return ""
    return f' class="{" ".join(names)}"'
