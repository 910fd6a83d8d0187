"""
📋 TableView - labeled dataset → HTML table

Renders a two-dimensional, possibly labeled, dataset as an HTML table element.

- Orientation: each dataset entry becomes a column (HORIZONTAL) or a row (VERTICAL)
- Header placement: labels before (FRONT), after (BACK) or on both sides of the data
- Extra headers: labels whose cells are emitted as <th> instead of <td>
- Sort order: a permutation of the labels used instead of their natural order
- Class-from-label: optional per-cell classes built from a prefix and the label

The shape of the dataset is validated once, at construction; an irregular
dataset raises ShapeMismatchError. Rendering never raises: an invalid sort
order produces an empty string plus a logged warning (see `last_error`).
Output is memoized per instance and reused while the configuration is unchanged.

Cell content and labels are inserted verbatim, without HTML escaping.

Usage:
    view = TableView({"x": [1, 2], "y": [3, 4]})
    view.show_headers = HeaderPlacement.FRONT
    html = view.render()
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from config import CONFIG
from logger import get_logger
from utils.dataset import as_ordered_sequence, entry_values, iter_entries
from utils.formatting import build_class_attr, format_cell, format_label, label_class
from utils.render_cache import RenderCache

logger = get_logger(__name__)


# ============================================================================
# Enums
# ============================================================================


def _coerce_member(enum_cls, value: Any, allowed: tuple[int, ...]):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            pass
    elif isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        if int(value) in allowed:
            return enum_cls(int(value))
    names = [m.name.lower() for m in enum_cls.__members__.values()]
    raise ValueError(f"Invalid {enum_cls.__name__} {value!r}, expected one of {names}")


class Orientation(enum.IntEnum):
    """How dataset entries map onto the table."""

    HORIZONTAL = 0  # each entry is a column
    VERTICAL = 1  # each entry is a row

    @classmethod
    def coerce(cls, value: Any) -> "Orientation":
        return _coerce_member(cls, value, (0, 1))


class HeaderPlacement(enum.IntFlag):
    """Where label headers are emitted relative to the data."""

    NONE = 0
    FRONT = 1
    BACK = 2
    BOTH = 3

    @classmethod
    def coerce(cls, value: Any) -> "HeaderPlacement":
        return _coerce_member(cls, value, (0, 1, 2, 3))


# ============================================================================
# Errors
# ============================================================================


class TableViewError(Exception):
    """Base class for TableView errors."""


class ShapeMismatchError(TableViewError, ValueError):
    """An entry's size differs from the size set by the first entry."""

    def __init__(self, label: Any, size: int, expected: int, axis: str = "row"):
        self.label = label
        self.size = size
        self.expected = expected
        self.axis = axis
        super().__init__(
            f"Size mismatch: {axis} {label!r} has {size} elements, {expected} expected"
        )


class InvalidSortOrderError(TableViewError, ValueError):
    """The configured sort order is not a permutation of the dataset labels."""

    WRONG_TYPE = "wrong_type"
    SIZE_MISMATCH = "size_mismatch"
    UNKNOWN_KEY = "unknown_key"
    DUPLICATE_KEY = "duplicate_key"

    def __init__(self, reason: str, message: str, key: Any = None):
        self.reason = reason
        self.key = key
        super().__init__(message)


# ============================================================================
# Settings snapshot
# ============================================================================


@dataclass(frozen=True)
class RenderSettings:
    """Value snapshot of everything a render depends on besides the dataset."""

    orientation: Orientation
    show_headers: HeaderPlacement
    sort_order: Optional[tuple]
    extra_headers: frozenset
    add_header_classes: bool
    class_prefix: Any
    table_id: Any
    table_class: Any


def _hashable_members(values: Any) -> frozenset:
    """Labels from an extra-headers value; a lone string or scalar is a single label."""
    if values is None:
        return frozenset()
    if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
        values = [values]
    elif isinstance(values, np.ndarray):
        values = values.ravel().tolist()
    members = set()
    for value in values:
        if isinstance(value, np.generic):
            value = value.item()
        try:
            hash(value)
        except TypeError:
            continue
        members.add(value)
    return frozenset(members)


# ============================================================================
# TableView
# ============================================================================


class TableView:
    """
    View of a labeled dataset as an HTML table element.

    Every attribute other than the dataset may be changed between renders:
    `orientation`, `show_headers`, `sort_order`, `extra_headers`,
    `add_header_classes`, `class_prefix`, `table_id` and `table_class`.

    An instance is meant to be used from a single thread at a time; its render
    cache is not locked.
    """

    def __init__(self, data: Any, orientation: Any = None):
        """
        Validate `data` and capture its shape.

        Parameters:
            data: The dataset (mapping, list/tuple, pandas DataFrame/Series, numpy array or None).
                Entries are sequences of cells, or scalars treated as one-element sequences.
            orientation: Orientation used for validation and rendering; defaults to
                CONFIG['table.orientation'].

        Raises:
            ShapeMismatchError: If the entries do not all have the same size.
            TypeError: If `data` is not an accepted dataset type.
        """
        self._data = data
        self._orientation = Orientation.coerce(
            CONFIG.get("table.orientation", "vertical") if orientation is None else orientation
        )
        self._show_headers = HeaderPlacement.coerce(CONFIG.get("table.show_headers", "none"))

        self.sort_order: Any = None
        self.extra_headers: Any = set()
        self.add_header_classes: bool = bool(CONFIG.get("table.add_header_classes", False))
        self.class_prefix: str = CONFIG.get("table.class_prefix", "data")
        self.table_id: str = ""
        self.table_class: str = ""
        self.last_error: Optional[InvalidSortOrderError] = None

        self._entries: dict[Any, tuple] = {}
        self._entry_size = 0
        self._validate_shape()

        self._cache = RenderCache()
        logger.log_table_summary(type(self).__name__, self.shape, len(self._entries))

    # ------------------------------------------------------------------
    # Shape validation
    # ------------------------------------------------------------------

    def _validate_shape(self) -> None:
        axis = "row" if self._orientation is Orientation.VERTICAL else "column"
        expected: Optional[int] = None

        for label, entry in iter_entries(self._data):
            values = entry_values(entry)
            if expected is not None and len(values) != expected:
                error = ShapeMismatchError(label, len(values), expected, axis=axis)
                logger.error(str(error))
                raise error
            expected = len(values)
            self._entries[label] = values

        self._entry_size = expected or 0

    @property
    def data(self) -> Any:
        """The dataset as passed to the constructor."""
        return self._data

    @property
    def labels(self) -> tuple:
        """Labels in natural (insertion) order."""
        return tuple(self._entries)

    @property
    def shape(self) -> tuple[int, int]:
        """(number of entries, entry size); fixed at construction."""
        return len(self._entries), self._entry_size

    @property
    def rows(self) -> int:
        if self._orientation is Orientation.VERTICAL:
            return len(self._entries)
        return self._entry_size

    @property
    def columns(self) -> int:
        if self._orientation is Orientation.VERTICAL:
            return self._entry_size
        return len(self._entries)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @orientation.setter
    def orientation(self, value: Any) -> None:
        # The shape is not re-validated; rows/columns are read the other way round.
        self._orientation = Orientation.coerce(value)

    @property
    def show_headers(self) -> HeaderPlacement:
        return self._show_headers

    @show_headers.setter
    def show_headers(self, value: Any) -> None:
        self._show_headers = HeaderPlacement.coerce(value)

    def _snapshot(self) -> RenderSettings:
        sort_order = self.sort_order
        if sort_order is not None:
            sort_order = self._ordered(sort_order)

        return RenderSettings(
            orientation=self._orientation,
            show_headers=self._show_headers,
            sort_order=sort_order,
            extra_headers=_hashable_members(self.extra_headers),
            add_header_classes=bool(self.add_header_classes),
            class_prefix=self.class_prefix,
            table_id=self.table_id,
            table_class=self.table_class,
        )

    # ------------------------------------------------------------------
    # Order resolution & cell classification
    # ------------------------------------------------------------------

    @staticmethod
    def _ordered(sort_order: Any) -> tuple:
        order = as_ordered_sequence(sort_order)
        if order is None:
            raise InvalidSortOrderError(
                InvalidSortOrderError.WRONG_TYPE,
                f"not an ordered sequence ({type(sort_order).__name__})",
            )
        return order

    def resolve_order(self, sort_order: Any = None) -> tuple:
        """
        Return the labels in the order they are rendered.

        Parameters:
            sort_order: Sort order to check; defaults to the view's `sort_order`.
                None or an empty sequence means natural label order.

        Raises:
            InvalidSortOrderError: If the sort order is not an ordered sequence, has a
                different size than the dataset, names an unknown label or repeats one.
        """
        if sort_order is None:
            sort_order = self.sort_order
        if sort_order is None:
            return self.labels

        order = self._ordered(sort_order)
        if not order:
            return self.labels

        if len(order) != len(self._entries):
            raise InvalidSortOrderError(
                InvalidSortOrderError.SIZE_MISMATCH,
                f"size {len(order)} is not the same as source data ({len(self._entries)})",
            )

        seen = set()
        for key in order:
            try:
                known = key in self._entries
            except TypeError:
                known = False
            if not known:
                raise InvalidSortOrderError(
                    InvalidSortOrderError.UNKNOWN_KEY,
                    f"key {key!r} does not exist in source data",
                    key=key,
                )
            if key in seen:
                raise InvalidSortOrderError(
                    InvalidSortOrderError.DUPLICATE_KEY,
                    f"key {key!r} appears more than once",
                    key=key,
                )
            seen.add(key)

        return order

    @staticmethod
    def _is_header(label: Any, extra_headers: frozenset) -> bool:
        return label in extra_headers

    def is_header(self, label: Any) -> bool:
        """Whether the cells of `label` are rendered as <th>."""
        return self._is_header(label, _hashable_members(self.extra_headers))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> str:
        """
        Return the HTML table for the current configuration.

        Never raises. With an invalid sort order the result is an empty string, the
        cause is logged as a warning and kept in `last_error`.
        """
        try:
            settings = self._snapshot()
            cached = self._cache.lookup(settings)
            if cached is not None:
                return cached

            with logger.track_time("render_table"):
                order = self.resolve_order(settings.sort_order)
                html = self._render_markup(settings, order)

        except InvalidSortOrderError as e:
            self.last_error = e
            self._cache.clear()
            logger.warning(f"Invalid sort order for table: {e}")
            return ""
        except Exception:
            self._cache.clear()
            logger.exception("Table rendering failed")
            return ""

        self.last_error = None
        self._cache.store(settings, html)
        if CONFIG.get("logging.log_render_operations"):
            logger.log_operation(
                "render_table", "completed",
                orientation=settings.orientation.name.lower(),
                rows=self.rows, columns=self.columns,
            )
        return html

    def _header_cell(self, label: Any, side: str, settings: RenderSettings) -> str:
        classes = [side]
        if settings.add_header_classes:
            classes.append(label_class(settings.class_prefix, label))
        return f"<th{build_class_attr(*classes)}>{format_label(label)}</th>"

    def _data_cell(self, label: Any, value: Any, settings: RenderSettings) -> str:
        tag = "th" if self._is_header(label, settings.extra_headers) else "td"
        class_attr = ""
        if settings.add_header_classes:
            class_attr = build_class_attr(label_class(settings.class_prefix, label))
        return f"<{tag}{class_attr}>{format_cell(value)}</{tag}>"

    def _render_markup(self, settings: RenderSettings, order: tuple) -> str:
        orientation_class = settings.orientation.name.lower()

        html = "<table"
        if settings.table_id:
            html += f' id="{settings.table_id}"'
        table_classes = [orientation_class]
        if settings.table_class:
            table_classes.append(str(settings.table_class))
        html += f"{build_class_attr(*table_classes)}>"

        if settings.orientation is Orientation.HORIZONTAL:
            html += self._render_horizontal(settings, order)
        else:
            html += self._render_vertical(settings, order)

        html += "</table>"
        return html

    def _render_horizontal(self, settings: RenderSettings, order: tuple) -> str:
        html = ""

        if order and settings.show_headers & HeaderPlacement.FRONT:
            html += "<thead><tr>"
            for label in order:
                html += self._header_cell(label, "front", settings)
            html += "</tr></thead>"

        if order and settings.show_headers & HeaderPlacement.BACK:
            html += "<tfoot><tr>"
            for label in order:
                html += self._header_cell(label, "back", settings)
            html += "</tr></tfoot>"

        html += "<tbody>"
        for i in range(self._entry_size):
            html += "<tr>"
            for label in order:
                html += self._data_cell(label, self._entries[label][i], settings)
            html += "</tr>"
        html += "</tbody>"
        return html

    def _render_vertical(self, settings: RenderSettings, order: tuple) -> str:
        html = "<tbody>"
        for label in order:
            html += "<tr>"
            if settings.show_headers & HeaderPlacement.FRONT:
                html += self._header_cell(label, "front", settings)
            for value in self._entries[label]:
                html += self._data_cell(label, value, settings)
            if settings.show_headers & HeaderPlacement.BACK:
                html += self._header_cell(label, "back", settings)
            html += "</tr>"
        html += "</tbody>"
        return html

    def cache_stats(self) -> dict:
        return self._cache.get_stats()

    def __str__(self) -> str:
        return self.render()

    def _repr_html_(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"TableView(rows={self.rows}, columns={self.columns}, "
            f"orientation={self._orientation.name.lower()})"
        )
