"""
🧪 Unit Tests for sort order resolution
File: tests/unit/test_sort_order.py

Invalid sort orders never raise from render(): the result is an empty
string, a warning is logged and the cause is kept in `last_error`.

Run with: pytest tests/unit/test_sort_order.py -v
"""

import logging

import numpy as np
import pandas as pd
import pytest

from table_view import HeaderPlacement, InvalidSortOrderError, Orientation, TableView

pytestmark = pytest.mark.unit


@pytest.fixture
def view(xy_data):
    v = TableView(xy_data)
    v.show_headers = HeaderPlacement.FRONT
    return v


class TestValidSortOrder:
    def test_natural_order_without_sort_order(self, view):
        assert view.resolve_order() == ("x", "y")

    def test_vertical_rows_follow_sort_order(self, view):
        view.sort_order = ["y", "x"]
        html = view.render()
        assert html.index(">y</th>") < html.index(">x</th>")
        assert view.last_error is None

    def test_horizontal_columns_follow_sort_order(self, view):
        view.orientation = Orientation.HORIZONTAL
        view.sort_order = ("y", "x")
        html = view.render()
        assert '<thead><tr><th class="front">y</th><th class="front">x</th></tr></thead>' in html
        assert "<tr><td>3</td><td>1</td></tr>" in html

    @pytest.mark.parametrize(
        "order",
        [
            np.array(["y", "x"]),
            pd.Index(["y", "x"]),
            pd.Series(["y", "x"]),
        ],
    )
    def test_array_like_sort_orders(self, view, order):
        view.sort_order = order
        assert view.resolve_order() == ("y", "x")
        assert view.render() != ""

    def test_positional_labels(self):
        view = TableView([[1], [2], [3]])
        view.sort_order = range(2, -1, -1)
        assert view.render() == (
            '<table class="vertical"><tbody>'
            "<tr><td>3</td></tr><tr><td>2</td></tr><tr><td>1</td></tr>"
            "</tbody></table>"
        )

    def test_empty_sort_order_means_natural_order(self, view):
        natural = view.render()
        view.sort_order = []
        assert view.resolve_order() == ("x", "y")
        assert view.render() == natural
        assert view.last_error is None

    def test_empty_sort_order_horizontal(self, view):
        view.orientation = Orientation.HORIZONTAL
        view.sort_order = ()
        html = view.render()
        assert '<thead><tr><th class="front">x</th><th class="front">y</th></tr></thead>' in html

    def test_empty_sort_order_on_empty_dataset(self):
        view = TableView({})
        view.sort_order = []
        assert view.render() == '<table class="vertical"><tbody></tbody></table>'


class TestInvalidSortOrder:
    @pytest.mark.parametrize(
        "order,reason",
        [
            (["x"], InvalidSortOrderError.SIZE_MISMATCH),
            (["x", "y", "z"], InvalidSortOrderError.SIZE_MISMATCH),
            (["x", "z"], InvalidSortOrderError.UNKNOWN_KEY),
            (["x", ["y"]], InvalidSortOrderError.UNKNOWN_KEY),
            (["x", "x"], InvalidSortOrderError.DUPLICATE_KEY),
            ({"x", "y"}, InvalidSortOrderError.WRONG_TYPE),
            ({"x": 0, "y": 1}, InvalidSortOrderError.WRONG_TYPE),
            ("xy", InvalidSortOrderError.WRONG_TYPE),
            (5, InvalidSortOrderError.WRONG_TYPE),
        ],
    )
    def test_render_returns_empty_string(self, view, order, reason):
        view.sort_order = order

        assert view.render() == ""
        assert isinstance(view.last_error, InvalidSortOrderError)
        assert view.last_error.reason == reason

    def test_resolve_order_raises(self, view):
        view.sort_order = ["x", "z"]
        with pytest.raises(InvalidSortOrderError) as exc_info:
            view.resolve_order()
        assert exc_info.value.key == "z"
        assert "does not exist in source data" in str(exc_info.value)

    def test_warning_logged_with_cause(self, view, caplog):
        view.sort_order = ["x"]
        with caplog.at_level(logging.WARNING, logger="table_view"):
            assert view.render() == ""

        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("Invalid sort order for table" in m for m in messages)
        assert any("not the same as source data" in m for m in messages)

    def test_warning_logged_on_every_render(self, view, caplog):
        view.sort_order = ["x", "q"]
        with caplog.at_level(logging.WARNING, logger="table_view"):
            view.render()
            view.render()
        warnings = [r for r in caplog.records if "Invalid sort order" in r.getMessage()]
        assert len(warnings) == 2

    def test_recovers_after_fix(self, view):
        expected = view.render()

        view.sort_order = ["x", "nope"]
        assert view.render() == ""

        view.sort_order = None
        assert view.render() == expected
        assert view.last_error is None

    def test_str_never_raises(self, view):
        view.sort_order = object()
        assert str(view) == ""
