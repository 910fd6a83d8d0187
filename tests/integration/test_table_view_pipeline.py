"""
🧪 Integration Tests: DataFrame -> TableView -> markup

Exercises a full configuration round: pandas input, reconfiguration between
renders, an invalid sort order in the middle, and Shiny embedding.
"""

import re

import numpy as np
import pandas as pd
import pytest

from table_view import HeaderPlacement, Orientation, TableView
from utils.ui_helpers import table_view_output

pytestmark = pytest.mark.integration


@pytest.fixture
def scores_df():
    return pd.DataFrame(
        {
            "student": ["ann", "bob", "cy"],
            "math": [90, 75, np.nan],
            "art": [60.5, 88.0, 70.0],
        }
    )


def _cells(html, tag):
    return re.findall(rf"<{tag}[^>]*>(.*?)</{tag}>", html)


def test_report_table_round(scores_df):
    view = TableView(scores_df, orientation=Orientation.HORIZONTAL)
    view.table_id = "scores"
    view.table_class = "report"
    view.show_headers = HeaderPlacement.BOTH
    view.extra_headers = {"student"}
    view.add_header_classes = True
    view.class_prefix = "col-"

    html = view.render()
    assert html.startswith('<table id="scores" class="horizontal report">')
    assert _cells(html, "td") == ["90.0", "60.5", "75.0", "88.0", "", "70.0"]
    assert html.count('<th class="col-student">') == 3
    assert html.count('class="front') == 3
    assert html.count('class="back') == 3

    # Reorder columns; cached output must not be reused
    view.sort_order = ["art", "math", "student"]
    reordered = view.render()
    assert reordered != html
    assert _cells(reordered, "td")[:2] == ["60.5", "90.0"]

    # Bad order degrades to empty output, then recovers
    view.sort_order = ["art", "math"]
    assert view.render() == ""
    view.sort_order = None
    assert view.render() == html


def test_vertical_view_of_records(scores_df):
    records = scores_df.set_index("student").T.to_dict("list")
    view = TableView(records)
    view.show_headers = "front"

    html = view.render()
    assert view.shape == (3, 2)
    assert '<tr><th class="front">ann</th><td>90.0</td><td>60.5</td></tr>' in html
    assert '<tr><th class="front">cy</th><td></td><td>70.0</td></tr>' in html


def test_shiny_embedding(scores_df):
    view = TableView(scores_df, orientation="horizontal")
    tag = table_view_output(view, title="Scores")
    rendered = str(tag)
    assert view.render() in rendered
