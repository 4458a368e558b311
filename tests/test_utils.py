import pytest
from bs4 import BeautifulSoup

from roomsearch.utils import cell_text, own_text, parse_int, table_rows


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("120", 120),
        ("  80 seats", 80),
        ("30\n", 30),
        ("-", None),
        ("", None),
        ("ca. 40", None),
    ],
)
def test_parse_int_reads_leading_number(text, expected):
    assert parse_int(text) == expected


def test_table_rows_with_and_without_tbody():
    html = (
        "<table><tr><td>a</td></tr><tbody><tr><td>b</td></tr></tbody>"
        "<tr><td><table><tr><td>nested</td></tr></table></td></tr></table>"
    )
    table = BeautifulSoup(html, "html.parser").table

    rows = table_rows(table)

    assert [cell_text(row.td) for row in rows[:2]] == ["a", "b"]
    assert len(rows) == 3


def test_own_text_skips_nested_markup_and_comments():
    tag = BeautifulSoup("<h3><span>3</span> Science <!-- x -->Park</h3>", "html.parser").h3
    assert own_text(tag) == " Science Park"
