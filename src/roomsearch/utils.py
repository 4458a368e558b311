"""Shared HTML helpers for the page extractors."""

import re

from bs4 import Comment, NavigableString, Tag

from roomsearch.names import clean_name

_LEADING_INT = re.compile(r"\s*(\d+)")


def table_rows(table: Tag) -> list[Tag]:
    """Direct rows of a table, with or without a <tbody> wrapper."""
    return table.select(":scope > tr, :scope > tbody > tr, :scope > thead > tr")


def child_cells(row: Tag) -> list[Tag]:
    """Direct <td> children of a row."""
    return row.find_all("td", recursive=False)


def cell_text(cell: Tag) -> str:
    return clean_name(cell.get_text(" "))


def own_text(tag: Tag) -> str:
    """Text directly inside ``tag``, ignoring the text of nested elements."""
    return "".join(
        str(child)
        for child in tag.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    )


def parse_int(text: str) -> int | None:
    """Leading integer of ``text`` ("120 seats" -> 120), None if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None
