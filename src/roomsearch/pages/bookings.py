"""CourseDetailsPage - appointments of one course group.

DOM structure:
  table.subinfo
    tr
      ... table (appointment list)
        tr -> header row
        tr -> td weekday | td date "04.03.24" | td time "08:30 – 10:00" | td room
        tr -> td[colspan] description, skipped

The time span is separated by an en dash on the live site; a plain hyphen
is accepted as well.
"""

import re
from datetime import date, datetime, time
from urllib.parse import quote

from bs4 import BeautifulSoup

from roomsearch.errors import ExtractionError
from roomsearch.models import Booking, Course
from roomsearch.utils import cell_text, child_cells, table_rows

_TIME_SEPARATOR = re.compile(r"\s*[–-]\s*")

DATE_FORMAT = "%d.%m.%y"
TIME_FORMAT = "%H:%M"


def parse_date(text: str) -> date:
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise ExtractionError(f"unexpected date {text!r}") from e


def parse_time_span(text: str) -> tuple[time, time]:
    """Parse "08:30 – 10:00" into (08:30, 10:00)."""
    parts = _TIME_SEPARATOR.split(text.strip(), maxsplit=1)
    if len(parts) != 2:
        raise ExtractionError(f"unexpected time span {text!r}")

    try:
        start, end = (datetime.strptime(p, TIME_FORMAT).time() for p in parts)
    except ValueError as e:
        raise ExtractionError(f"unexpected time span {text!r}") from e

    return start, end


class CourseDetailsPage:
    """Course group details at /kusss/lvaregistrationlist.action."""

    URL_TEMPLATE = (
        "/kusss/lvaregistrationlist.action?coursegroupid={group}&showdetails={details}"
        "&abhart=all&courseclassid={cls}"
    )

    CONTAINER = "table.subinfo"
    APPOINTMENT_TABLES = "table.subinfo table"

    @classmethod
    def url(cls, base_url: str, course: Course) -> str:
        return base_url.rstrip("/") + cls.URL_TEMPLATE.format(
            group=quote(course.group_id, safe=""),
            details=quote(course.details_id, safe=""),
            cls=quote(course.class_id, safe=""),
        )

    @classmethod
    def extract(cls, soup: BeautifulSoup) -> list[Booking]:
        """Extract all appointments of one course group.

        A page without the details table (no appointments published) yields
        an empty list.

        Raises:
            ExtractionError: If a row holds an unreadable date or time span.
        """
        if soup.select_one(cls.CONTAINER) is None:
            return []

        bookings: list[Booking] = []
        for table in soup.select(cls.APPOINTMENT_TABLES):
            for row in table_rows(table)[1:]:
                cells = child_cells(row)
                if len(cells) != 4:
                    continue

                start, end = parse_time_span(cell_text(cells[2]))
                bookings.append(
                    Booking(
                        room_name=cell_text(cells[3]),
                        day=parse_date(cell_text(cells[1])),
                        start=start,
                        end=end,
                    )
                )

        return bookings
