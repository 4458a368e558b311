"""CourseSearchPage - catalogue search results filtered by a single room.

DOM structure:
  div.contentcell > table (several, the result list is the last one)
    tr -> header row, skipped
    tr -> td (first column) > a[href="...?courseclassid=..&coursegroupid=..&showdetails=.."]

Every course group held in the room appears once per result page; the same
group is listed again on the result page of every other room it uses.
"""

from urllib.parse import parse_qs, quote, urlsplit

from bs4 import BeautifulSoup

from roomsearch.errors import ExtractionError
from roomsearch.models import CatalogueRoom, Course
from roomsearch.utils import child_cells, table_rows

REQUIRED_PARAMS = ("courseclassid", "coursegroupid", "showdetails")


class CourseSearchPage:
    """Course search results at /kusss/coursecatalogue-searchlvareg.action."""

    URL_TEMPLATE = (
        "/kusss/coursecatalogue-searchlvareg.action?sortParam0courses=lvaName&asccourses=true"
        "&showFilters=true&lvasearch=&direct=true&lvaName=&abhart=all&organisationalHint=&lastname=&firstname="
        "&lvaNr=&klaId=&type=all&curriculumContentKey=all&orgid=Alle&language=all&day=all&timefrom=all&timeto=all"
        "&room={room}"
    )

    RESULT_TABLES = "div.contentcell > table"

    @classmethod
    def url(cls, base_url: str, room: CatalogueRoom) -> str:
        return base_url.rstrip("/") + cls.URL_TEMPLATE.format(
            room=quote(room.catalogue_id, safe="")
        )

    @staticmethod
    def parse_course_link(href: str) -> Course:
        """Build a Course from the query parameters of a course details link.

        Raises:
            ExtractionError: If one of the three identifying parameters is missing.
        """
        params = parse_qs(urlsplit(href.strip()).query)
        values = [params.get(key, [""])[0].strip() for key in REQUIRED_PARAMS]
        if not all(values):
            raise ExtractionError(
                f"required parameters {', '.join(REQUIRED_PARAMS)} are missing in {href!r}"
            )

        class_id, group_id, details_id = values
        return Course(class_id=class_id, group_id=group_id, details_id=details_id)

    @classmethod
    def extract(cls, soup: BeautifulSoup) -> list[Course]:
        """Extract the courses listed for one room, duplicates included.

        A page without a result table (the site lists no courses) yields an
        empty list.

        Raises:
            ExtractionError: If a course link is malformed.
        """
        tables = soup.select(cls.RESULT_TABLES)
        if not tables:
            return []

        courses: list[Course] = []
        for row in table_rows(tables[-1])[1:]:
            cells = child_cells(row)
            if not cells:
                continue

            link = cells[0].find("a", href=True)
            if link is None:
                continue

            courses.append(cls.parse_course_link(link["href"]))

        return courses
