"""Room extractors for the two independent room sources.

CatalogueRoomsPage reads the bookable rooms from the room selector of the
course catalogue search form. DirectoryRoomsPage reads room names and
capacities from a building page of the campus directory. The two are joined
later by canonical name.
"""

import re

from bs4 import BeautifulSoup

from roomsearch.errors import ExtractionError
from roomsearch.models import Building, CatalogueRoom, DirectoryRoom
from roomsearch.names import clean_name
from roomsearch.utils import cell_text, child_cells, parse_int


class CatalogueRoomsPage:
    """Course catalogue search form.

    DOM structure:
      select#room
        option[value=all] -> "all rooms", skipped
        option[value=<catalogue id>] -> room name
    """

    URL_PATH = "/kusss/coursecatalogue-start.action?showFilters=true"

    ROOM_SELECT = "select#room"

    @classmethod
    def url(cls, base_url: str) -> str:
        return base_url.rstrip("/") + cls.URL_PATH

    @classmethod
    def extract(cls, soup: BeautifulSoup) -> list[CatalogueRoom]:
        """Extract the bookable rooms offered by the room selector.

        Raises:
            ExtractionError: If the room selector is missing.
        """
        select = soup.select_one(cls.ROOM_SELECT)
        if select is None:
            raise ExtractionError(f"room selector not found ({cls.ROOM_SELECT})")

        rooms: list[CatalogueRoom] = []
        # the first option selects all rooms
        for option in select.find_all("option")[1:]:
            name = clean_name(option.get_text())
            value = (option.get("value") or "").strip()
            if name and value:
                rooms.append(CatalogueRoom(name=name, catalogue_id=value))

        return rooms


class DirectoryRoomsPage:
    """Building page of the campus directory.

    DOM structure:
      div.content_container > div.text > div.body > table.contenttable (one or more)
        tr -> header row, skipped
        tr -> td description ("Hörsaal 1") | td room number ("HS 1") | td capacity
    Rows without exactly three cells are headings or notes.
    """

    CONTAINER = "div.content_container"
    ROOM_TABLES = "div.content_container > div.text > div.body > table.contenttable"

    LECTURE_HALL = re.compile(r"(?:HS|Hörsaal|Lecture Hall) (\d+)")

    @staticmethod
    def url(building: Building) -> str:
        return building.url

    @classmethod
    def room_name(cls, description: str, number: str) -> str:
        """Lecture halls are known as "HS N" everywhere else."""
        match = cls.LECTURE_HALL.search(description)
        if match:
            return f"HS {match.group(1)}"
        return clean_name(number)

    @classmethod
    def extract(
        cls, soup: BeautifulSoup, building_id: int | None = None
    ) -> list[DirectoryRoom]:
        """Extract the rooms of one building.

        A building page without room tables yields an empty list.

        Raises:
            ExtractionError: If the page has no content container.
        """
        if soup.select_one(cls.CONTAINER) is None:
            raise ExtractionError(f"content container not found ({cls.CONTAINER})")

        rooms: list[DirectoryRoom] = []
        for table in soup.select(cls.ROOM_TABLES):
            for row in table.find_all("tr")[1:]:
                cells = child_cells(row)
                if len(cells) != 3:
                    continue

                name = cls.room_name(cell_text(cells[0]), cell_text(cells[1]))
                if not name:
                    continue

                rooms.append(
                    DirectoryRoom(
                        name=name,
                        capacity=parse_int(cell_text(cells[2])),
                        building_id=building_id,
                    )
                )

        return rooms
