"""BuildingsPage - lists the campus buildings of the university homepage.

DOM structure:
  li.stripe_element
    div
      h3 -> "<span>3</span> Science Park 1" (leading number, sometimes nested markup)
      a.stripe_btn[href] -> ".../buildings/science-park-1/"

Only entries linking to a building sub-page are kept, other stripes on the
page (news, campus map) link elsewhere.
"""

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from roomsearch.errors import ExtractionError
from roomsearch.models import Building
from roomsearch.names import clean_name
from roomsearch.utils import own_text

_LEADING_NUMBER = re.compile(r"^\d+\s+")


class BuildingsPage:
    """Building listing at /en/campus/the-jku-campus/buildings/."""

    URL_PATH = "/en/campus/the-jku-campus/buildings/"

    ENTRY = "li.stripe_element > div"
    HEADER = "h3"
    LINK = "a.stripe_btn"
    BUILDING_LINK = re.compile(r"/(?:buildings|gebaeude)/")

    @classmethod
    def url(cls, base_url: str) -> str:
        return base_url.rstrip("/") + cls.URL_PATH

    @classmethod
    def extract(cls, soup: BeautifulSoup, base_url: str) -> list[Building]:
        """Extract buildings in listing order.

        Args:
            soup: Parsed building listing page.
            base_url: Directory base URL, used to resolve relative links.

        Raises:
            ExtractionError: If the page has no building stripes at all.
        """
        entries = soup.select(cls.ENTRY)
        if not entries:
            raise ExtractionError(f"no building entries found ({cls.ENTRY})")

        buildings: list[Building] = []
        for entry in entries:
            header = entry.select_one(f":scope > {cls.HEADER}")
            link = entry.select_one(f":scope > {cls.LINK}")
            if header is None or link is None:
                continue

            href = (link.get("href") or "").strip()
            if not cls.BUILDING_LINK.search(href):
                continue

            name = _LEADING_NUMBER.sub("", clean_name(own_text(header)))
            if not name:
                continue

            buildings.append(
                Building(name=name, url=urljoin(base_url.rstrip("/") + "/", href))
            )

        return buildings
