"""Free room index builder for the JKU course catalogue.

Scrapes buildings, rooms, courses and their bookings, and inverts the
bookings into the free time spans of every room and day.
"""

from roomsearch.indexer import IndexAssembler
from roomsearch.models import Index, ScrapeStatistics
from roomsearch.splittree import split

__all__ = [
    "IndexAssembler",
    "Index",
    "ScrapeStatistics",
    "split",
]
