"""Page extractors: one class per scraped page type.

Each class knows how to build the URL of its page and how to turn the
parsed document into records. Extractors never touch the network.
"""

from roomsearch.pages.bookings import CourseDetailsPage
from roomsearch.pages.buildings import BuildingsPage
from roomsearch.pages.courses import CourseSearchPage
from roomsearch.pages.rooms import CatalogueRoomsPage, DirectoryRoomsPage

__all__ = [
    "BuildingsPage",
    "CatalogueRoomsPage",
    "CourseDetailsPage",
    "CourseSearchPage",
    "DirectoryRoomsPage",
]
