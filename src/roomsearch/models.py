"""Pydantic models for scraped records, the room index and run statistics.

All data structures use Pydantic v2 for validation, serialization, and type safety.
"""

from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field

# [from, to) in minutes since midnight
TimeSpan = tuple[int, int]


def to_minutes(value: time) -> int:
    """Minutes since midnight, e.g. 08:30 -> 510."""
    return value.hour * 60 + value.minute


class Building(BaseModel):
    """A building from the campus directory listing."""

    name: str  # "Science Park 1", leading listing numbers removed
    url: str  # Absolute URL of the building's room directory page


class DirectoryRoom(BaseModel):
    """A room entry from a building page of the campus directory.

    Only donates metadata (capacity, building) to catalogue rooms.
    """

    name: str  # "HS 1", "S3 048"
    capacity: int | None = None
    building_id: int | None = None


class CatalogueRoom(BaseModel):
    """A bookable room from the course catalogue search form."""

    name: str
    catalogue_id: str  # <option value> of the room selector


class Room(BaseModel):
    """A merged room; every Room originates from a catalogue room."""

    id: int
    name: str
    building: int | None = None
    capacity: int | None = None

    @property
    def complete(self) -> bool:
        return self.building is not None and self.capacity is not None


class Course(BaseModel):
    """One course group of the catalogue, identified by its three URL parameters.

    Frozen so that equal triples hash equally.
    """

    model_config = ConfigDict(frozen=True)

    class_id: str  # courseclassid
    group_id: str  # coursegroupid
    details_id: str  # showdetails


class Booking(BaseModel):
    """A single scheduled appointment of a course in some room."""

    room_name: str  # Free text, resolved through canonical_name()
    day: date
    start: time
    end: time

    @property
    def span(self) -> TimeSpan:
        return (to_minutes(self.start), to_minutes(self.end))


class IndexRange(BaseModel):
    """Inclusive span of days covered by the index."""

    start: str  # "2024-03-04T00:00:00"
    end: str  # "2024-07-31T23:59:59"


class BuildingEntry(BaseModel):
    name: str


class RoomEntry(BaseModel):
    name: str
    building: int = -1  # -1 if unknown
    capacity: int = -1  # -1 if unknown


class Index(BaseModel):
    """The room availability index written at the end of a run.

    ``available`` maps day keys (YYYY-MM-DD) to room ids to free time spans.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    range: IndexRange
    buildings: dict[str, BuildingEntry]
    rooms: dict[str, RoomEntry]
    available: dict[str, dict[str, list[TimeSpan]]]


class ScrapeStatistics(BaseModel):
    """Counters collected during one run, logged once at the end."""

    requests: int = 0
    scraped_buildings: int = 0
    extra_buildings: int = 0
    extra_rooms: int = 0
    directory_rooms: int = 0
    catalogue_rooms: int = 0
    incomplete_rooms: int = 0
    scraped_courses: int = 0
    duplicate_courses: int = 0
    empty_course_pages: int = 0
    scraped_bookings: int = 0
    empty_booking_pages: int = 0
    ignored_bookings: int = 0
    unknown_rooms: list[str] = Field(default_factory=list)
    days: int = 0
    free_days: int = 0
    range: IndexRange | None = None
