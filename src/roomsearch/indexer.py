"""IndexAssembler - builds the room availability index from scratch.

Stages run strictly one after another, each one fully awaited before the
next, because later stages need the ids assigned by earlier ones:

  buildings -> directory rooms -> catalogue rooms (merge) -> courses
  -> bookings -> day range -> reconciliation -> Index

Any exception escaping a stage aborts the run, a malformed course link or
appointment row included. Course and booking pages without results are
counted, not fatal.
"""

from collections import defaultdict
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, timezone

from structlog.contextvars import bound_contextvars

from roomsearch import campus
from roomsearch.config import ScraperConfig
from roomsearch.dedup import CourseSet
from roomsearch.errors import EmptyResultError
from roomsearch.fetcher import Fetcher
from roomsearch.logging import get_logger
from roomsearch.models import (
    Building,
    BuildingEntry,
    CatalogueRoom,
    DirectoryRoom,
    Index,
    IndexRange,
    Room,
    RoomEntry,
    ScrapeStatistics,
    TimeSpan,
)
from roomsearch.names import canonical_name, clean_name, matches_any
from roomsearch.pages import (
    BuildingsPage,
    CatalogueRoomsPage,
    CourseDetailsPage,
    CourseSearchPage,
    DirectoryRoomsPage,
)
from roomsearch.splittree import split

log = get_logger(__name__)

# day -> room id -> [from, to) spans, booked until reconciled, free afterwards
Availability = defaultdict[date, defaultdict[int, list[TimeSpan]]]


def new_availability() -> Availability:
    return defaultdict(lambda: defaultdict(list))


class RoomArena:
    """Merged rooms with dense ids plus a canonical name lookup table."""

    def __init__(self) -> None:
        self.rooms: list[Room] = []
        self.catalogue: list[CatalogueRoom] = []
        self._by_name: dict[str, int] = {}

    def add(
        self, catalogue_room: CatalogueRoom, metadata: DirectoryRoom | None = None
    ) -> Room | None:
        """Add a catalogue room. Returns None if its canonical name is taken."""
        key = canonical_name(catalogue_room.name)
        if key in self._by_name:
            return None

        room = Room(
            id=len(self.rooms),
            name=catalogue_room.name,
            building=metadata.building_id if metadata else None,
            capacity=metadata.capacity if metadata else None,
        )
        self._by_name[key] = room.id
        self.rooms.append(room)
        self.catalogue.append(catalogue_room)
        return room

    def resolve(self, name: str) -> Room | None:
        index = self._by_name.get(canonical_name(name))
        return self.rooms[index] if index is not None else None

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self.rooms)


def day_range(first: date, last: date) -> Iterator[date]:
    """All days from ``first`` to ``last``, both inclusive."""
    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)


def reconcile(
    available: Availability,
    first: date,
    last: date,
    room_ids: list[int],
    window: TimeSpan,
    breaks: list[TimeSpan],
) -> None:
    """Replace the booked spans of every (day, room) cell by its free spans.

    Every day in the range and every room gets a cell, booked or not.
    Free spans that are exactly a break are dropped, they are too short to
    be booked on their own.
    """
    break_set = set(breaks)
    for day in day_range(first, last):
        cells = available[day]
        for room_id in room_ids:
            free = split(window, cells[room_id])
            cells[room_id] = [span for span in free if span not in break_set]


class IndexAssembler:
    """Runs all scraping stages and assembles the Index.

    Statistics are collected in ``self.stats`` and logged once when
    build() returns or fails.
    """

    def __init__(
        self, fetcher: Fetcher, config: ScraperConfig, *, quick: bool = False
    ) -> None:
        self.fetcher = fetcher
        self.config = config
        self.quick = quick
        self.stats = ScrapeStatistics()

    def _limit(self, items: list, factor: int = 1) -> list:
        if self.quick:
            return items[: self.config.quick_limit * factor]
        return items

    async def build(self) -> Index:
        """Scrape everything and return the finished index.

        Raises:
            ScrapingError: On any fatal failure; nothing is returned then.
        """
        version = datetime.now(timezone.utc).isoformat(timespec="seconds")

        try:
            with bound_contextvars(stage="buildings"):
                buildings = await self.scrape_buildings()
            with bound_contextvars(stage="directory"):
                directory = await self.scrape_directory(buildings)
            with bound_contextvars(stage="rooms"):
                arena = await self.scrape_rooms(directory)
            with bound_contextvars(stage="courses"):
                courses = await self.scrape_courses(arena)
            with bound_contextvars(stage="bookings"):
                available = await self.scrape_bookings(courses, arena)

            with bound_contextvars(stage="reconcile"):
                first, last = self.booked_range(available)
                reconcile(
                    available,
                    first,
                    last,
                    [room.id for room in arena],
                    campus.booking_window(),
                    campus.break_times(),
                )

            index = Index(
                version=version,
                range=self.stats.range,
                buildings={
                    str(i): BuildingEntry(name=b.name) for i, b in enumerate(buildings)
                },
                rooms={
                    str(room.id): RoomEntry(
                        name=room.name,
                        building=room.building if room.building is not None else -1,
                        capacity=room.capacity if room.capacity is not None else -1,
                    )
                    for room in arena
                },
                available={
                    day.isoformat(): {str(rid): spans for rid, spans in cells.items()}
                    for day, cells in sorted(available.items())
                },
            )
            log.info("scrape_succeeded", days=self.stats.days, rooms=len(arena))
            return index
        except Exception:
            log.error("scrape_failed", exc_info=True)
            raise
        finally:
            self.stats.requests = self.fetcher.requests
            log.info("scrape_statistics", **self.stats.model_dump(mode="json"))

    async def scrape_buildings(self) -> list[Building]:
        base_url = self.config.directory_url
        soup = await self.fetcher.fetch(BuildingsPage.url(base_url))
        buildings = BuildingsPage.extract(soup, base_url)
        if not buildings:
            raise EmptyResultError("0 buildings have been scraped")

        self.stats.scraped_buildings = len(buildings)
        log.info(
            "buildings_scraped",
            count=len(buildings),
            names=[b.name for b in buildings],
        )
        return buildings

    async def scrape_directory(
        self, buildings: list[Building]
    ) -> dict[str, DirectoryRoom]:
        """Scrape the directory rooms of every building, keyed by canonical name.

        Extra metadata from the configuration is merged in afterwards; extra
        buildings not found on the site are appended to ``buildings``.
        """
        directory: dict[str, DirectoryRoom] = {}

        scraped = self._limit(buildings)
        for building_id, building in enumerate(scraped):
            soup = await self.fetcher.fetch(DirectoryRoomsPage.url(building))
            rooms = DirectoryRoomsPage.extract(soup, building_id=building_id)
            for room in rooms:
                directory[canonical_name(room.name)] = room

            self.stats.directory_rooms += len(rooms)
            log.info(
                "directory_rooms_scraped",
                building=building.name,
                count=len(rooms),
                progress=(building_id + 1) / len(scraped),
            )

        self.apply_extra_metadata(buildings, directory)

        if not directory:
            raise EmptyResultError("0 directory rooms have been scraped")
        return directory

    def apply_extra_metadata(
        self, buildings: list[Building], directory: dict[str, DirectoryRoom]
    ) -> None:
        """Patch known gaps of the directory with manually curated metadata."""
        building_ids = {canonical_name(b.name): i for i, b in enumerate(buildings)}

        for building_name, room_names in self.config.extra_buildings.items():
            building_id = building_ids.get(canonical_name(building_name))
            if building_id is None:
                buildings.append(Building(name=clean_name(building_name), url=""))
                building_id = len(buildings) - 1
                building_ids[canonical_name(building_name)] = building_id
                self.stats.extra_buildings += 1

            for room_name in room_names:
                key = canonical_name(room_name)
                existing = directory.get(key)
                if existing is None:
                    self.stats.extra_rooms += 1
                directory[key] = DirectoryRoom(
                    name=clean_name(room_name),
                    capacity=existing.capacity if existing else None,
                    building_id=building_id,
                )

        for room_name, capacity in self.config.extra_capacities.items():
            key = canonical_name(room_name)
            existing = directory.get(key)
            if existing is None:
                self.stats.extra_rooms += 1
                directory[key] = DirectoryRoom(
                    name=clean_name(room_name), capacity=capacity
                )
            else:
                directory[key] = existing.model_copy(update={"capacity": capacity})

        if self.stats.extra_buildings or self.stats.extra_rooms:
            log.info(
                "extra_metadata_applied",
                extra_buildings=self.stats.extra_buildings,
                extra_rooms=self.stats.extra_rooms,
            )

    async def scrape_rooms(self, directory: dict[str, DirectoryRoom]) -> RoomArena:
        """Scrape the bookable rooms and merge directory metadata into them."""
        soup = await self.fetcher.fetch(
            CatalogueRoomsPage.url(self.config.catalogue_url)
        )
        catalogue = CatalogueRoomsPage.extract(soup)
        if not catalogue:
            raise EmptyResultError("0 catalogue rooms have been scraped")

        arena = RoomArena()
        for catalogue_room in catalogue:
            metadata = directory.get(canonical_name(catalogue_room.name))
            if arena.add(catalogue_room, metadata) is None:
                log.debug("catalogue_room_duplicate", room=catalogue_room.name)

        self.stats.catalogue_rooms = len(arena)
        log.info(
            "catalogue_rooms_scraped",
            count=len(arena),
            names=[room.name for room in arena],
        )
        self.log_room_health(arena)
        return arena

    def log_room_health(self, arena: RoomArena) -> None:
        incomplete = [room for room in arena if not room.complete]
        self.stats.incomplete_rooms = len(incomplete)
        if not incomplete:
            log.info("room_metadata_merged", rooms=len(arena))
            return

        log.warning(
            "room_metadata_incomplete",
            count=len(incomplete),
            without_building=[r.name for r in incomplete if r.building is None],
            without_capacity=[r.name for r in incomplete if r.capacity is None],
        )

    async def scrape_courses(self, arena: RoomArena) -> CourseSet:
        """Scrape the courses held in every bookable room, deduplicated."""
        courses = CourseSet()

        rooms = self._limit(arena.catalogue)
        for i, room in enumerate(rooms):
            progress = (i + 1) / len(rooms)
            soup = await self.fetcher.fetch(
                CourseSearchPage.url(self.config.catalogue_url, room)
            )
            found = CourseSearchPage.extract(soup)
            if not found:
                self.stats.empty_course_pages += 1

            courses.update(found)
            log.info("courses_scraped", room=room.name, count=len(found), progress=progress)

        self.stats.scraped_courses = courses.unique
        self.stats.duplicate_courses = courses.duplicates
        log.info(
            "courses_deduplicated",
            count=courses.unique,
            duplicates=courses.duplicates,
        )
        return courses

    async def scrape_bookings(
        self, courses: CourseSet, arena: RoomArena
    ) -> Availability:
        """Scrape the bookings of every course into booked spans per day and room."""
        available = new_availability()
        unknown: set[str] = set()

        scraped = self._limit(list(courses), factor=2)
        for i, course in enumerate(scraped):
            progress = (i + 1) / len(scraped)
            soup = await self.fetcher.fetch(
                CourseDetailsPage.url(self.config.catalogue_url, course)
            )
            bookings = CourseDetailsPage.extract(soup)
            if not bookings:
                self.stats.empty_booking_pages += 1

            self.stats.scraped_bookings += len(bookings)
            for booking in bookings:
                room = arena.resolve(booking.room_name)
                if room is None:
                    self.stats.ignored_bookings += 1
                    if booking.room_name not in unknown and not matches_any(
                        booking.room_name, self.config.ignore_rooms
                    ):
                        unknown.add(booking.room_name)
                        log.warning("room_unknown", room=booking.room_name)
                    continue

                available[booking.day][room.id].append(booking.span)

            log.info(
                "bookings_scraped",
                course=course.details_id,
                count=len(bookings),
                progress=progress,
            )

        self.stats.unknown_rooms = sorted(unknown)
        return available

    def booked_range(self, available: Availability) -> tuple[date, date]:
        """First and last day with any booking.

        Raises:
            EmptyResultError: If not a single day has been scraped.
        """
        days = sorted(available)
        if not days:
            raise EmptyResultError("0 days have been scraped")

        first, last = days[0], days[-1]
        total = (last - first).days + 1

        self.stats.days = len(days)
        self.stats.free_days = total - len(days)
        self.stats.range = IndexRange(
            start=datetime.combine(first, time.min).isoformat(timespec="seconds"),
            end=datetime.combine(last, time(23, 59, 59)).isoformat(timespec="seconds"),
        )
        log.info(
            "range_determined",
            start=self.stats.range.start,
            end=self.stats.range.end,
            days=len(days),
        )
        return first, last
