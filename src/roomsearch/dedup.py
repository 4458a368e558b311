"""Deduplication of course references scraped from several rooms."""

from collections.abc import Iterable, Iterator

from roomsearch.models import Course


class CourseSet:
    """Insertion-ordered set of courses keyed by their (class, group, details) triple.

    The same course shows up once per room it is held in, so most
    insertions after the first few rooms are duplicates.
    """

    def __init__(self) -> None:
        self._courses: dict[Course, None] = {}
        self.total = 0

    def add(self, course: Course) -> bool:
        """Add a course. Returns False if an equal course was already stored."""
        self.total += 1
        if course in self._courses:
            return False
        self._courses[course] = None
        return True

    def update(self, courses: Iterable[Course]) -> None:
        for course in courses:
            self.add(course)

    @property
    def unique(self) -> int:
        return len(self._courses)

    @property
    def duplicates(self) -> int:
        return self.total - len(self._courses)

    def __len__(self) -> int:
        return len(self._courses)

    def __iter__(self) -> Iterator[Course]:
        return iter(list(self._courses))

    def __contains__(self, course: object) -> bool:
        return course in self._courses
