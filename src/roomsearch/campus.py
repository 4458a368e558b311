"""Teaching time grid of the university.

Courses are scheduled in 45 minute units between 08:30 and 22:45. Every
second unit is followed by a 15 minute break, so the first break is at
10:00 and they repeat every 105 minutes until 20:30.
"""

from collections.abc import Iterator
from datetime import time

from roomsearch.models import TimeSpan, to_minutes

COURSE_DURATION = 45
PAUSE_DURATION = 15

FIRST_COURSE_START = time(8, 30)
LAST_COURSE_END = time(22, 45)

FIRST_PAUSE_START = time(10, 0)
LAST_PAUSE_START = time(20, 30)


def booking_window() -> TimeSpan:
    """The interval in which rooms can be booked at all, in minutes."""
    return (
        to_minutes(FIRST_COURSE_START),
        to_minutes(LAST_COURSE_END),
    )


def _iterate_pauses(start: int, stop: int) -> Iterator[int]:
    step = 2 * COURSE_DURATION + PAUSE_DURATION
    curr = start
    while curr <= stop:
        yield curr
        curr += step


def break_times() -> list[TimeSpan]:
    """The short breaks between course units, in minutes."""
    return [
        (start, start + PAUSE_DURATION)
        for start in _iterate_pauses(
            to_minutes(FIRST_PAUSE_START), to_minutes(LAST_PAUSE_START)
        )
    ]
