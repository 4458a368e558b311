"""Shared fixtures: an in-memory stand-in for the scraped sites.

FakeRequestContext implements the part of Playwright's APIRequestContext
that Fetcher uses, serving canned HTML per URL.
"""

from collections.abc import Callable

import pytest

from roomsearch.config import ScraperConfig
from roomsearch.fetcher import Fetcher

DIRECTORY_URL = "https://directory.test"
CATALOGUE_URL = "https://catalogue.test"


class FakeResponse:
    def __init__(
        self, status: int = 200, body: str = "", read_error: Exception | None = None
    ) -> None:
        self.status = status
        self.body = body
        self.read_error = read_error
        self.disposed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        if self.read_error is not None:
            raise self.read_error
        return self.body

    async def dispose(self) -> None:
        self.disposed = True


class FakeRequestContext:
    """Serves ``pages[url]``; unknown URLs answer 404.

    A page may be a string (200), a FakeResponse, an exception instance to
    raise, or a list of those consumed one per request.
    """

    def __init__(self, pages: dict | None = None) -> None:
        self.pages: dict = dict(pages or {})
        self.calls: list[str] = []
        self.timeouts: list[float] = []

    async def get(self, url: str, timeout: float | None = None, **kwargs) -> FakeResponse:
        self.calls.append(url)
        self.timeouts.append(timeout)

        page = self.pages.get(url)
        if isinstance(page, list):
            page = page.pop(0) if len(page) > 1 else page[0]

        if page is None:
            return FakeResponse(404, "not found")
        if isinstance(page, BaseException):
            raise page
        if isinstance(page, FakeResponse):
            return page
        return FakeResponse(200, page)


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig(
        _env_file=None,
        catalogue_url=CATALOGUE_URL,
        directory_url=DIRECTORY_URL,
        request_delay_ms=0,
        max_retries=0,
        ignore_rooms=["online"],
    )


@pytest.fixture
def make_fetcher() -> Callable[..., Fetcher]:
    def factory(pages: dict | None = None, **kwargs) -> Fetcher:
        kwargs.setdefault("delay_ms", 0)
        kwargs.setdefault("max_retries", 0)
        return Fetcher(FakeRequestContext(pages), **kwargs)

    return factory


# HTML builders for the scraped page types


def buildings_html(*entries: tuple[str, str]) -> str:
    items = "".join(
        f'<li class="stripe_element"><div><h3>{header}</h3>'
        f'<a class="stripe_btn" href="{href}">Details</a></div></li>'
        for header, href in entries
    )
    return f"<html><body><ul>{items}</ul></body></html>"


def directory_html(*rows: tuple[str, str, str]) -> str:
    body = "".join(
        f"<tr><td>{desc}</td><td>{number}</td><td>{capacity}</td></tr>"
        for desc, number, capacity in rows
    )
    return (
        '<div class="content_container"><div class="text"><div class="body">'
        '<table class="contenttable"><tr><th>Description</th><th>Room</th><th>Seats</th></tr>'
        f"{body}</table></div></div></div>"
    )


def catalogue_html(*rooms: tuple[str, str]) -> str:
    options = "".join(f'<option value="{value}">{name}</option>' for value, name in rooms)
    return (
        '<form><select id="room"><option value="all">all rooms</option>'
        f"{options}</select></form>"
    )


def course_link(class_id: str, group_id: str, details_id: str) -> str:
    return (
        f"lvaregistrationlist.action?courseclassid={class_id}"
        f"&amp;coursegroupid={group_id}&amp;showdetails={details_id}"
    )


def courses_html(*links: str) -> str:
    rows = "".join(f'<tr><td><a href="{href}">course</a></td><td>VL</td></tr>' for href in links)
    return (
        '<div class="contentcell"><table><tr><td>search filters</td></tr></table>'
        f"<table><tbody><tr><th>Course</th><th>Type</th></tr>{rows}</tbody></table></div>"
    )


def details_html(*rows: tuple[str, str, str]) -> str:
    body = "".join(
        f"<tr><td>Mo</td><td>{day}</td><td>{span}</td><td>{room}</td></tr>"
        '<tr><td colspan="4">weekly lecture</td></tr>'
        for day, span, room in rows
    )
    return (
        '<table class="subinfo"><tbody><tr><td>'
        "<table><tbody><tr><th>Day</th><th>Date</th><th>Time</th><th>Room</th></tr>"
        f"{body}</tbody></table></td></tr></tbody></table>"
    )
