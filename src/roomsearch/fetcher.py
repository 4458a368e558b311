"""Rate-limited, retried HTTP GETs returning parsed HTML documents.

Fetcher is the only component talking to the network. All requests go
through a single lock with a minimum delay between them, so the scraped
sites never see more than one request at a time from us.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from roomsearch.config import ScraperConfig
from roomsearch.errors import RateLimitError, TransientError
from roomsearch.logging import get_logger

if TYPE_CHECKING:
    from playwright.async_api import APIRequestContext, APIResponse

log = get_logger(__name__)

MAX_BACKOFF_SECONDS = 30.0


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    log.warning(
        "request_retry",
        attempt=retry_state.attempt_number,
        error=str(exc),
        type=type(exc).__name__,
    )


class Fetcher:
    """Single-flight HTTP client for the scraped sites.

    Wraps a Playwright APIRequestContext (plain HTTP, no browser). Failed
    attempts raise TransientError and are retried up to ``max_retries``
    times; the last TransientError is re-raised when retries run out.
    """

    def __init__(
        self,
        request: "APIRequestContext",
        *,
        timeout_ms: int = 5000,
        max_retries: int = 5,
        delay_ms: int = 500,
    ) -> None:
        """Initialize Fetcher.

        Args:
            request: Playwright APIRequestContext (or anything with the same get()).
            timeout_ms: Timeout of a single attempt.
            max_retries: Retries after the first failed attempt.
            delay_ms: Minimum delay between the starts of two requests.
        """
        self.request = request
        self.timeout_ms = timeout_ms
        self.max_retries = max_retries
        self.delay = delay_ms / 1000

        # every attempt counts, successful or not
        self.requests = 0

        self._lock = asyncio.Lock()
        self._last_start: float | None = None

    @classmethod
    @asynccontextmanager
    async def open(cls, config: ScraperConfig) -> AsyncIterator["Fetcher"]:
        """Create a fetcher backed by a fresh Playwright request context."""
        async with async_playwright() as p:
            request = await p.request.new_context(
                extra_http_headers={"User-Agent": config.user_agent},
            )
            log.info(
                "fetcher_opened",
                timeout_ms=config.request_timeout_ms,
                max_retries=config.max_retries,
                delay_ms=config.request_delay_ms,
            )
            try:
                yield cls(
                    request,
                    timeout_ms=config.request_timeout_ms,
                    max_retries=config.max_retries,
                    delay_ms=config.request_delay_ms,
                )
            finally:
                await request.dispose()

    async def fetch(self, url: str) -> BeautifulSoup:
        """GET ``url`` and parse the body as HTML.

        Raises:
            TransientError: If every attempt failed.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.delay, max=MAX_BACKOFF_SECONDS),
            retry=retry_if_exception_type(TransientError),
            before_sleep=_log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                body = await self._get(url)

        return BeautifulSoup(body, "html.parser")

    async def _throttle(self) -> None:
        loop = asyncio.get_running_loop()
        if self._last_start is not None:
            remaining = self._last_start + self.delay - loop.time()
            if remaining > 0:
                await asyncio.sleep(remaining)
        self._last_start = loop.time()

    async def _get(self, url: str) -> str:
        async with self._lock:
            await self._throttle()
            self.requests += 1

            try:
                response = await self.request.get(
                    url, timeout=self.timeout_ms, fail_on_status_code=False
                )
                try:
                    return await self._read(url, response)
                finally:
                    await response.dispose()
            except PlaywrightTimeoutError as e:
                log.warning("request_timeout", url=url, timeout_ms=self.timeout_ms)
                raise TransientError(f"GET {url} timed out: {e}") from e
            except PlaywrightError as e:
                log.warning("request_failed", url=url, error=str(e))
                raise TransientError(f"GET {url} failed: {e}") from e

    @staticmethod
    async def _read(url: str, response: "APIResponse") -> str:
        if response.status == 429:
            log.warning("request", method="GET", url=url, status=response.status)
            raise RateLimitError(f"GET {url} was rate limited")
        if not response.ok:
            log.warning("request", method="GET", url=url, status=response.status)
            raise TransientError(
                f"GET {url} returned unexpected status code {response.status}"
            )

        log.debug("request", method="GET", url=url, status=response.status)
        # the body is streamed lazily and can still fail here
        return await response.text()
