"""Error hierarchy for scraping retry classification.

The fetcher retries TransientError with tenacity; everything derived from
PermanentError aborts the run immediately.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(6))
    async def fetch(url: str):
        ...
"""


class ScrapingError(Exception):
    """Base exception for all scraping errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, refused connections, 503 Service Unavailable.
    """

    pass


class RateLimitError(TransientError):
    """The site answered 429 Too Many Requests.

    Inherits from TransientError so the fetcher retries it.
    """

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry."""

    pass


class ExtractionError(PermanentError):
    """Expected markup is missing from a scraped page.

    Usually means the upstream site layout changed.
    """

    pass


class EmptyResultError(PermanentError):
    """A stage produced nothing where an empty result is never valid.

    Examples: zero buildings, zero catalogue rooms, zero scraped days.
    """

    pass
