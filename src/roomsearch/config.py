"""Scraper configuration loaded from environment variables.

List and dict fields (ignore_rooms, extra_buildings, extra_capacities) are
read from JSON-encoded values, e.g.
    EXTRA_CAPACITIES='{"HS 19": 120}'
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ScraperConfig(BaseSettings):
    """Scraper configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Scraped sites (neither offers an API)
    catalogue_url: str = Field(
        default="https://www.kusss.jku.at",
        description="Course catalogue base URL (bookable rooms, courses, bookings)",
    )
    directory_url: str = Field(
        default="https://www.jku.at",
        description="Campus directory base URL (buildings, room capacities)",
    )

    # Request settings
    user_agent: str = Field(
        default="jku-room-search-bot/0.1 (+https://github.com/blu3r4y/jku-room-search)",
        description="User-Agent header sent with every request",
    )
    request_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Timeout of a single request attempt in milliseconds",
    )
    max_retries: int = Field(
        default=5,
        ge=0,
        description="Retries of a failed request before giving up",
    )
    request_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Minimum delay between two requests in milliseconds",
    )

    # Output
    output_path: str = Field(
        default="index.json",
        description="Path of the index file written by a successful run",
    )

    # Manually curated metadata patching gaps in the source data
    ignore_rooms: list[str] = Field(
        default_factory=list,
        description="Room name substrings that are known junk in booking data",
    )
    extra_buildings: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Building name -> room names missing from the directory",
    )
    extra_capacities: dict[str, int] = Field(
        default_factory=dict,
        description="Room name -> capacity missing from the directory",
    )

    # Quick mode
    quick_limit: int = Field(
        default=6,
        gt=0,
        description="Items per stage scraped when running with --quick",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ScraperConfig | None = None


def get_config() -> ScraperConfig:
    """Get the scraper configuration singleton.

    Returns:
        ScraperConfig: Scraper configuration instance
    """
    global _config
    if _config is None:
        _config = ScraperConfig()
    return _config
