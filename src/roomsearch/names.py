"""Room name normalization shared by the extractors and the index assembler."""

import re

_WHITESPACE = re.compile(r"\s+")


def clean_name(name: str) -> str:
    """Collapse whitespace runs to a single space and trim."""
    return _WHITESPACE.sub(" ", name).strip()


def canonical_name(name: str) -> str:
    """Join key for room names: all whitespace removed, lower case.

    "HS  1" and "hs1" collide; nothing else is matched fuzzily.
    """
    return _WHITESPACE.sub("", name).lower()


def matches_any(name: str, substrings: list[str]) -> bool:
    """True if ``name`` contains one of ``substrings`` (case-insensitive)."""
    lowered = name.lower()
    return any(s.lower() in lowered for s in substrings if s)
