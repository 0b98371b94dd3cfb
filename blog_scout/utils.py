# File: blog_scout/utils.py
"""blog_scout.utils: small text and URL helpers shared by the parser and the crawler."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence
from urllib.parse import urlparse

from blog_scout.logger import logger

__all__: Sequence[str] = (
    "collapse_whitespace",
    "count_non_whitespace",
    "extract_host",
    "remove_duplicates",
)

_WS_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapses whitespace runs (tabs, newlines, nbsp) into single spaces and trims."""
    return _WS_RE.sub(" ", text).strip()


def count_non_whitespace(text: str) -> int:
    """Length of *text* with every whitespace character removed."""
    return len(_WS_RE.sub("", text))


def extract_host(url: str) -> str:
    """Lower-cased host of *url*, ``""`` when the URL has none."""
    return (urlparse(url).hostname or "").lower()


def remove_duplicates(items: Iterable[str]) -> List[str]:
    """Removes duplicates while keeping first-seen order."""
    seen = list(items)
    unique = list(dict.fromkeys(seen))
    removed = len(seen) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate entries", removed)
    return unique
