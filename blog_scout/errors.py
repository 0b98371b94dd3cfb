"""Exception hierarchy shared by the crawl pipeline.

Every per-target failure is raised as one of these and converted into a
failed :class:`~blog_scout.crawler.models.ExtractedContent` by the
orchestrator, so the crawl loop itself never aborts on a single post.
"""
from __future__ import annotations

from enum import Enum
from typing import Sequence

__all__ = (
    "FailureKind",
    "CrawlError",
    "InvalidTargetError",
    "FetchError",
    "ExtractionError",
)


class FailureKind(str, Enum):
    """Why an attempt did not produce an accepted post."""

    INVALID_TARGET = "invalid_target"
    NETWORK = "network"
    EXTRACTION = "extraction"
    QUALITY = "quality"

    @property
    def is_retryable(self) -> bool:
        return self is FailureKind.NETWORK


class CrawlError(Exception):
    """Base error for a single crawl target."""

    kind: FailureKind = FailureKind.EXTRACTION


class InvalidTargetError(CrawlError):
    """Empty, malformed or unsupported-platform URL. Raised before any network call."""

    kind = FailureKind.INVALID_TARGET


class FetchError(CrawlError):
    """Every candidate URL failed with a transport error or a non-2xx status."""

    kind = FailureKind.NETWORK

    def __init__(self, message: str, attempted: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.attempted = list(attempted)


class ExtractionError(CrawlError):
    """Unexpected fault while parsing a fetched page."""

    kind = FailureKind.EXTRACTION
