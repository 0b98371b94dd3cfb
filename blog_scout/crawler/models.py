"""
Data models for the BlogScout crawler.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from blog_scout.errors import FailureKind
from blog_scout.utils import count_non_whitespace

__all__ = (
    "CrawlTarget",
    "FetchedPage",
    "ExtractedContent",
    "CrawlStatus",
    "CrawlProgress",
)


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """A ranked candidate post supplied by the caller."""

    url: str
    title: str


@dataclass(frozen=True, slots=True)
class FetchedPage:
    """Undecoded response body of the first candidate URL that answered 2xx."""

    url: str
    final_url: str
    status: int
    content: bytes


@dataclass(frozen=True, slots=True)
class ExtractedContent:
    """One crawl attempt. Created once and never mutated afterwards.

    ``success=True`` implies a non-empty ``text_content`` whose non-whitespace
    character count equals ``content_length``; ``success=False`` implies an
    empty ``text_content`` and an ``error``. Use :meth:`succeeded`,
    :meth:`failed` and :meth:`rejected` instead of the raw constructor.
    """

    url: str
    title: str
    text_content: str = ""
    content_length: int = 0
    image_count: int = 0
    gif_count: int = 0
    video_count: int = 0
    tags: Tuple[str, ...] = ()
    success: bool = False
    error: Optional[str] = None
    failure_kind: Optional[FailureKind] = None

    @classmethod
    def succeeded(
        cls,
        url: str,
        title: str,
        text_content: str,
        *,
        image_count: int = 0,
        gif_count: int = 0,
        video_count: int = 0,
        tags: Optional[Iterable[str]] = None,
    ) -> ExtractedContent:
        return cls(
            url=url,
            title=title,
            text_content=text_content,
            content_length=count_non_whitespace(text_content),
            image_count=image_count,
            gif_count=gif_count,
            video_count=video_count,
            tags=tuple(tags or ()),
            success=True,
        )

    @classmethod
    def failed(cls, url: str, title: str, error: str, kind: FailureKind) -> ExtractedContent:
        return cls(url=url, title=title, success=False, error=error, failure_kind=kind)

    def rejected(self, reason: str) -> ExtractedContent:
        """Failed copy of an extracted record, keeping its media metadata."""
        return replace(
            self,
            text_content="",
            success=False,
            error=reason,
            failure_kind=FailureKind.QUALITY,
        )

    @property
    def is_retryable(self) -> bool:
        return self.failure_kind is not None and self.failure_kind.is_retryable

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["failure_kind"] = self.failure_kind.value if self.failure_kind else None
        data["tags"] = list(self.tags)
        return data


class CrawlStatus(str, Enum):
    CRAWLING = "crawling"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CrawlProgress:
    """Progress event passed to the caller's callback; never stored."""

    current: int
    total: int
    url: str
    status: CrawlStatus
