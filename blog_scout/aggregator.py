# File: blog_scout/aggregator.py
"""blog_scout.aggregator: summary of a crawl run for reports and the CLI."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from blog_scout.crawler.models import ExtractedContent


@dataclass(slots=True)
class CrawlReport:
    """Attempts of one crawl run plus success/failure counts."""

    target_success_count: int
    attempts: int = 0
    accepted: int = 0
    failures: Dict[str, int] = field(default_factory=dict)
    total_tags: List[str] = field(default_factory=list)
    results: List[ExtractedContent] = field(default_factory=list)

    @property
    def target_reached(self) -> bool:
        return self.accepted >= self.target_success_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_success_count": self.target_success_count,
            "target_reached": self.target_reached,
            "attempts": self.attempts,
            "accepted": self.accepted,
            "failures": dict(self.failures),
            "tags": list(self.total_tags),
            "results": [r.to_dict() for r in self.results],
        }

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(results: Sequence[ExtractedContent], target_success_count: int) -> CrawlReport:
    """Builds a CrawlReport; failures are counted per failure kind."""
    failures: Counter[str] = Counter(
        r.failure_kind.value if r.failure_kind else "unknown" for r in results if not r.success
    )
    tags: List[str] = []
    for r in results:
        if r.success:
            tags.extend(t for t in r.tags if t not in tags)
    return CrawlReport(
        target_success_count=target_success_count,
        attempts=len(results),
        accepted=sum(1 for r in results if r.success),
        failures=dict(failures),
        total_tags=tags,
        results=list(results),
    )
