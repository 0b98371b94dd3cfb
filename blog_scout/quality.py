# File: blog_scout/quality.py
"""blog_scout.quality: accept/reject gate for extracted posts.

Rules are checked in order and the first failing one rejects the post; there
is no scoring. Every rejection carries a human-readable reason.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from blog_scout.config import QualityRules
from blog_scout.crawler.models import ExtractedContent
from blog_scout.logger import logger

__all__: Sequence[str] = ("Verdict", "QualityClassifier")

# Unicode punctuation (P*), currency (Sc) and math (Sm) categories, plus the won unit.
_SYMBOL_CATEGORIES = ("P", "Sc", "Sm")
_UNIT_CHARS = frozenset("원")
# Anything outside Hangul syllables, Jamo, Latin letters, digits and whitespace.
_LINGUISTIC_RE = re.compile(r"[가-힣ㄱ-ㅎㅏ-ㅣa-zA-Z0-9\s]")


def _is_numeric_or_symbol(ch: str) -> bool:
    if ch.isdigit() or ch.isspace() or ch in _UNIT_CHARS:
        return True
    return unicodedata.category(ch).startswith(_SYMBOL_CATEGORIES)


@dataclass(frozen=True, slots=True)
class Verdict:
    accepted: bool
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> Verdict:
        return cls(True)

    @classmethod
    def reject(cls, reason: str) -> Verdict:
        return cls(False, reason)


class QualityClassifier:
    """Pure boolean gate over already-extracted content."""

    def __init__(self, rules: Optional[QualityRules] = None) -> None:
        self.rules = rules or QualityRules()
        self._ad_keywords = [k.lower() for k in self.rules.ad_keywords]
        self._ad_patterns = [re.compile(p, re.IGNORECASE) for p in self.rules.ad_patterns]
        self._repeat_re = re.compile(r"(.)\1{%d,}" % (self.rules.max_repeat_run - 1))
        self._checks: List[Callable[[ExtractedContent], Optional[str]]] = [
            self._check_length,
            self._check_advertisement,
            self._check_numeric,
            self._check_special_chars,
            self._check_repetition,
        ]

    def classify(self, content: ExtractedContent) -> Verdict:
        if not content.text_content:
            return Verdict.reject("no text content extracted")
        for check in self._checks:
            reason = check(content)
            if reason is not None:
                logger.info("Rejected %s: %s", content.url, reason)
                return Verdict.reject(reason)
        return Verdict.accept()

    def apply(self, content: ExtractedContent) -> ExtractedContent:
        """Returns *content* unchanged when accepted, a quality failure otherwise."""
        if not content.success:
            return content
        verdict = self.classify(content)
        return content if verdict.accepted else content.rejected(verdict.reason or "rejected")

    # -- rules ---------------------------------------------------------------

    def _check_length(self, content: ExtractedContent) -> Optional[str]:
        length = content.content_length
        if length < self.rules.min_length:
            return f"content too short: {length} chars (minimum {self.rules.min_length})"
        if length > self.rules.max_length:
            return f"content length exceeds maximum: {length} chars (maximum {self.rules.max_length})"
        return None

    def _check_advertisement(self, content: ExtractedContent) -> Optional[str]:
        full_text = f"{content.text_content} {content.title}".lower()
        for keyword in self._ad_keywords:
            if keyword in full_text:
                return f"sponsored or advertising content: keyword '{keyword}'"
        for pattern in self._ad_patterns:
            if pattern.search(full_text):
                return f"sponsored or advertising content: pattern '{pattern.pattern}'"
        return None

    def _check_numeric(self, content: ExtractedContent) -> Optional[str]:
        text = content.text_content.strip()
        meaningful = sum(1 for ch in text if not _is_numeric_or_symbol(ch))
        ratio = meaningful / len(text)
        if ratio < self.rules.min_meaningful_ratio:
            return f"low information: numeric/symbol dominance ({ratio:.1%} meaningful characters)"
        return None

    def _check_special_chars(self, content: ExtractedContent) -> Optional[str]:
        text = content.text_content.strip()
        ratio = len(_LINGUISTIC_RE.sub("", text)) / len(text)
        if ratio > self.rules.max_special_ratio:
            return f"low information: too many special characters ({ratio:.1%})"
        return None

    def _check_repetition(self, content: ExtractedContent) -> Optional[str]:
        match = self._repeat_re.search(content.text_content)
        if match:
            return f"low information: character '{match.group(1)}' repeated {len(match.group(0))} times"
        return None
