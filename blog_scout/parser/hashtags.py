# === FILE: blog_scout/parser/hashtags.py ===
"""Hashtag mining for blog posts.

Tags are collected from several places, most precise first:

* Smart Editor tag spans (``span.__se-hash-tag``);
* inline ``#token`` occurrences in the normalized body text;
* the text of the whole page, but only when the first two sources found
  fewer than three tags;
* comma or space separated runs such as ``#맛집 #서울여행,#혼밥``.

Author tag blocks usually trail the post, so when the last 200 characters of
a text hold three or more hashtags those tags are ranked ahead of incidental
mentions. The final list is filtered, deduplicated, ordered by length
(longest first, stable) and capped. ``#`` is stripped from every tag.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Optional

from bs4 import BeautifulSoup

from blog_scout.logger import logger
from blog_scout.utils import collapse_whitespace, remove_duplicates

__all__: Sequence[str] = (
    "MAX_TAGS",
    "EXCLUDE_PATTERNS",
    "extract_hashtags",
    "mine_text_hashtags",
    "is_excluded",
)

MAX_TAGS = 15
MIN_TAG_LENGTH = 2
MAX_SPAN_TAG_LENGTH = 20
TAIL_CHARS = 200
TAIL_PROMOTION_MIN = 3
FALLBACK_BELOW = 3

_TOKEN = r"[가-힣a-zA-Z0-9_]+"
_TAG_RE = re.compile(rf"#({_TOKEN})")
_TAG_RUN_RE = re.compile(rf"#{_TOKEN}(?:[,\s]*#{_TOKEN})+")

GENERIC_WORDS: tuple[str, ...] = ("좋아요", "감사", "부탁", "댓글", "공감", "추천")

# Patterns are matched against the tag without its leading "#".
EXCLUDE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d+$"),
    # Latin-only tokens are mostly CSS ids leaking out of the markup
    re.compile(r"^[a-zA-Z_\-]+$"),
    re.compile(r"^.$"),
    re.compile(rf"^({'|'.join(GENERIC_WORDS)})$"),
    re.compile(r"^(wrapper|container|content|main|header|footer|sidebar)", re.IGNORECASE),
    re.compile(r"^(post|blog|article|div|section|span|p)", re.IGNORECASE),
    re.compile(r"[_\-]"),
    re.compile(r"^(floating|banword|btn|bw_)", re.IGNORECASE),
    re.compile(r"^[0-9a-fA-F]{6}$"),
    re.compile(r"^[0-9a-fA-F]{3}$"),
)


def is_excluded(tag: str, patterns: Iterable[re.Pattern[str]] = EXCLUDE_PATTERNS) -> bool:
    """True when *tag* (without ``#``) looks like noise rather than a topic."""
    return any(p.search(tag) for p in patterns)


def _by_length(tags: list[str], limit: int) -> list[str]:
    return sorted(tags, key=len, reverse=True)[:limit]


def mine_text_hashtags(text: str, *, limit: int = MAX_TAGS) -> list[str]:
    """Hashtags found in plain *text*, without ``#``."""
    if not text:
        return []

    found = [m for m in _TAG_RE.findall(text) if len(m) >= MIN_TAG_LENGTH]

    tail = _TAG_RE.findall(text[-TAIL_CHARS:])
    if len(tail) >= TAIL_PROMOTION_MIN:
        tail_set = set(tail)
        found = [t for t in found if t in tail_set] + [t for t in found if t not in tail_set]

    for run in _TAG_RUN_RE.finditer(text):
        found.extend(m for m in _TAG_RE.findall(run.group(0)) if len(m) >= MIN_TAG_LENGTH)

    tags = [t for t in remove_duplicates(found) if not is_excluded(t)]
    return _by_length(tags, limit)


def _span_hashtags(soup: BeautifulSoup) -> list[str]:
    tags: list[str] = []
    for span in soup.select("span.__se-hash-tag"):
        text = collapse_whitespace(span.get_text())
        if not text.startswith("#"):
            continue
        tag = text[1:].strip()
        if 0 < len(tag) <= MAX_SPAN_TAG_LENGTH:
            tags.append(tag)
    return tags


def extract_hashtags(
    soup: BeautifulSoup,
    body_text: str,
    page_text: Optional[str] = None,
    *,
    limit: int = MAX_TAGS,
) -> list[str]:
    """Hashtags of a post.

    Parameters
    ----------
    soup
        Parsed page, used for Smart Editor tag spans.
    body_text
        Normalized body text of the post.
    page_text
        Text of the whole page, mined only when the other sources are thin.
        Derived from *soup* when omitted.
    """
    tags = _span_hashtags(soup)
    tags.extend(mine_text_hashtags(body_text, limit=limit))

    if len(remove_duplicates(tags)) < FALLBACK_BELOW:
        if page_text is None:
            page_text = collapse_whitespace(soup.get_text(" "))
        tags.extend(mine_text_hashtags(page_text, limit=limit))

    result = _by_length([t for t in remove_duplicates(tags) if not is_excluded(t)], limit)
    logger.debug("Hashtags: %s", result)
    return result
