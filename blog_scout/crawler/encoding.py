"""
Decoding of fetched pages.

Naver serves UTF-8 today but older posts may still come back as EUC-KR, so a
plain "first decode that does not raise" would happily accept mojibake. A
candidate encoding is only accepted when the decoded text also looks Korean.
"""
from __future__ import annotations

import re
from typing import Sequence, Tuple

from blog_scout.logger import logger

__all__ = ("CANDIDATE_ENCODINGS", "decode_html", "looks_korean")

CANDIDATE_ENCODINGS: Tuple[str, ...] = ("utf-8", "euc-kr", "cp949")

_HANGUL_RE = re.compile(r"[가-힣]")
_MARKERS = ("네이버", "블로그")
_SNIFF_CHARS = 1000


def looks_korean(text: str) -> bool:
    """Naver/blog marker anywhere, or a Hangul syllable in the first 1000 characters."""
    if any(marker in text for marker in _MARKERS):
        return True
    return _HANGUL_RE.search(text[:_SNIFF_CHARS]) is not None


def decode_html(
    content: bytes,
    url: str = "",
    encodings: Sequence[str] = CANDIDATE_ENCODINGS,
) -> Tuple[str, str]:
    """Returns ``(text, encoding)``.

    Falls back to a lenient UTF-8 decode (``"utf-8-replace"``) so a page is
    never dropped just because its encoding could not be detected.
    """
    for encoding in encodings:
        try:
            text = content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
        if looks_korean(text):
            logger.debug("Detected encoding %s for %s", encoding, url)
            return text, encoding

    logger.warning("Encoding detection failed, forcing lenient UTF-8: %s", url)
    return content.decode("utf-8", errors="replace"), "utf-8-replace"
