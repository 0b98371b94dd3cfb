# File: tests/conftest.py
from typing import Dict, List, Sequence

import pytest

from blog_scout.config import CrawlerConfig
from blog_scout.crawler.models import FetchedPage
from blog_scout.errors import FetchError

#: ten distinct syllables, so no character ever repeats back to back
SYLLABLES = "가나다라마바사아자차"
SENTENCE = "오늘은 동네 산책로를 따라 천천히 걸으며 계절이 바뀌는 모습을 구경했습니다. "


def korean_text(chars: int) -> str:
    """Hangul text of exactly *chars* non-whitespace characters, no spaces."""
    return (SYLLABLES * (chars // len(SYLLABLES) + 1))[:chars]


def readable_text(min_chars: int = 400) -> str:
    """Natural-looking Korean prose of at least *min_chars* non-space characters."""
    text = ""
    while len(text.replace(" ", "")) < min_chars:
        text += SENTENCE
    return text.strip()


def naver_html(body: str, *, tags: Sequence[str] = ()) -> str:
    spans = "".join(f'<span class="__se-hash-tag">#{t}</span>' for t in tags)
    return f"""
<html><head><title>네이버 블로그</title>
<script>var wrapper = "#wrapper";</script>
<style>#container {{ color: #fff; }}</style>
</head><body>
<div class="se-main-container">
  <div class="se-module se-module-text se-title-text"><p>제목입니다</p></div>
  <div class="se-component se-text">
    <div class="se-module se-module-text"><p>{body}</p></div>
  </div>
  <div class="se-module se-module-image"><img src="https://postfiles.pstatic.net/a.jpg"></div>
  <div class="se-module se-module-text se-caption"><p>사진 설명</p></div>
</div>
<div class="post_tag">{spans}</div>
</body></html>
"""


def tistory_html(body: str) -> str:
    return f"""
<html><head><meta charset="utf-8"><title>티스토리</title></head>
<body><div id="header">메뉴</div>
<article><div class="tt_article_useless_p_margin"><p>{body}</p></div></article>
</body></html>
"""


class FakeFetcher:
    """Serves canned pages by candidate URL and records every call."""

    def __init__(self, pages: Dict[str, bytes]) -> None:
        self.pages = pages
        self.calls: List[List[str]] = []

    async def fetch_first(self, candidates: Sequence[str]) -> FetchedPage:
        self.calls.append(list(candidates))
        for url in candidates:
            if url in self.pages:
                return FetchedPage(url=url, final_url=url, status=200, content=self.pages[url])
        raise FetchError("all URL attempts failed", candidates)

    @property
    def attempted_first(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def fast_config() -> CrawlerConfig:
    """Config without inter-target delay."""
    return CrawlerConfig(request_delay=0, timeout=2.0)
