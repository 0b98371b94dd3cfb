# === FILE: blog_scout/parser/html_parser.py ===
"""Post body and media extraction for BlogScout.

Blog skins differ wildly, even between two versions of the same CMS, so the
body text is looked up through an ordered chain of strategies:

1. the platform's own markup (Smart Editor text modules on Naver,
   ``<article>``/``.area_view`` on Tistory);
2. when that yields fewer than :data:`MIN_PRIMARY_CHARS` characters, a fixed
   list of container selectors (platform-specific, then generic), keeping the
   longest text;
3. when still short, every ``<p>`` of the page joined together.

Media counters follow the same idea: a Smart Editor specific count first,
then a generic one when the first finds nothing.

Extraction never judges the result. An empty body is still a successful
extraction; rejecting it is the job of :mod:`blog_scout.quality`.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup

from blog_scout.crawler.models import ExtractedContent
from blog_scout.crawler.platforms import BlogPlatform, node_text
from blog_scout.errors import ExtractionError
from blog_scout.logger import logger
from blog_scout.parser.hashtags import extract_hashtags
from blog_scout.utils import collapse_whitespace, remove_duplicates

__all__: Sequence[str] = (
    "MIN_PRIMARY_CHARS",
    "GIF_MARKERS",
    "VIDEO_HOSTS",
    "MediaCounts",
    "parse_document",
    "normalize_text",
    "extract_text",
    "count_media",
    "is_gif_url",
    "extract_content",
)

MIN_PRIMARY_CHARS = 100
MIN_PARAGRAPH_CHARS = 5

GIF_MARKERS: tuple[str, ...] = (".gif?", ".gifv", "format=gif", "type=gif", "_gif.")
VIDEO_HOSTS: tuple[str, ...] = ("youtube.com", "youtu.be", "vimeo", "tv.naver")

TextStrategy = Callable[[BeautifulSoup], str]
CountStrategy = Callable[[BeautifulSoup], int]


@dataclass(slots=True)
class MediaCounts:
    images: int = 0
    gifs: int = 0
    videos: int = 0


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def parse_document(html: str) -> BeautifulSoup:
    """Parses *html* and drops ``<script>``/``<style>`` blocks."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup


def normalize_text(fragment: str) -> str:
    """Strips tags, decodes named/decimal/hex entities and collapses whitespace.

    >>> normalize_text("A &amp; B")
    'A & B'
    >>> normalize_text("&#44032;")
    '가'
    """
    if not fragment:
        return ""
    return collapse_whitespace(BeautifulSoup(fragment, "html.parser").get_text(" "))


def _selector_strategy(selector: str) -> TextStrategy:
    def strategy(soup: BeautifulSoup) -> str:
        node = soup.select_one(selector)
        return node_text(node) if node is not None else ""

    strategy.__name__ = f"selector({selector})"
    return strategy


def _paragraphs(soup: BeautifulSoup) -> str:
    texts = (node_text(p) for p in soup.find_all("p"))
    return " ".join(t for t in texts if len(t) > MIN_PARAGRAPH_CHARS)


def _longest(strategies: Sequence[TextStrategy], soup: BeautifulSoup, current: str) -> str:
    best = current
    for strategy in strategies:
        text = strategy(soup)
        if len(text) > len(best):
            logger.debug("Fallback %s yielded %d chars", getattr(strategy, "__name__", strategy), len(text))
            best = text
    return best


def extract_text(soup: BeautifulSoup, platform: BlogPlatform) -> str:
    """Body text of the post, normalized."""
    text = platform.primary_text(soup)
    stages: list[Sequence[TextStrategy]] = [
        [_selector_strategy(s) for s in platform.all_fallback_selectors],
        [_paragraphs],
    ]
    for stage in stages:
        if len(text) >= MIN_PRIMARY_CHARS:
            break
        logger.debug("Only %d chars so far on %s, trying fallbacks", len(text), platform.name)
        text = _longest(stage, soup, text)
    return collapse_whitespace(text)


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------


def is_gif_url(src: str) -> bool:
    """True for URLs that definitely point at an animated GIF."""
    if not src:
        return False
    lowered = src.lower()
    return any(marker in lowered for marker in GIF_MARKERS)


def _img_sources(soup: BeautifulSoup) -> list[str]:
    sources = []
    for img in soup.find_all("img", src=True):
        src = img.get("src")
        if isinstance(src, str) and src:
            sources.append(src)
    return sources


def _first_nonzero(strategies: Sequence[CountStrategy], soup: BeautifulSoup) -> int:
    for strategy in strategies:
        count = strategy(soup)
        if count:
            return count
    return 0


def _se_images(soup: BeautifulSoup) -> int:
    return len(soup.select(".se-module-image"))


def _unique_static_images(soup: BeautifulSoup) -> int:
    return len(remove_duplicates(s for s in _img_sources(soup) if not is_gif_url(s)))


def _gif_videos(soup: BeautifulSoup) -> int:
    return len(soup.select("video._gifmp4"))


def _gif_images(soup: BeautifulSoup) -> int:
    return sum(1 for s in _img_sources(soup) if is_gif_url(s))


def _se_videos(soup: BeautifulSoup) -> int:
    return len(soup.select(".se-module-video"))


def _embedded_videos(soup: BeautifulSoup) -> int:
    sources = [str(w) for w in soup.select(".webplayer-internal-source-wrapper")]
    for frame in soup.find_all("iframe", src=True):
        src = frame.get("src")
        if isinstance(src, str) and any(host in src for host in VIDEO_HOSTS):
            sources.append(src)
    return len(remove_duplicates(sources))


def count_media(soup: BeautifulSoup) -> MediaCounts:
    return MediaCounts(
        images=_first_nonzero([_se_images, _unique_static_images], soup),
        gifs=_first_nonzero([_gif_videos, _gif_images], soup),
        videos=_first_nonzero([_se_videos, _embedded_videos], soup),
    )


# ---------------------------------------------------------------------------
# Public function
# ---------------------------------------------------------------------------


def extract_content(html: str, url: str, title: str, platform: BlogPlatform) -> ExtractedContent:
    """Builds an :class:`ExtractedContent` from a decoded page.

    The caller-supplied *title* is kept as is. Any parser fault is raised as
    :class:`~blog_scout.errors.ExtractionError`.
    """
    try:
        soup = parse_document(html)
        text = extract_text(soup, platform)
        media = count_media(soup)
        tags = extract_hashtags(soup, text)
    except Exception as exc:
        logger.warning("HTML parsing failed for %s: %s", url, exc)
        raise ExtractionError(f"HTML parsing failed: {exc}") from exc

    content = ExtractedContent.succeeded(
        url,
        title,
        text,
        image_count=media.images,
        gif_count=media.gifs,
        video_count=media.videos,
        tags=tags,
    )
    logger.debug(
        "Extracted %s: %d chars, %d images, %d gifs, %d videos, %d tags",
        url,
        content.content_length,
        media.images,
        media.gifs,
        media.videos,
        len(tags),
    )
    return content
