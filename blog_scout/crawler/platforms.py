# blog_scout/crawler/platforms.py
"""
Supported blog platforms.

Each platform knows which hosts it serves, which URL variants are worth
fetching for a post and where the post body lives in its markup. The set is
closed: :data:`NAVER` and :data:`TISTORY`.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse, urlunparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from blog_scout.utils import collapse_whitespace, extract_host

__all__ = ("BlogPlatform", "NAVER", "TISTORY", "PLATFORMS", "detect_platform", "node_text")

# Containers of unknown CMS skins, tried after the platform-specific ones.
GENERIC_SELECTORS: Tuple[str, ...] = ("#content", ".content", "main")


def node_text(node: Tag) -> str:
    """Visible text of *node* with entities decoded and whitespace collapsed."""
    return collapse_whitespace(node.get_text(" "))


class BlogPlatform(ABC):
    """Capabilities of one blog platform."""

    name: str
    fallback_selectors: Tuple[str, ...] = ()

    @abstractmethod
    def matches(self, url: str) -> bool:
        """True when *url* points at this platform."""

    @abstractmethod
    def candidate_urls(self, url: str) -> List[str]:
        """URL variants to fetch, best guess first."""

    @abstractmethod
    def primary_text(self, soup: BeautifulSoup) -> str:
        """Body text found through the platform's own markup, ``""`` if none."""

    @property
    def all_fallback_selectors(self) -> Tuple[str, ...]:
        return self.fallback_selectors + GENERIC_SELECTORS

    def __repr__(self) -> str:
        return f"<BlogPlatform {self.name}>"


class NaverPlatform(BlogPlatform):
    """Naver Blog (Smart Editor 3 markup, legacy PostView permalinks)."""

    name = "naver"
    hosts = frozenset({"blog.naver.com", "m.blog.naver.com"})
    fallback_selectors = (
        ".se-viewer",
        "#post_view",
        ".post_content",
        ".se-main-container",
        ".postViewArea",
        ".se-component-wrap",
        ".se-component",
    )
    _EXCLUDED_MODULES = ("se-title-text", "se-caption")
    _POST_PATH_RE = re.compile(r"^/([^/]+)/(\d+)/?$")

    def matches(self, url: str) -> bool:
        return extract_host(url) in self.hosts

    def candidate_urls(self, url: str) -> List[str]:
        url = url.strip()
        if not url or not self.matches(url):
            return []
        parsed = urlparse(url)
        if parsed.path.rstrip("/").endswith("PostView.naver"):
            return [url]
        match = self._POST_PATH_RE.match(parsed.path)
        if match is None:
            return [url]
        blog_id, log_no = match.groups()
        post_view = f"https://blog.naver.com/PostView.naver?blogId={blog_id}&logNo={log_no}"
        return [post_view, url] if post_view != url else [url]

    def primary_text(self, soup: BeautifulSoup) -> str:
        parts: List[str] = []
        for module in soup.select("div.se-module-text"):
            classes = module.get("class") or []
            if any(name in classes for name in self._EXCLUDED_MODULES):
                continue
            if module.find_parent(class_=list(self._EXCLUDED_MODULES)) is not None:
                continue
            text = node_text(module)
            if text:
                parts.append(text)
        return " ".join(parts)


class TistoryPlatform(BlogPlatform):
    """Tistory (``*.tistory.com``), desktop and ``/m/`` mobile skins."""

    name = "tistory"
    fallback_selectors = (".contents_style", ".entry-content", ".post-content")
    _PRIMARY_MIN = 100

    def matches(self, url: str) -> bool:
        return extract_host(url).endswith(".tistory.com")

    def candidate_urls(self, url: str) -> List[str]:
        url = url.strip()
        if not url or not self.matches(url):
            return []
        parsed = urlparse(url)
        path = parsed.path or "/"
        if path == "/m" or path.startswith("/m/"):
            return [url]
        mobile = urlunparse(parsed._replace(path="/m" + path))
        return [url, mobile]

    def primary_text(self, soup: BeautifulSoup) -> str:
        text = ""
        article = soup.find("article")
        if isinstance(article, Tag):
            text = node_text(article)
        if len(text) < self._PRIMARY_MIN:
            area = soup.select_one("div.area_view")
            if area is not None:
                area_text = node_text(area)
                if len(area_text) > len(text):
                    text = area_text
        return text


NAVER: BlogPlatform = NaverPlatform()
TISTORY: BlogPlatform = TistoryPlatform()
PLATFORMS: Sequence[BlogPlatform] = (NAVER, TISTORY)


def detect_platform(url: Optional[str]) -> Optional[BlogPlatform]:
    """Platform serving *url*, or ``None`` for empty and unsupported URLs."""
    if not url or not url.strip():
        return None
    for platform in PLATFORMS:
        if platform.matches(url.strip()):
            return platform
    return None
