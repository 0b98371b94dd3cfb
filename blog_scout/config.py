# === FILE: blog_scout/config.py ===
"""
Loading and validation of BlogScout settings and crawl target lists.
Pydantic describes the schema; YAML and JSON documents are both accepted.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, List, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from blog_scout.crawler.models import CrawlTarget

__all__ = (
    "AD_KEYWORDS",
    "AD_PATTERNS",
    "DEFAULT_USER_AGENT",
    "DEFAULT_ACCEPT_LANGUAGE",
    "QualityRules",
    "CrawlerConfig",
    "load_config",
    "load_targets",
)

# Disclosure phrases used by Korean bloggers for paid or sponsored posts.
# Bare "광고"/"협찬" are left out: they show up in ordinary reviews too often.
AD_KEYWORDS: Tuple[str, ...] = (
    "광고포스트", "광고 포스트", "광고글", "광고 글", "광고입니다", "광고 입니다",
    "유료광고", "유료 광고", "파트너스", "쿠팡파트너스", "파트너 활동", "추천링크",
    "협찬받", "협찬글", "협찬 글", "협찬으로", "협찬을", "무료로 제공",
    "브랜드로부터", "업체로부터", "해당업체", "해당 업체",
    "업체에서 제공", "업체로부터 제품",
    "리뷰어", "서포터즈", "앰배서더",
    "원고료", "대가", "소정의", "증정", "무료로 받", "공짜로",
    "할인코드", "프로모션", "이벤트 참여",
)

AD_PATTERNS: Tuple[str, ...] = (
    r"협찬.*받.*글",
    r"무료.*받.*후기",
    r"광고.*포함",
    r"업체.*제품.*제공",
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "ko-KR,ko;q=0.8,en-US;q=0.5,en;q=0.3"


class QualityRules(BaseModel):
    """Thresholds and keyword lists of the quality classifier."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    min_length: int = Field(300, ge=0, description="Minimum non-whitespace characters.")
    max_length: int = Field(4000, ge=1, description="Maximum non-whitespace characters.")
    ad_keywords: Tuple[str, ...] = Field(AD_KEYWORDS, description="Sponsorship disclosure phrases.")
    ad_patterns: Tuple[str, ...] = Field(AD_PATTERNS, description="Sponsorship regex patterns.")
    min_meaningful_ratio: float = Field(0.3, ge=0, le=1, description="Share left after stripping digits and symbols.")
    max_special_ratio: float = Field(0.15, ge=0, le=1, description="Share of non-linguistic characters.")
    max_repeat_run: int = Field(5, ge=2, description="Consecutive repeats of one character that reject a post.")

    @field_validator("ad_patterns")
    def _check_patterns(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid ad pattern {pattern!r}: {exc}") from exc
        return v

    @model_validator(mode="after")
    def _check_bounds(self) -> QualityRules:
        if self.min_length > self.max_length:
            raise ValueError("min_length must not exceed max_length")
        return self


class CrawlerConfig(BaseModel):
    """Settings of a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    target_success_count: int = Field(3, ge=1, description="Accepted posts to collect before stopping.")
    timeout: float = Field(15.0, gt=0, description="Timeout of one HTTP request (seconds).")
    request_delay: float = Field(1.0, ge=0, description="Pause between targets (seconds).")
    concurrency: int = Field(1, ge=1, description="Parallel fetches; 1 keeps the crawl sequential.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    accept_language: str = Field(DEFAULT_ACCEPT_LANGUAGE, min_length=1, description="Accept-Language header.")
    quality: QualityRules = Field(default_factory=QualityRules)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _read_document(path: Union[str, Path]) -> Any:
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported file format: {suffix}")


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Reads YAML or JSON and returns a validated CrawlerConfig.
    Without *path* the default file is used when present, built-in defaults otherwise.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path = _DEFAULT_CFG

    data = _read_document(path) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Top level of a config must be a mapping, got {type(data).__name__}")

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise


def load_targets(path: Union[str, Path]) -> List[CrawlTarget]:
    """
    Reads ranked crawl targets: a list of ``{url, title}`` entries, either at the
    top level or under a ``targets`` key. A missing title falls back to the URL.
    """
    data = _read_document(path)
    if isinstance(data, dict):
        data = data.get("targets")
    if not isinstance(data, list):
        raise TypeError("Targets must be a list of {url, title} entries")

    targets: List[CrawlTarget] = []
    for position, entry in enumerate(data, start=1):
        if isinstance(entry, str):
            entry = {"url": entry}
        if not isinstance(entry, dict) or not entry.get("url"):
            raise ValueError(f"Target #{position} has no url")
        url = str(entry["url"]).strip()
        targets.append(CrawlTarget(url=url, title=str(entry.get("title") or url)))
    return targets
