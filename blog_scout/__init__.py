"""
BlogScout package initializer.
Defines package version and exposes the crawl entry points.
"""
__version__ = "0.1.0"

from blog_scout.config import CrawlerConfig, QualityRules, load_config, load_targets
from blog_scout.crawler.crawler import BlogCrawler, start_crawl
from blog_scout.crawler.models import CrawlProgress, CrawlStatus, CrawlTarget, ExtractedContent
from blog_scout.errors import FailureKind

__all__ = [
    "__version__",
    "BlogCrawler",
    "CrawlerConfig",
    "CrawlProgress",
    "CrawlStatus",
    "CrawlTarget",
    "ExtractedContent",
    "FailureKind",
    "QualityRules",
    "load_config",
    "load_targets",
    "start_crawl",
]
