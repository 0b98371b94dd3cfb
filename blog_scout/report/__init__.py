"""blog_scout.report: JSON and HTML reports of a crawl run."""

from blog_scout.report.html_report import render_html
from blog_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]
