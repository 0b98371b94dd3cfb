# blog_scout/report/json_report.py

"""
JSON report of a BlogScout crawl run.
"""
from pathlib import Path

from blog_scout.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Saves *report* as UTF-8 JSON at *output_path*.

    :param report: aggregated crawl results
    :param output_path: path of the JSON file
    :return: Path of the saved file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output
