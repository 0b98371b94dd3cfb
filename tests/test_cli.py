# File: tests/test_cli.py
"""CLI tests (`blog_scout.cli`) with click.testing.CliRunner.
Cover the `crawl` and `config` commands, `--version` and error handling.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import blog_scout.cli as cli_module
from blog_scout.cli import cli
from blog_scout.crawler.models import CrawlProgress, CrawlStatus, ExtractedContent
from blog_scout.errors import FailureKind

GOOD = ExtractedContent.succeeded(
    "https://blog.naver.com/walker/1", "산책", "동네 산책 이야기 " * 30, image_count=2, tags=["산책"]
)
BAD = ExtractedContent.failed(
    "https://blog.naver.com/walker/2", "광고", "sponsored or advertising content: keyword '체험단'",
    FailureKind.QUALITY,
)


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Replaces start_crawl with a fake that returns canned records."""
    calls = []

    async def fake_crawl(cfg, targets, progress_callback=None):
        calls.append((cfg, list(targets)))
        if progress_callback:
            progress_callback(CrawlProgress(1, cfg.target_success_count, targets[0].url, CrawlStatus.CRAWLING))
        return [BAD, GOOD]

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return calls


@pytest.fixture()
def targets_file(tmp_path):
    path = tmp_path / "targets.yaml"
    path.write_text(
        "targets:\n"
        "  - url: https://blog.naver.com/walker/2\n"
        "    title: 광고\n"
        "  - url: https://blog.naver.com/walker/1\n"
        "    title: 산책\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"target_success_count": 1, "request_delay": 0}), encoding="utf-8")
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "BlogScout" in result.output


def test_show_config(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["target_success_count"] == 1
    assert data["request_delay"] == 0
    assert data["quality"]["min_length"] == 300


def test_broken_config_exits(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("timeout: -3\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output


def test_crawl_stdout(config_file, targets_file, patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl", str(targets_file)])
    assert result.exit_code == 0, result.output
    # progress and status lines go to stderr, the report is the last line
    report = json.loads(result.stdout.strip().splitlines()[-1])
    assert report["accepted"] == 1
    assert report["target_reached"] is True
    assert report["failures"] == {"quality": 1}
    assert [r["url"] for r in report["results"]] == [BAD.url, GOOD.url]

    (cfg, targets), = patch_start_crawl
    assert [t.title for t in targets] == ["광고", "산책"]


def test_crawl_urls_and_target_override(config_file, patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["--config", str(config_file), "crawl", "-u", "https://a.tistory.com/1", "-u", "https://a.tistory.com/2",
         "--target", "2"],
    )
    assert result.exit_code == 0
    (cfg, targets), = patch_start_crawl
    assert cfg.target_success_count == 2
    assert [t.url for t in targets] == ["https://a.tistory.com/1", "https://a.tistory.com/2"]
    assert targets[0].title == targets[0].url
    assert "only 1 of 2 posts accepted" in result.output


def test_crawl_json_file(config_file, targets_file, tmp_path):
    out = tmp_path / "out" / "report.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl", str(targets_file), "--json", str(out)])
    assert result.exit_code == 0
    assert f"JSON report: {out}" in result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["results"][1]["tags"] == ["산책"]
    assert data["results"][0]["failure_kind"] == "quality"


def test_crawl_html_file(config_file, targets_file, tmp_path):
    out = tmp_path / "report.html"
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl", str(targets_file), "--html", str(out)])
    assert result.exit_code == 0
    html = out.read_text(encoding="utf-8")
    assert "체험단" in html
    assert "target reached" in html


def test_crawl_without_targets_fails(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl"])
    assert result.exit_code == 1
    assert "No targets given" in result.output


def test_crawl_bad_targets_file(config_file, tmp_path):
    bad = tmp_path / "targets.yaml"
    bad.write_text("- title: no url here\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl", str(bad)])
    assert result.exit_code == 1
    assert "Failed to load targets" in result.output


def test_crawl_timeout(monkeypatch, config_file, targets_file):
    async def slow(cfg, targets, progress_callback=None):
        await asyncio.sleep(2)
        return []

    monkeypatch.setattr(cli_module, "start_crawl", slow)
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(config_file), "crawl", str(targets_file), "--crawl-timeout", "0.1"]
    )
    assert result.exit_code == 1
    assert "did not finish" in result.output
