# === FILE: blog_scout/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of BlogScout.

Commands:
  crawl     Crawl ranked blog posts and print/save the report
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

crawl options:
  TARGETS_FILE        YAML/JSON list of {url, title}, best candidate first
  --url URL           Extra target URL (repeatable), appended after the file
  --target N          Accepted posts to collect (overrides target_success_count)
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --template DIR      Directory with a custom report.html.j2
  --pretty            Indent JSON printed to stdout
  --crawl-timeout SEC Timeout of the whole crawl (seconds)

Example:
  blog-scout crawl targets.yaml --target 3 --json report.json
"""
import asyncio
import sys
from pathlib import Path

import click

from blog_scout import __version__
from blog_scout.aggregator import aggregate_results
from blog_scout.config import load_config, load_targets
from blog_scout.crawler.crawler import start_crawl
from blog_scout.crawler.models import CrawlTarget
from blog_scout.logger import DEFAULT_FORMAT, init_logging
from blog_scout.report.html_report import render_html
from blog_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def print_progress(progress):
    click.echo(f'[{progress.current}/{progress.total}] {progress.status.value}: {progress.url}', err=True)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='BlogScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """BlogScout command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument(
    'targets_file',
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option('--url', '-u', 'urls', multiple=True, help='Extra target URL (repeatable)')
@click.option('--target', '-n', 'target_count', type=click.IntRange(min=1), default=None,
              help='Accepted posts to collect')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with a custom report.html.j2'
)
@click.option('--pretty', is_flag=True, help='Indent JSON printed to stdout')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Timeout of the whole crawl (seconds)'
)
@click.pass_context
def crawl(ctx, targets_file, urls, target_count, json_output, html_output, template_dir, pretty, crawl_timeout):
    """Crawl ranked blog posts and build a report."""
    cfg = ctx.obj['config']
    if target_count is not None:
        cfg = cfg.model_copy(update={'target_success_count': target_count})

    targets = []
    if targets_file is not None:
        try:
            targets = load_targets(targets_file)
        except Exception as e:
            print_error(f'Failed to load targets: {e}')
    targets.extend(CrawlTarget(url=u, title=u) for u in urls)
    if not targets:
        print_error('No targets given: pass a TARGETS_FILE or --url')

    click.echo(f'Crawling {len(targets)} targets for {cfg.target_success_count} accepted posts', err=True)
    try:
        if crawl_timeout:
            results = asyncio.run(
                asyncio.wait_for(start_crawl(cfg, targets, print_progress), timeout=crawl_timeout)
            )
        else:
            results = asyncio.run(start_crawl(cfg, targets, print_progress))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {crawl_timeout} seconds')

    report = aggregate_results(results, cfg.target_success_count)
    if not report.target_reached:
        click.secho(
            f'Warning: only {report.accepted} of {report.target_success_count} posts accepted',
            fg='yellow', err=True
        )

    # Print to stdout unless a file was requested
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
