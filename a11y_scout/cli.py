# === FILE: a11y_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for the A11yScout accessibility scanner.

Commands:
  scan      Discover pages, run axe-core against them, print/save the results
  config    Show the effective configuration
  sites     Show the entries of a sites file

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (console only if omitted)
  --log-format FORMAT Logging format string

scan options:
  --base-url URL      Site root (overrides config)
  --url URL           Extra target, repeatable
  --mode MODE         sitemap | crawl | list
  --limit INT         Max pages to scan (clamped to 1..200)
  --concurrency INT   Pages scanned simultaneously
  --strategy NAME     Sitemap sampling strategy: shuffle | sequential
  --seed TEXT         Sitemap sampling seed (default: site identity)
  --sites FILE        Sites file; used together with --site
  --site NAME         Site to scan from the sites file (ad-hoc if missing)
  --output-dir DIR    Write <DIR>/<run_id>/results.json and summary.json
  --html PATH         Also write an HTML report
  --pretty            Indent JSON printed to stdout

Example:
  a11y-scout scan --base-url https://example.com --limit 20 --output-dir site/runs
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from a11y_scout import __version__
from a11y_scout.config import load_config, load_sites, resolve_site
from a11y_scout.engine import start_scan
from a11y_scout.logger import DEFAULT_FORMAT, init_logging
from a11y_scout.report.html_report import render_html
from a11y_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='A11yScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
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
    help='Log file (console only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """A11yScout command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
        stream=sys.stderr,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.option('--base-url', 'base_url', default=None, help='Site root URL')
@click.option('--url', 'urls', multiple=True, help='Extra target URL (repeatable)')
@click.option('--mode', type=click.Choice(['sitemap', 'crawl', 'list']), default=None, help='Discovery mode')
@click.option('--limit', '-l', 'limit', type=int, default=None, help='Max pages to scan (overrides max_pages)')
@click.option('--concurrency', type=click.IntRange(min=1), default=None, help='Pages scanned simultaneously')
@click.option('--strategy', type=click.Choice(['shuffle', 'sequential']), default=None, help='Sitemap sampling strategy')
@click.option('--seed', default=None, help='Sitemap sampling seed')
@click.option(
    '--sites', 'sites_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Sites file (YAML)'
)
@click.option('--site', 'site_name', default=None, help='Site name or label from the sites file')
@click.option(
    '--output-dir', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory receiving <run_id>/results.json and summary.json'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save an HTML report to this file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with report.html.j2 (packaged template if omitted)'
)
@click.option('--pretty', is_flag=True, help='Indent JSON printed to stdout')
@click.pass_context
def scan(ctx, base_url, urls, mode, limit, concurrency, strategy, seed,
         sites_file, site_name, output_dir, html_output, template_dir, pretty):
    """Discover pages and scan them."""
    cfg = ctx.obj['config']
    try:
        if site_name:
            sites = load_sites(sites_file) if sites_file else []
            site = resolve_site(sites, site_name, allow_adhoc=True)
            cfg = site.to_run_config(cfg)
        cfg = cfg.with_overrides(
            base_url=base_url,
            urls=list(urls) or None,
            mode=mode,
            max_pages=limit,
            concurrency=concurrency,
            sitemap_sample_strategy=strategy,
            sitemap_sample_seed=seed,
        )
    except Exception as e:
        print_error(f'Invalid scan options: {e}')

    if not cfg.raw_targets():
        print_error('No targets: pass --base-url, --url, --site or set them in the config.')

    click.echo(f'Starting scan: {", ".join(cfg.raw_targets())}', err=True)
    try:
        run = asyncio.run(start_scan(cfg))
    except Exception as e:
        print_error(f'Scan failed: {e}')

    if not output_dir and not html_output:
        try:
            click.echo(run.json(pretty=pretty))
        except TypeError as e:
            print_error(f'JSON serialization failed: {e}')
        return

    if output_dir:
        try:
            run_dir = render_json(run, output_dir)
            click.echo(f'Results: {run_dir}')
        except Exception as e:
            print_error(f'Failed to save JSON results: {e}')

    if html_output:
        try:
            saved_html = render_html(run, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('sites', context_settings=CONTEXT_SETTINGS)
@click.argument('sites_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show_sites(sites_file):
    """Print the entries of SITES_FILE as JSON."""
    try:
        sites = load_sites(sites_file)
    except Exception as e:
        print_error(f'Failed to load sites file: {e}')
    click.echo(json.dumps([s.model_dump() for s in sites], ensure_ascii=False, indent=2))


def main() -> None:  # pragma: no cover
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
