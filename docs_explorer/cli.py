#!/usr/bin/env python3
"""
Command line entry point for docs_explorer.

Commands:
  scrape    Crawl one or more documentation sources into the data directory
  serve     Run the search / AI-answer HTTP API
  search    Run a lexical search against the scraped corpus and print JSON
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (built-in defaults when omitted)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

Scrape options:
  --source LIST       Comma-separated sources: factory,github,vercel,resend or all
  --output DIR        Data directory (overrides data_dir)
  --max-pages INT     Page budget per source
  --delay MS          Pause between requests in milliseconds
  --html              Also render <source>-docs/index.html
  --verbose           Debug logging

Also:
  --version, -v       Show the docs_explorer version

Example:
  docs-explorer scrape --source factory --max-pages 50 --delay 500
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from docs_explorer import __version__
from docs_explorer.config import AppConfig, load_config
from docs_explorer.engine import run_sources, write_stats
from docs_explorer.logger import DEFAULT_FORMAT, init_logging
from docs_explorer.search.cache import DocCache
from docs_explorer.search.search import SEARCH_TYPES, search_documentation
from docs_explorer.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='docs_explorer, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
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
    help='Log file path (stderr when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """docs_explorer command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path) if config_path else AppConfig()
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['log_options'] = dict(log_file=str(log_file) if log_file else None, log_format=log_format)


@cli.command('scrape', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--source', '-s', 'source',
    default='factory', show_default=True,
    help='Sources to scrape (comma-separated: factory,github,vercel,resend,all)'
)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Output directory for scraped data'
)
@click.option('--max-pages', '-m', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Maximum number of pages per source')
@click.option('--delay', '-d', 'delay', type=click.IntRange(min=0), default=None,
              help='Delay between requests in milliseconds')
@click.option('--html', 'html', is_flag=True, help='Render an HTML navigation page per source')
@click.option('--verbose', is_flag=True, help='Enable verbose logging')
@click.pass_context
def scrape(ctx, source, output, max_pages, delay, html, verbose):
    """Crawl documentation sources and save them as JSON."""
    cfg: AppConfig = ctx.obj['config']
    if output is not None:
        cfg = cfg.model_copy(update={'data_dir': output})
    if verbose:
        init_logging(level='DEBUG', **ctx.obj['log_options'])

    click.secho('=== Documentation Scraper ===', fg='blue')
    try:
        stats = asyncio.run(run_sources(cfg, source, max_pages=max_pages, rate_limit=delay, html=html))
    except Exception as e:
        print_error(f'Fatal error: {e}')

    stats_path = write_stats(stats, cfg.data_dir)

    click.secho('\n=== Scraping Summary ===', fg='blue')
    for key, src in stats.sources.items():
        colour = 'green' if src.status == 'completed' else 'red'
        click.secho(f'  {key}: {src.status}, {src.pages_scraped} pages', fg=colour)
    click.echo(f'Total duration: {(stats.duration or 0) / 1000:.2f}s')
    click.echo(f'Total pages scraped: {stats.total_pages}')
    click.echo(f'Stats: {stats_path}')

    if stats.errors:
        lines = '\n'.join(f'  {i}. {err["source"]}: {err["message"]}' for i, err in enumerate(stats.errors, 1))
        print_error(f'Encountered {len(stats.errors)} errors:\n{lines}')
    click.secho('Scraping completed successfully!', fg='green')


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Bind address (default from config)')
@click.option('--port', type=click.IntRange(1, 65535), default=None, help='Port (default from config)')
@click.pass_context
def serve(ctx, host, port):
    """Run the documentation search API."""
    run_server(ctx.obj['config'], host=host, port=port)


@cli.command('search', context_settings=CONTEXT_SETTINGS)
@click.argument('query')
@click.option('--type', '-t', 'search_type', default='all', show_default=True,
              type=click.Choice(SEARCH_TYPES))
@click.option('--source', '-s', 'sources', multiple=True,
              help='Source to search; repeatable (default: every configured source)')
@click.option('--pretty', is_flag=True, help='Indent JSON output by 2 spaces')
@click.pass_context
def search(ctx, query, search_type, sources, pretty):
    """Search the scraped corpus and print the ranked results."""
    cfg: AppConfig = ctx.obj['config']
    cache = DocCache(cfg.data_dir, cfg.sources, ttl=cfg.server.cache_ttl)
    results = search_documentation(
        query,
        search_type,
        list(sources) or list(cfg.sources),
        cache=cache,
        limit=cfg.server.max_results,
        min_score=cfg.server.min_score,
    )
    click.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
