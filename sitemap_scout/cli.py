# === FILE: sitemap_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SitemapScout через командную строку.

Команды:
  scan      Обойти страницы из sitemap index и вывести/сохранить отчёт
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда scan опции:
  --index-url URL     Переопределить URL sitemap index
  --batch-size INT    Страниц в одной волне (override batch_size)
  --batch-delay SEC   Пауза между волнами (override batch_delay)
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию SitemapScout

Пример:
  sitemap-scout --config configs/default.yaml scan --json report.json --batch-size 10
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from sitemap_scout import __version__
from sitemap_scout.aggregator import aggregate_results
from sitemap_scout.config import load_config
from sitemap_scout.crawler.sitemap_loader import SitemapLoadError
from sitemap_scout.engine import start_scan
from sitemap_scout.logger import DEFAULT_FORMAT, init_logging
from sitemap_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SitemapScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.option('--index-url', 'index_url', default=None, help='URL sitemap index (override index_url)')
@click.option('--batch-size', 'batch_size', type=click.IntRange(min=1), default=None,
              help='Страниц в одной волне (override batch_size)')
@click.option('--batch-delay', 'batch_delay', type=click.FloatRange(min=0), default=None,
              help='Пауза между волнами, секунд (override batch_delay)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def scan(ctx, index_url, batch_size, batch_delay, json_output, pretty, scan_timeout):
    """Обойти страницы из sitemap и сгенерировать отчёт."""
    cfg = ctx.obj['config']
    overrides = {
        key: value
        for key, value in (('index_url', index_url), ('batch_size', batch_size), ('batch_delay', batch_delay))
        if value is not None
    }
    if overrides:
        try:
            cfg = cfg.model_validate({**cfg.model_dump(), **overrides})
        except ValidationError as e:
            print_error(f'Ошибка конфигурации: {e}')
    click.echo(f'Starting crawl of {cfg.index}', err=True)

    try:
        if scan_timeout:
            groups = asyncio.run(
                asyncio.wait_for(start_scan(cfg), timeout=scan_timeout)
            )
        else:
            groups = asyncio.run(start_scan(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {scan_timeout} секунд')
    except SitemapLoadError as e:
        print_error(f'Ошибка загрузки sitemap: {e}')

    report = aggregate_results(groups, cfg.under_linked_threshold)

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output:
        click.echo(report.json(pretty=pretty))
        return

    try:
        saved_json = render_json(report, json_output)
    except OSError as e:
        print_error(f'Ошибка при сохранении JSON: {e}')
    click.echo(f'JSON report: {saved_json}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
