# === FILE: registry_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера RegistryScout через командную строку.

Команды:
  crawl     Обойти индекс реестра и записать размеры дистрибутивов в CSV
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --registry-url URL      URL индекса реестра
  --output PATH           CSV-файл с результатами
  --max-requests INT      Потолок одновременных запросов
  --error-policy POLICY   collect | fail_fast
  --[no-]resolve-dist-urls Разрешать ссылки дистрибутивов относительно страницы пакета
  --quiet                 Не показывать строку прогресса
  --report PATH           Сохранить JSON-итог обхода в файл
  --crawl-timeout SEC     Таймаут всего обхода (секунд)

Коды выхода crawl: 0 - обход завершён, 2 - завершён с ошибками пакетов,
1 - обход прерван или не удался.

Пример:
  registry-scout crawl --output pypi.csv --max-requests 500 --report summary.json
"""
import asyncio
import sys
from pathlib import Path

import click

from registry_scout import __version__
from registry_scout.config import load_config, override
from registry_scout.errors import CrawlError
from registry_scout.logger import DEFAULT_FORMAT, init_logging, logger
from registry_scout.report.json_report import render_json
from registry_scout.scanner import start_crawl
from registry_scout.summary import RunOutcome

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])

EXIT_ABORTED = 1
EXIT_PARTIAL = 2


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(EXIT_ABORTED)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='RegistryScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд RegistryScout CLI."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--registry-url', '-u', 'registry_url', default=None, help='URL индекса реестра')
@click.option(
    '--output', '-o', 'output_path',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='CSV-файл с результатами'
)
@click.option(
    '--max-requests', '-n', 'max_requests',
    type=int,
    default=None,
    help='Потолок одновременных HTTP-запросов'
)
@click.option(
    '--error-policy', 'error_policy',
    type=click.Choice(['collect', 'fail_fast']),
    default=None,
    help='collect - собирать ошибки пакетов; fail_fast - прервать обход на первой'
)
@click.option(
    '--resolve-dist-urls/--no-resolve-dist-urls', 'resolve_dist_urls',
    default=None,
    help='Разрешать ссылки дистрибутивов относительно URL страницы пакета'
)
@click.option('--quiet', '-q', is_flag=True, help='Не показывать строку прогресса')
@click.option(
    '--report', '-r', 'report_path',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-итог обхода в файл'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, registry_url, output_path, max_requests, error_policy,
          resolve_dist_urls, quiet, report_path, crawl_timeout):
    """Обойти индекс реестра и записать размеры всех дистрибутивов."""
    try:
        cfg = override(
            ctx.obj['config'],
            registry_url=registry_url,
            output_path=output_path,
            max_concurrent_requests=max_requests,
            error_policy=error_policy,
            resolve_distribution_urls=resolve_dist_urls,
            show_progress=False if quiet else None,
        )
    except Exception as e:
        print_error(f'Неверные параметры: {e}')

    logger.info('Starting crawl of %s -> %s', cfg.registry_url, cfg.output_path)
    try:
        if crawl_timeout:
            summary = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            summary = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except CrawlError as e:
        print_error(f'Ошибка при обходе: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if report_path:
        try:
            saved = render_json(summary, report_path)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    click.echo(
        f'{summary.outcome.value}: {summary.rows_written} distributions of '
        f'{summary.packages_scraped}/{summary.packages_total} packages written to {cfg.output_path}'
    )
    if summary.outcome is RunOutcome.ABORTED:
        failure = summary.failures[0]
        print_error(f'Обход прерван: {failure.package}: {failure.message} ({failure.url})')
    if summary.outcome is RunOutcome.COMPLETED_WITH_FAILURES:
        click.secho(f'Пакетов с ошибками: {len(summary.failures)}', fg='yellow', err=True)
        sys.exit(EXIT_PARTIAL)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
