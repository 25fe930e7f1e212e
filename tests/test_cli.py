# File: tests/test_cli.py
"""Тесты для CLI с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, коды выхода и обработку ошибок.
"""
import asyncio
import importlib
import json

import pytest
from click.testing import CliRunner

from registry_scout.cli import cli
from registry_scout.errors import FetchError
from registry_scout.summary import PackageFailure, RunSummary

cli_module = importlib.import_module("registry_scout.cli")


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "registry_url": "https://registry.example/simple/",
                "output_path": str(tmp_path / "out.csv"),
                "max_concurrent_requests": 8,
                "show_progress": False,
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def fake_crawl(monkeypatch):
    """Патчим start_crawl: возвращает заданный RunSummary и запоминает конфиг."""
    state = {"summary": RunSummary(packages_total=2, packages_scraped=2, rows_written=3), "config": None}

    async def fake(cfg):
        state["config"] = cfg
        return state["summary"]

    monkeypatch.setattr(cli_module, "start_crawl", fake)
    return state


def failure(package="pkgA"):
    return PackageFailure(
        package=package,
        package_url=f"https://registry.example/simple/{package.lower()}/",
        error_type="FetchError",
        message="Fetch failed: HTTP 404",
        url="https://files.example/gone.whl",
        status=404,
    )


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "RegistryScout" in result.output


def test_show_config(cfg_file):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["registry_url"] == "https://registry.example/simple/"
    assert data["max_concurrent_requests"] == 8


def test_crawl_completed(cfg_file, fake_crawl):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 0
    assert "completed: 3 distributions of 2/2 packages" in result.output


def test_crawl_flags_override_config(cfg_file, fake_crawl, tmp_path):
    out = tmp_path / "other.csv"
    result = CliRunner().invoke(
        cli,
        [
            "--config", str(cfg_file), "crawl",
            "--registry-url", "http://mirror.example/simple/",
            "--output", str(out),
            "--max-requests", "3",
            "--error-policy", "fail_fast",
            "--resolve-dist-urls",
            "--quiet",
        ],
    )
    assert result.exit_code == 0
    cfg = fake_crawl["config"]
    assert str(cfg.registry_url) == "http://mirror.example/simple/"
    assert cfg.output_path == out
    assert cfg.max_concurrent_requests == 3
    assert cfg.error_policy == "fail_fast"
    assert cfg.resolve_distribution_urls is True
    assert cfg.show_progress is False


def test_crawl_invalid_override(cfg_file, fake_crawl):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl", "--max-requests", "0"])
    assert result.exit_code == 1
    assert fake_crawl["config"] is None


def test_crawl_with_failures_exits_2_and_writes_report(cfg_file, fake_crawl, tmp_path):
    fake_crawl["summary"] = RunSummary(packages_total=2, packages_scraped=2, failures=[failure()])
    report = tmp_path / "reports" / "summary.json"

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl", "--report", str(report)])

    assert result.exit_code == 2
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["outcome"] == "completed_with_failures"
    assert data["failures"][0]["status"] == 404


def test_crawl_aborted_exits_1(cfg_file, fake_crawl):
    fake_crawl["summary"] = RunSummary(packages_total=2, aborted=True, failures=[failure()])
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 1
    assert "pkgA" in result.output


def test_crawl_discovery_error(cfg_file, monkeypatch):
    async def broken(cfg):
        raise FetchError("GET", str(cfg.registry_url), "HTTP 503", status=503)

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 1
    assert "HTTP 503" in result.output


def test_crawl_timeout(cfg_file, monkeypatch):
    async def slow(cfg):
        await asyncio.sleep(2)
        return RunSummary()

    monkeypatch.setattr(cli_module, "start_crawl", slow)
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl", "--crawl-timeout", "0.2"])
    assert result.exit_code == 1
    assert "не завершён" in result.output


def test_bad_config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("max_concurrent_requests: nope\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(path), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_no_resolve_flag_overrides_config(tmp_path, fake_crawl):
    path = tmp_path / "config.yaml"
    path.write_text("resolve_distribution_urls: true\nshow_progress: false\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(path), "crawl", "--no-resolve-dist-urls"])
    assert result.exit_code == 0
    assert fake_crawl["config"].resolve_distribution_urls is False

    result = CliRunner().invoke(cli, ["--config", str(path), "crawl"])
    assert result.exit_code == 0
    assert fake_crawl["config"].resolve_distribution_urls is True


def test_crawl_output_under_a_file_is_reported(cfg_file, tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("", encoding="utf-8")

    result = CliRunner().invoke(
        cli, ["--config", str(cfg_file), "crawl", "--output", str(blocker / "sub" / "o.csv")]
    )

    assert result.exit_code == 1
    assert "Ошибка при обходе" in result.output
    assert isinstance(result.exception, SystemExit)


def test_crawl_unexpected_error_exits_1(cfg_file, monkeypatch):
    async def broken(cfg):
        raise NotADirectoryError(20, "Not a directory", str(cfg.output_path))

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 1
    assert "Not a directory" in result.output
