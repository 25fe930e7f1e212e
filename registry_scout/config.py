# === FILE: registry_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера RegistryScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError

ErrorPolicy = Literal["collect", "fail_fast"]

DEFAULT_REGISTRY_URL = "https://pypi.org/simple/"


class CrawlerConfig(BaseModel):
    """Конфигурация одного запуска обхода реестра."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    registry_url: HttpUrl = Field(
        DEFAULT_REGISTRY_URL, description="URL плоского HTML-индекса реестра."
    )
    output_path: Path = Field(Path("output.csv"), description="CSV-файл с результатами.")
    max_concurrent_requests: int = Field(
        1000, ge=1, description="Потолок одновременных HTTP-запросов."
    )
    status_interval: float = Field(1.0, gt=0, description="Период обновления строки статуса (секунд).")
    launch_delay: float = Field(
        0.000001, ge=0, description="Пауза между запусками задач по пакетам (секунд)."
    )
    timeout: float = Field(60.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("RegistryScout/0.1", min_length=1, description="Заголовок User-Agent.")
    error_policy: ErrorPolicy = Field(
        "collect",
        description="collect - ошибки пакета собираются; fail_fast - первая ошибка прерывает обход.",
    )
    resolve_distribution_urls: bool = Field(
        False, description="Разрешать ссылки дистрибутивов относительно URL страницы пакета."
    )
    show_progress: bool = Field(True, description="Показывать строку прогресса.")


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути используется configs/default.yaml, а при его отсутствии - значения по умолчанию.
    Если явно указанный файл не существует, бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlerConfig(**data)


def override(config: CrawlerConfig, **changes: Any) -> CrawlerConfig:
    """Возвращает копию конфига с заменёнными значениями (None игнорируется) и перепроверкой."""
    updates = {key: value for key, value in changes.items() if value is not None}
    if not updates:
        return config
    return CrawlerConfig(**{**config.model_dump(mode="json"), **updates})


__all__ = [
    "CrawlerConfig",
    "DEFAULT_REGISTRY_URL",
    "ErrorPolicy",
    "ValidationError",
    "load_config",
    "override",
]
