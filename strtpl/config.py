from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
DEFAULT_SETTINGS_FILE = "strtpl.yaml"


# --------------------------------------------------------------------------- #
# НАСТРОЙКИ
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class Settings:
    """
    Настройки рендеринга.

    max_include_depth: предельная глубина вложенных включений шаблонов;
    None снимает ограничение (остаётся только лимит рекурсии Python).
    warn_missing_includes: сообщать о ненайденных включениях уровнем WARNING
    вместо DEBUG. Сам рендеринг при этом не падает.
    """
    max_include_depth: Optional[int] = 64
    warn_missing_includes: bool = False


_DEFAULT_CFG: Dict[str, Any] = {
    "schema_version": SCHEMA_VERSION,
    "max_include_depth": Settings.max_include_depth,
    "warn_missing_includes": Settings.warn_missing_includes,
}

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")

_current = Settings()


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)
    return cfg


def _to_settings(cfg: Dict[str, Any], path: Path) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(cfg) - known - {"schema_version"})
    if unknown:
        raise ConfigError(f"{path}: unknown settings: {', '.join(unknown)}")

    depth = cfg["max_include_depth"]
    if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth < 1):
        raise ConfigError(f"{path}: max_include_depth must be a positive integer or null, got {depth!r}")

    warn = cfg["warn_missing_includes"]
    if not isinstance(warn, bool):
        raise ConfigError(f"{path}: warn_missing_includes must be boolean, got {warn!r}")

    return Settings(max_include_depth=depth, warn_missing_includes=warn)


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_settings(path: Path) -> Settings:
    """
    Загрузить strtpl.yaml.

    • Если файла нет: вернуть дефолты.
    • Если schema_version отсутствует: считаем, что это актуальная версия.
    • Неизвестные ключи и значения неверного типа: ConfigError.
    """
    if not path.exists():
        logger.debug("Settings file %s not found, using defaults", path)
        return Settings()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top-level mapping expected")

    if raw.get("schema_version", SCHEMA_VERSION) != SCHEMA_VERSION:
        raise ConfigError(
            f"{path}: unsupported settings schema {raw.get('schema_version')} "
            f"(expected {SCHEMA_VERSION})"
        )

    settings = _to_settings(_merge_defaults(raw), path)
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings


def configure(settings: Optional[Settings] = None, **overrides: Any) -> Settings:
    """
    Устанавливает настройки процесса.

    Можно передать готовый Settings и/или отдельные поля:
    configure(max_include_depth=10).
    """
    global _current
    base = settings if settings is not None else _current
    _current = replace(base, **overrides) if overrides else base
    return _current


def get_settings() -> Settings:
    """Текущие настройки процесса."""
    return _current


__all__ = [
    "SCHEMA_VERSION",
    "DEFAULT_SETTINGS_FILE",
    "Settings",
    "load_settings",
    "configure",
    "get_settings",
]
