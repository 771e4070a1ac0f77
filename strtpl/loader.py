from __future__ import annotations

import logging
from pathlib import Path

from .compiler import compile_group
from .group import Group

logger = logging.getLogger(__name__)

GROUP_SUFFIX = ".stg"


def load_group(path: Path) -> Group:
    """
    Загружает группу шаблонов из файла (UTF-8).

    Raises:
        FileNotFoundError: Если файла нет
        CompileError: При ошибке синтаксиса; диагностика указывает на текст файла
    """
    text = path.read_text(encoding="utf-8")
    logger.debug("Loading template group from %s", path)
    return compile_group(text)


def load_groups(directory: Path) -> dict[str, Group]:
    """
    Загружает все файлы *.stg из каталога (без рекурсии).

    Ключ: имя файла без суффикса.
    """
    groups: dict[str, Group] = {}
    for path in sorted(directory.glob(f"*{GROUP_SUFFIX}")):
        groups[path.stem] = load_group(path)
    return groups


__all__ = ["GROUP_SUFFIX", "load_group", "load_groups"]
