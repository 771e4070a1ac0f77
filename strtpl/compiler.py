"""
Публичный API компиляции шаблонов.

Объединяет лексер, парсер и сканер тел в функции, возвращающие
готовые к использованию объекты: CompiledTemplate, Group, StaticGroup.
"""

from __future__ import annotations

import logging

from .group import Group, StaticGroup
from .template.nodes import CompiledTemplate
from .template.parser import parse_group_body
from .template.scanner import scan_body

logger = logging.getLogger(__name__)


def compile_template(source: str) -> CompiledTemplate:
    """
    Компилирует одиночный шаблон вне группы.

    Весь текст: тело шаблона; формальные аргументы не объявляются,
    поэтому шаблон принимает любые имена атрибутов.

    Raises:
        CompileError: При некорректном выражении <...>
    """
    return CompiledTemplate(source=source, expressions=scan_body(source), formal_args=None)


def compile_group(source: str) -> Group:
    """
    Компилирует тело группы: последовательность объявлений `name(args) ::= body`.

    Raises:
        CompileError: При нарушении грамматики группы
    """
    group = Group.from_body(parse_group_body(source))
    logger.debug("Compiled group with templates: %s", ", ".join(group.names()) or "<none>")
    return group


def compile_static_group(source: str) -> StaticGroup:
    """
    Компилирует статическое объявление группы `[pub] static ref name { ... }`.

    В отличие от StaticGroup(source), ошибки синтаксиса сообщаются сразу.

    Raises:
        CompileError: При нарушении грамматики
    """
    static_group = StaticGroup(source)
    static_group.group  # принудительная инициализация
    return static_group


__all__ = ["compile_template", "compile_group", "compile_static_group"]
