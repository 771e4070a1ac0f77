"""
Исключения шаблонизатора.

Все ожидаемые ошибки, о которых нужно сообщить пользователю чистым текстом
(без стектрейса), наследуются от StUserError.

Ошибки программирования НЕ наследуются от StUserError, они
пробрасываются с полным трейсбеком.
"""

from __future__ import annotations

from typing import Any, Optional

from .template.tokens import Span


class StUserError(Exception):
    """
    Базовый класс пользовательских ошибок шаблонизатора.

    Сигнализирует о проблемах, которые пользователь может исправить:
    синтаксис группы, имена атрибутов, значения, конфигурация.
    """
    pass


class CompileError(StUserError):
    """
    Нарушение грамматики шаблона или группы.

    Хранит позицию ошибки и исходный текст; str() возвращает
    отформатированную диагностику с маркерами под ошибочным фрагментом.
    """

    def __init__(self, message: str, span: Span, source: str):
        self.message = message
        self.span = span
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        # Импорт здесь: diagnostics зависит только от Span, но держим модуль ошибок лёгким
        from .diagnostics import format_diagnostic
        return format_diagnostic(self.span, self.message, self.source)

    def __repr__(self) -> str:
        return f"CompileError({self.message!r}, {self.span!r})"


class NoSuchAttribute(StUserError):
    """Атрибут не объявлен в списке формальных аргументов шаблона."""

    def __init__(self, name: str):
        super().__init__(f"no such attribute: {name}")
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoSuchAttribute) and other.name == self.name

    def __hash__(self) -> int:
        return hash(("NoSuchAttribute", self.name))


class SerializationError(StUserError):
    """Значение не удалось преобразовать в дерево контекста."""

    def __init__(self, value: Any, cause: Optional[Exception] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"cannot serialize value of type {type(value).__name__}{detail}")
        self.value = value
        self.cause = cause


class RecursionLimitExceeded(StUserError):
    """Цепочка включений шаблонов превысила допустимую глубину."""

    def __init__(self, template_name: str, depth: int):
        super().__init__(
            f"include depth limit {depth} exceeded while rendering '{template_name}'"
        )
        self.template_name = template_name
        self.depth = depth


class ConfigError(StUserError):
    """Некорректный файл настроек."""
    pass


__all__ = [
    "StUserError",
    "CompileError",
    "NoSuchAttribute",
    "SerializationError",
    "RecursionLimitExceeded",
    "ConfigError",
]
