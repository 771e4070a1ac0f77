"""
AST-узлы шаблона.

Выражения образуют закрытую иерархию неизменяемых классов: интерпретатор
перебирает их исчерпывающе, новый вид выражения требует правки интерпретатора.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Expr:
    """Базовый класс для всех выражений шаблона."""
    pass


@dataclass(frozen=True)
class Literal(Expr):
    """
    Статический текст шаблона.

    Выводится в результат байт-в-байт, включая кавычки и скобки.
    """
    text: str


@dataclass(frozen=True)
class Attribute(Expr):
    """Ссылка на атрибут: <name>."""
    name: str


@dataclass(frozen=True)
class AttributePath(Expr):
    """Путь внутрь значения атрибута: <name.a.b>."""
    name: str
    path: Tuple[str, ...]


@dataclass(frozen=True)
class Include(Expr):
    """
    Включение другого шаблона группы: <name(a, b)>.

    Имена аргументов сохраняются синтаксически, но значения
    во включаемый шаблон не передаются.
    """
    name: str
    arg_names: Tuple[str, ...] = ()


# Последовательность выражений тела шаблона
TemplateAST = Tuple[Expr, ...]


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Скомпилированный шаблон.

    formal_args is None: шаблон принимает любые имена атрибутов;
    множество (в том числе пустое): только объявленные.
    """
    source: str = ""
    expressions: TemplateAST = ()
    formal_args: Optional[FrozenSet[str]] = None

    def accepts(self, name: str) -> bool:
        """Проверяет, можно ли задать атрибут с таким именем."""
        return self.formal_args is None or name in self.formal_args


__all__ = [
    "Expr",
    "Literal",
    "Attribute",
    "AttributePath",
    "Include",
    "TemplateAST",
    "CompiledTemplate",
]
