"""
Компилятор шаблонов: лексер группы, парсер объявлений и сканер тел.

Модуль намеренно не импортирует подмодули, зависящие от strtpl.errors,
чтобы errors мог ссылаться на tokens без циклического импорта.
"""

from __future__ import annotations

from .nodes import Attribute, AttributePath, CompiledTemplate, Expr, Include, Literal, TemplateAST
from .tokens import Span, Token, TokenType

__all__ = [
    "Expr",
    "Literal",
    "Attribute",
    "AttributePath",
    "Include",
    "TemplateAST",
    "CompiledTemplate",
    "Span",
    "Token",
    "TokenType",
]
