"""
Лексические типы.

Определяет типы токенов группы шаблонов и позиционную информацию
для точной диагностики ошибок.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple


class TokenType(enum.Enum):
    """Типы токенов в исходном тексте группы."""

    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"          # "...", r"...", r#"..."#, <<...>>

    LPAREN = "LPAREN"          # (
    RPAREN = "RPAREN"          # )
    LBRACE = "LBRACE"          # {
    RBRACE = "RBRACE"          # }
    COMMA = "COMMA"            # ,
    SEMICOLON = "SEMICOLON"    # ;
    PATH_SEP = "PATH_SEP"      # ::
    EQ = "EQ"                  # =

    # Любой другой одиночный символ пунктуации
    PUNCT = "PUNCT"

    EOF = "EOF"


# Парные разделители: открывающий -> закрывающий
DELIMITERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACE: TokenType.RBRACE,
}


@dataclass(frozen=True)
class Span:
    """
    Диапазон исходного текста.

    Строки нумеруются с 1, колонки считаются внутри строки с 0.
    Конец диапазона не включается.
    """
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @classmethod
    def join(cls, first: Span, last: Span) -> Span:
        """Объединяет два диапазона от начала first до конца last."""
        return cls(first.start_line, first.start_col, last.end_line, last.end_col)

    def __str__(self) -> str:
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией.

    Для строковых литералов value: уже раскодированное содержимое,
    offsets: индекс в исходном тексте для каждого символа value
    плюс индекс конца содержимого.
    """
    type: TokenType
    value: str
    span: Span
    offsets: Tuple[int, ...] = ()

    def describe(self) -> str:
        """Краткое описание токена для сообщений об ошибках."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING:
            return "string literal"
        return f"`{self.value}`"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.span})"


__all__ = ["TokenType", "DELIMITERS", "Span", "Token"]
