"""
Лексический анализатор исходного текста группы шаблонов.

Разбивает текст на идентификаторы, знаки пунктуации и литералы тел шаблонов.
Тела шаблонов раскодируются сразу (escape-последовательности, raw-строки),
а для каждого символа тела запоминается его позиция в исходнике, чтобы
ошибки внутри тела указывали на точное место в исходном тексте.
"""

from __future__ import annotations

import bisect
import re
from typing import List, Tuple

from .tokens import DELIMITERS, Span, Token, TokenType
from ..errors import CompileError


class SourceText:
    """Исходный текст с быстрым переводом индексов в (строка, колонка)."""

    def __init__(self, text: str):
        self.text = text
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def location(self, index: int) -> Tuple[int, int]:
        """Возвращает (строка с 1, колонка с 0) для индекса в тексте."""
        line_idx = bisect.bisect_right(self._line_starts, index) - 1
        return line_idx + 1, index - self._line_starts[line_idx]

    def span(self, start: int, end: int) -> Span:
        start_line, start_col = self.location(start)
        end_line, end_col = self.location(end)
        return Span(start_line, start_col, end_line, end_col)


class GroupLexer:
    """
    Лексер группы шаблонов.

    Поддерживаемые тела шаблонов:
    - "..." с escape-последовательностями (может занимать несколько строк)
    - r"..." и r#"..."# без обработки escape-последовательностей
    - <<...>>: тело заканчивается первым >> вне выражения <...>
    """

    _IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
    _RAW_START = re.compile(r'r(#*)"')
    _WHITESPACE = re.compile(r'\s+')
    _UNICODE_ESCAPE = re.compile(r'u\{([0-9A-Fa-f]{1,6})\}')

    _PUNCTUATION = {
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        '{': TokenType.LBRACE,
        '}': TokenType.RBRACE,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
        '=': TokenType.EQ,
    }

    _ESCAPES = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '0': '\0',
        '\\': '\\',
        '"': '"',
        "'": "'",
    }

    def __init__(self, text: str):
        self.text = text
        self.source = SourceText(text)
        self.position = 0
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь текст и возвращает список токенов с EOF в конце.

        Raises:
            CompileError: При незакрытых литералах или несбалансированных скобках
        """
        tokens: List[Token] = []
        open_stack: List[Token] = []

        while True:
            self._skip_trivia()
            if self.position >= self.length:
                break
            token = self._next_token()
            self._track_delimiter(token, open_stack)
            tokens.append(token)

        if open_stack:
            raise CompileError("unclosed delimiter", open_stack[-1].span, self.text)

        tokens.append(Token(TokenType.EOF, "", self.source.span(self.length, self.length)))
        return tokens

    def _track_delimiter(self, token: Token, open_stack: List[Token]) -> None:
        if token.type in DELIMITERS:
            open_stack.append(token)
        elif token.type in (TokenType.RPAREN, TokenType.RBRACE):
            if not open_stack or DELIMITERS[open_stack[-1].type] != token.type:
                raise CompileError("unexpected closing delimiter", token.span, self.text)
            open_stack.pop()

    def _skip_trivia(self) -> None:
        """Пропускает пробелы и комментарии // до конца строки."""
        while self.position < self.length:
            match = self._WHITESPACE.match(self.text, self.position)
            if match:
                self.position = match.end()
                continue
            if self.text.startswith("//", self.position):
                newline = self.text.find("\n", self.position)
                self.position = self.length if newline == -1 else newline
                continue
            break

    def _next_token(self) -> Token:
        start = self.position
        char = self.text[start]

        raw = self._RAW_START.match(self.text, start)
        if raw:
            return self._raw_string(len(raw.group(1)))

        match = self._IDENTIFIER.match(self.text, start)
        if match:
            self.position = match.end()
            return Token(TokenType.IDENTIFIER, match.group(0), self.source.span(start, self.position))

        if char == '"':
            return self._quoted_string()
        if self.text.startswith("<<", start):
            return self._angle_body()
        if self.text.startswith("::", start):
            self.position += 2
            return Token(TokenType.PATH_SEP, "::", self.source.span(start, self.position))

        self.position += 1
        token_type = self._PUNCTUATION.get(char, TokenType.PUNCT)
        return Token(token_type, char, self.source.span(start, self.position))

    def _quoted_string(self) -> Token:
        """Литерал "..." с escape-последовательностями."""
        start = self.position
        i = start + 1
        chars: List[str] = []
        offsets: List[int] = []

        while True:
            if i >= self.length:
                raise CompileError(
                    "unterminated string literal", self.source.span(start, self.length), self.text
                )
            char = self.text[i]
            if char == '"':
                break
            if char != '\\':
                chars.append(char)
                offsets.append(i)
                i += 1
                continue

            # escape-последовательность
            escape = self.text[i + 1] if i + 1 < self.length else ""
            if escape in self._ESCAPES:
                chars.append(self._ESCAPES[escape])
                offsets.append(i)
                i += 2
            elif escape == "\n":
                # продолжение строки: пропускаем перевод строки и ведущие пробелы
                i += 2
                while i < self.length and self.text[i] in " \t\r\n":
                    i += 1
            elif escape == "x" and re.fullmatch(r"[0-7][0-9A-Fa-f]", self.text[i + 2:i + 4]):
                chars.append(chr(int(self.text[i + 2:i + 4], 16)))
                offsets.append(i)
                i += 4
            elif escape == "u":
                match = self._UNICODE_ESCAPE.match(self.text, i + 1)
                if not match:
                    raise CompileError(
                        "invalid unicode character escape", self.source.span(i, i + 2), self.text
                    )
                code_point = int(match.group(1), 16)
                # Суррогаты и значения за пределами Unicode символами не являются
                if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
                    raise CompileError(
                        "invalid unicode character escape", self.source.span(i, match.end()), self.text
                    )
                chars.append(chr(code_point))
                offsets.append(i)
                i = match.end()
            else:
                raise CompileError(
                    "unknown character escape", self.source.span(i, min(i + 2, self.length)), self.text
                )

        offsets.append(i)
        self.position = i + 1
        return Token(
            TokenType.STRING, "".join(chars), self.source.span(start, self.position), tuple(offsets)
        )

    def _raw_string(self, hashes: int) -> Token:
        """Литерал r"..." / r#"..."# без обработки escape-последовательностей."""
        start = self.position
        content_start = start + 2 + hashes
        terminator = '"' + "#" * hashes
        content_end = self.text.find(terminator, content_start)
        if content_end == -1:
            raise CompileError(
                "unterminated raw string", self.source.span(start, self.length), self.text
            )
        self.position = content_end + len(terminator)
        return Token(
            TokenType.STRING,
            self.text[content_start:content_end],
            self.source.span(start, self.position),
            tuple(range(content_start, content_end + 1)),
        )

    def _angle_body(self) -> Token:
        """Тело <<...>>; символы > внутри выражений <...> тело не закрывают."""
        start = self.position
        content_start = start + 2
        i = content_start
        in_expression = False

        while True:
            if i >= self.length:
                raise CompileError(
                    "unterminated template body", self.source.span(start, start + 2), self.text
                )
            if not in_expression and self.text.startswith(">>", i):
                break
            char = self.text[i]
            if char == '<':
                in_expression = True
            elif char == '>':
                in_expression = False
            i += 1

        self.position = i + 2
        return Token(
            TokenType.STRING,
            self.text[content_start:i],
            self.source.span(start, self.position),
            tuple(range(content_start, i + 1)),
        )


def tokenize_group(text: str) -> List[Token]:
    """
    Удобная функция для токенизации группы.

    Raises:
        CompileError: При ошибке лексического анализа
    """
    return GroupLexer(text).tokenize()


__all__ = ["SourceText", "GroupLexer", "tokenize_group"]
