"""
Сканер тела шаблона.

Разбирает уже раскодированное тело на литеральные фрагменты и выражения <...>.
Символ < всегда открывает выражение, которое длится до ближайшего >;
всё остальное копируется в литерал как есть.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from .lexer import SourceText
from .nodes import Attribute, AttributePath, Expr, Include, Literal, TemplateAST
from ..errors import CompileError


class BodyScanner:
    """
    Сканер одного тела шаблона.

    Позиции ошибок переводятся в координаты исходного текста через offsets:
    offsets[i]: индекс в source.text для i-го символа тела,
    offsets[len(body)]: индекс конца тела.
    """

    _IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
    _WHITESPACE = re.compile(r'\s*')

    def __init__(self, body: str, source: Optional[SourceText] = None, offsets: Optional[Sequence[int]] = None):
        self.body = body
        self.source = source if source is not None else SourceText(body)
        self.offsets = offsets if offsets is not None else range(len(body) + 1)
        self.length = len(body)

    def scan(self) -> TemplateAST:
        """
        Возвращает последовательность выражений тела.

        Raises:
            CompileError: При незавершённом или некорректном выражении
        """
        expressions: List[Expr] = []
        literal_start = 0
        position = 0

        while position < self.length:
            if self.body[position] != '<':
                position += 1
                continue

            if position > literal_start:
                expressions.append(Literal(self.body[literal_start:position]))

            close = self.body.find('>', position + 1)
            if close == -1:
                raise self._error("unfinished template expression", position, self.length)

            expressions.append(self._parse_expression(position + 1, close))
            position = close + 1
            literal_start = position

        if literal_start < self.length:
            expressions.append(Literal(self.body[literal_start:]))

        return tuple(expressions)

    def _parse_expression(self, start: int, end: int) -> Expr:
        """Разбирает содержимое body[start:end] между < и >."""
        position = self._skip_whitespace(start, end)
        name, position = self._identifier(position, end)
        position = self._skip_whitespace(position, end)

        if position < end and self.body[position] == '(':
            arg_names, position = self._include_args(position + 1, end)
            position = self._skip_whitespace(position, end)
            self._expect_end(position, end)
            return Include(name, arg_names)

        segments: List[str] = []
        while position < end and self.body[position] == '.':
            segment, position = self._identifier(self._skip_whitespace(position + 1, end), end)
            segments.append(segment)
            position = self._skip_whitespace(position, end)

        self._expect_end(position, end)
        if segments:
            return AttributePath(name, tuple(segments))
        return Attribute(name)

    def _include_args(self, position: int, end: int) -> Tuple[Tuple[str, ...], int]:
        """Разбирает список аргументов включения после '(' ; возвращает позицию за ')'."""
        names: List[str] = []
        position = self._skip_whitespace(position, end)
        if position < end and self.body[position] == ')':
            return (), position + 1

        while True:
            name, position = self._identifier(self._skip_whitespace(position, end), end)
            names.append(name)
            position = self._skip_whitespace(position, end)
            if position < end and self.body[position] == ',':
                position += 1
                continue
            if position < end and self.body[position] == ')':
                return tuple(names), position + 1
            if position >= end:
                raise self._error("expected `)`", end, end + 1)
            raise self._error("expected `,`", position, position + 1)

    def _identifier(self, position: int, end: int) -> Tuple[str, int]:
        match = self._IDENTIFIER.match(self.body, position, end)
        if not match:
            stop = min(position + 1, end) if position < end else end + 1
            raise self._error("expected identifier", position, stop)
        return match.group(0), match.end()

    def _skip_whitespace(self, position: int, end: int) -> int:
        return self._WHITESPACE.match(self.body, position, end).end()

    def _expect_end(self, position: int, end: int) -> None:
        if position < end:
            raise self._error(
                f"unexpected `{self.body[position]}` in template expression", position, position + 1
            )

    def _error(self, message: str, start: int, end: int) -> CompileError:
        end = min(end, self.length)
        start = min(start, end)
        span = self.source.span(self.offsets[start], self.offsets[end])
        return CompileError(message, span, self.source.text)


def scan_body(body: str, source: Optional[SourceText] = None, offsets: Optional[Sequence[int]] = None) -> TemplateAST:
    """
    Удобная функция для разбора тела шаблона.

    Raises:
        CompileError: При ошибке в выражении
    """
    return BodyScanner(body, source, offsets).scan()


__all__ = ["BodyScanner", "scan_body"]
