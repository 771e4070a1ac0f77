"""
Парсер групп шаблонов.

Преобразует последовательность токенов в набор скомпилированных шаблонов.
Поддерживает тело группы (последовательность объявлений) и статическое
объявление группы вида `pub static ref NAME { ... }`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from .lexer import GroupLexer, SourceText
from .nodes import CompiledTemplate
from .scanner import BodyScanner
from .tokens import DELIMITERS, Span, Token, TokenType
from ..errors import CompileError

logger = logging.getLogger(__name__)

# Ключевые слова, которые не могут быть именами шаблонов, групп и аргументов
RESERVED_WORDS = frozenset({
    "_", "abstract", "as", "async", "await", "become", "box", "break", "const",
    "continue", "crate", "do", "dyn", "else", "enum", "extern", "false", "final",
    "fn", "for", "if", "impl", "in", "let", "loop", "macro", "match", "mod",
    "move", "mut", "override", "priv", "pub", "ref", "return", "Self", "self",
    "static", "struct", "super", "trait", "true", "try", "type", "typeof",
    "unsafe", "unsized", "use", "virtual", "where", "while", "yield",
})


@dataclass(frozen=True)
class GroupBody:
    """Результат разбора тела группы: шаблоны в порядке объявления."""
    templates: Dict[str, CompiledTemplate] = field(default_factory=dict)


@dataclass(frozen=True)
class StaticGroupDeclaration:
    """Статическое объявление группы: `[pub] static ref name { ... }`."""
    name: str
    public: bool
    body: GroupBody


class GroupParser:
    """
    Рекурсивный парсер группы шаблонов.

    Ошибки сообщаются в формате "expected `X`" с диапазоном токена,
    на котором разбор остановился. Для открывающей скобки диапазон
    охватывает всю группу до парной закрывающей скобки.
    """

    def __init__(self, text: str):
        self.text = text
        self.source = SourceText(text)
        self.tokens: List[Token] = GroupLexer(text).tokenize()
        self.position = 0

    # ------------------------------------------------------------------ #
    # Точки входа
    # ------------------------------------------------------------------ #

    def parse_group_body(self) -> GroupBody:
        """
        Разбирает весь текст как тело группы.

        Raises:
            CompileError: При нарушении грамматики
        """
        body = self._parse_body_until(TokenType.EOF)
        self._consume(TokenType.EOF, "end of input")
        return body

    def parse_static_group(self) -> StaticGroupDeclaration:
        """
        Разбирает статическое объявление группы.

        Raises:
            CompileError: При нарушении грамматики
        """
        public = False
        if self._match_keyword("pub"):
            self._advance()
            public = True
        self._consume_keyword("static")
        self._consume_keyword("ref")
        name = self._consume_identifier().value
        self._consume(TokenType.LBRACE, "`{`")
        body = self._parse_body_until(TokenType.RBRACE)
        self._consume(TokenType.RBRACE, "`}`")
        self._consume(TokenType.EOF, "end of input")
        return StaticGroupDeclaration(name=name, public=public, body=body)

    # ------------------------------------------------------------------ #
    # Правила грамматики
    # ------------------------------------------------------------------ #

    def _parse_body_until(self, terminator: TokenType) -> GroupBody:
        templates: Dict[str, CompiledTemplate] = {}

        while not self._match(terminator):
            name_token = self._consume_identifier()
            if name_token.value in templates:
                raise CompileError(
                    f"duplicate template `{name_token.value}`", name_token.span, self.text
                )
            templates[name_token.value] = self._parse_template_decl()
            logger.debug("Parsed template '%s'", name_token.value)

            # Точка с запятой между объявлениями необязательна
            if self._match(TokenType.SEMICOLON):
                self._advance()

        return GroupBody(templates=templates)

    def _parse_template_decl(self) -> CompiledTemplate:
        """Разбирает `(args) ::= body` после имени шаблона."""
        formal_args = self._parse_formal_args()
        self._consume(TokenType.PATH_SEP, "`::`")
        self._consume(TokenType.EQ, "`=`")
        body_token = self._consume(TokenType.STRING, "string literal")
        expressions = BodyScanner(body_token.value, self.source, body_token.offsets).scan()
        return CompiledTemplate(
            source=body_token.value,
            expressions=expressions,
            formal_args=formal_args,
        )

    def _parse_formal_args(self) -> FrozenSet[str]:
        self._consume(TokenType.LPAREN, "parentheses")
        names: List[str] = []

        while not self._match(TokenType.RPAREN):
            names.append(self._consume_identifier().value)
            if self._match(TokenType.RPAREN):
                break
            self._consume(TokenType.COMMA, "`,`")

        self._advance()
        return frozenset(names)

    # ------------------------------------------------------------------ #
    # Навигация по токенам
    # ------------------------------------------------------------------ #

    def _current_token(self) -> Token:
        return self.tokens[self.position]

    def _advance(self) -> Token:
        token = self._current_token()
        if token.type != TokenType.EOF:
            self.position += 1
        return token

    def _match(self, token_type: TokenType) -> bool:
        return self._current_token().type == token_type

    def _match_keyword(self, keyword: str) -> bool:
        current = self._current_token()
        return current.type == TokenType.IDENTIFIER and current.value == keyword

    def _consume(self, expected: TokenType, description: str) -> Token:
        if not self._match(expected):
            raise self._unexpected(description)
        return self._advance()

    def _consume_identifier(self) -> Token:
        """Имя шаблона, группы или аргумента; ключевые слова именами не являются."""
        if self._match(TokenType.IDENTIFIER) and self._current_token().value in RESERVED_WORDS:
            raise CompileError("expected identifier", self._current_token().span, self.text)
        return self._consume(TokenType.IDENTIFIER, "identifier")

    def _consume_keyword(self, keyword: str) -> Token:
        if not self._match_keyword(keyword):
            raise self._unexpected(f"`{keyword}`")
        return self._advance()

    def _unexpected(self, description: str) -> CompileError:
        current = self._current_token()
        if current.type == TokenType.EOF:
            return CompileError(
                f"unexpected end of input, expected {description}", self._eof_span(), self.text
            )
        if description == "end of input":
            return CompileError(f"unexpected token {current.describe()}", self._token_span(), self.text)
        return CompileError(f"expected {description}", self._token_span(), self.text)

    def _token_span(self) -> Span:
        """Диапазон текущего токена; для открывающей скобки берётся вся скобочная группа."""
        current = self._current_token()
        if current.type not in DELIMITERS:
            return current.span

        closing = DELIMITERS[current.type]
        depth = 0
        for token in self.tokens[self.position:]:
            if token.type == current.type:
                depth += 1
            elif token.type == closing:
                depth -= 1
                if depth == 0:
                    return Span.join(current.span, token.span)
        return current.span

    def _eof_span(self) -> Span:
        """Для конца ввода указываем на последний значимый токен."""
        if self.position > 0:
            return self.tokens[self.position - 1].span
        return self.source.span(0, min(1, len(self.text)))


def parse_group_body(text: str) -> GroupBody:
    """
    Удобная функция для разбора тела группы.

    Raises:
        CompileError: При ошибке синтаксического анализа
    """
    return GroupParser(text).parse_group_body()


def parse_static_group(text: str) -> StaticGroupDeclaration:
    """
    Удобная функция для разбора статического объявления группы.

    Raises:
        CompileError: При ошибке синтаксического анализа
    """
    return GroupParser(text).parse_static_group()


__all__ = [
    "RESERVED_WORDS",
    "GroupBody",
    "StaticGroupDeclaration",
    "GroupParser",
    "parse_group_body",
    "parse_static_group",
]
