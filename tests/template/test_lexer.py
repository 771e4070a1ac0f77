"""
Тесты для лексического анализатора групп шаблонов.

Проверяет токенизацию:
- идентификаторов и пунктуации
- литералов тел шаблонов всех видов
- позиций токенов (строки с 1, колонки с 0)
- ошибок незакрытых литералов и скобок
"""

import pytest

from strtpl import compile_group
from strtpl.errors import CompileError
from strtpl.template.lexer import GroupLexer, SourceText, tokenize_group
from strtpl.template.tokens import Span, TokenType


def types_of(text):
    return [t.type for t in tokenize_group(text)]


class TestGroupLexer:
    """Базовая токенизация."""

    def test_empty_source(self):
        """Пустой текст даёт только EOF."""
        tokens = GroupLexer("").tokenize()

        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].span == Span(1, 0, 1, 0)

    def test_template_declaration(self):
        """Объявление шаблона разбивается на ожидаемые токены."""
        assert types_of('a(x, y) ::= "foo"') == [
            TokenType.IDENTIFIER,
            TokenType.LPAREN,
            TokenType.IDENTIFIER,
            TokenType.COMMA,
            TokenType.IDENTIFIER,
            TokenType.RPAREN,
            TokenType.PATH_SEP,
            TokenType.EQ,
            TokenType.STRING,
            TokenType.EOF,
        ]

    def test_token_positions(self):
        """Колонки считаются с нуля, строки с единицы."""
        tokens = tokenize_group('\nstatic bunny ref')

        assert tokens[0].value == "static"
        assert tokens[0].span == Span(2, 0, 2, 6)
        assert tokens[1].value == "bunny"
        assert tokens[1].span == Span(2, 7, 2, 12)

    def test_unknown_punctuation(self):
        """Неизвестные символы становятся одиночными PUNCT-токенами."""
        tokens = tokenize_group("a : b")

        assert tokens[1].type == TokenType.PUNCT
        assert tokens[1].value == ":"

    def test_line_comments_are_skipped(self):
        """Комментарии // игнорируются до конца строки."""
        assert types_of("// comment\na") == [TokenType.IDENTIFIER, TokenType.EOF]


class TestStringLiterals:
    """Литералы тел шаблонов."""

    def test_quoted_string(self):
        """Строка в кавычках даёт STRING с полным диапазоном."""
        token = tokenize_group('"Hello <name>!"')[0]

        assert token.type == TokenType.STRING
        assert token.value == "Hello <name>!"
        assert token.span == Span(1, 0, 1, 15)

    def test_escapes(self):
        """Escape-последовательности раскодируются."""
        token = tokenize_group(r'"a\"b\\c\nd\u{41}\x42"')[0]

        assert token.value == 'a"b\\c\ndAB'

    def test_line_continuation(self):
        """Обратный слэш в конце строки склеивает строки."""
        token = tokenize_group('"foo\\\n    bar"')[0]

        assert token.value == "foobar"

    def test_multi_line_string(self):
        """Строка может занимать несколько строк исходника."""
        token = tokenize_group('"\nfoo\n"')[0]

        assert token.value == "\nfoo\n"
        assert token.span == Span(1, 0, 3, 1)

    def test_raw_string(self):
        """Raw-строка с # допускает кавычки внутри."""
        token = tokenize_group('r#"bar "things" { () } () baz => "#')[0]

        assert token.type == TokenType.STRING
        assert token.value == 'bar "things" { () } () baz => '

    def test_raw_string_without_hashes(self):
        """Raw-строка не раскодирует escape-последовательности."""
        token = tokenize_group(r'r"a\nb"')[0]

        assert token.value == r"a\nb"

    def test_angle_body(self):
        """Тело <<...>> заканчивается первым >> вне выражения."""
        token = tokenize_group("<<Hello <name>>>")[0]

        assert token.type == TokenType.STRING
        assert token.value == "Hello <name>"

    def test_offsets_point_into_source(self):
        """Каждый символ тела знает свою позицию в исходнике."""
        text = 'x "a\\nb"'
        token = tokenize_group(text)[1]

        assert token.value == "a\nb"
        assert token.offsets == (3, 4, 6, 7)
        assert text[token.offsets[-1]] == '"'

    @pytest.mark.parametrize("text, message", [
        ('"foo', "unterminated string literal"),
        ('r#"foo"', "unterminated raw string"),
        ("<<foo", "unterminated template body"),
        (r'"\q"', "unknown character escape"),
        (r'"\u{110000}"', "invalid unicode character escape"),
        (r'"\u{D800}"', "invalid unicode character escape"),
        (r'"\u{dfff}"', "invalid unicode character escape"),
    ])
    def test_unterminated_literals(self, text, message):
        """Некорректные литералы дают CompileError с позицией, а не исключение Python."""
        with pytest.raises(CompileError) as exc_info:
            tokenize_group(text)

        assert exc_info.value.message == message

    def test_invalid_unicode_escape_span(self):
        """Диапазон ошибки охватывает всю escape-последовательность."""
        with pytest.raises(CompileError) as exc_info:
            compile_group('a() ::= "\\u{110000}"')

        assert exc_info.value.span == Span(1, 9, 1, 19)


class TestDelimiters:
    """Баланс скобок проверяется лексером."""

    def test_unclosed_delimiter(self):
        """Незакрытая скобка указывает на себя."""
        with pytest.raises(CompileError) as exc_info:
            tokenize_group("a(")

        assert exc_info.value.message == "unclosed delimiter"
        assert exc_info.value.span == Span(1, 1, 1, 2)

    def test_mismatched_closing_delimiter(self):
        """Закрывающая скобка без пары является ошибкой."""
        with pytest.raises(CompileError) as exc_info:
            tokenize_group("a(}")

        assert exc_info.value.message == "unexpected closing delimiter"


class TestSourceText:

    def test_location(self):
        """Индекс переводится в строку и колонку."""
        source = SourceText("ab\ncd\n")

        assert source.location(0) == (1, 0)
        assert source.location(2) == (1, 2)
        assert source.location(3) == (2, 0)
        assert source.location(6) == (3, 0)
