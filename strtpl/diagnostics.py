"""
Форматирование диагностики ошибок компиляции.

Рисует исходный текст до места ошибки и маркеры под ошибочным фрагментом:
- однострочный диапазон подчёркивается символами ^ с сообщением справа;
- многострочный диапазон отмечается ^ у начала, вертикальной линией |
  вдоль промежуточных строк и горизонтальной скобкой |---| у конца.

Формат точный и сравнивается в тестах посимвольно.
"""

from __future__ import annotations

from typing import Iterator, List

from .template.tokens import Span


def _lines(source: str) -> List[str]:
    """
    Делит текст на строки по \\n, отбрасывая \\r в конце строк.

    Завершающий перевод строки не порождает пустой строки.
    """
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _pad(line: str, width: int) -> str:
    return line.ljust(max(width, 0))


def format_single_line(span: Span, message: str, source: str) -> str:
    lines = _lines(source)[:span.start_line]
    marker = " " * span.start_col + "^" * (span.end_col - span.start_col)
    return "\n".join(lines) + "\n" + marker + " " + message


def format_multi_line(span: Span, message: str, source: str) -> str:
    start_line, start_col = span.start_line, span.start_col
    end_line, end_col = span.end_line, span.end_col
    width = max(end_col - start_col, 1)

    out: List[str] = []
    lines: Iterator[str] = iter(_lines(source))

    for idx, line in enumerate(lines, start=1):
        out.append(line + "\n")
        if idx >= start_line:
            break

    line_column = start_col + 1
    vertical_lines = end_line - start_line - 1

    # Стрелка ^ ставится на первую строку, не перекрывающую колонку начала;
    # более длинные строки выводятся как есть и сокращают вертикальную линию
    for arrow_line in lines:
        if len(arrow_line) > line_column:
            vertical_lines -= 1
            out.append(arrow_line + "\n")
            continue
        out.append(_pad(arrow_line, start_col) + "^\n")
        break

    for _ in range(max(vertical_lines, 0)):
        line = next(lines, None)
        if line is None:
            break
        bar = "" if len(line) > line_column else "|"
        out.append(_pad(line, start_col) + bar + "\n")

    before = max(end_col - 1, 0)
    after = max(start_col - end_col, 0)
    out.append(" " * before + "^" * width + " " * after + "|\n")
    out.append(" " * before + "|" + " " * (width - 1) + "-" * after + "| " + message)

    return "".join(out)


def format_diagnostic(span: Span, message: str, source: str) -> str:
    """
    Формирует текст диагностики для диапазона ошибки.

    Args:
        span: Диапазон ошибочного фрагмента (строки с 1, колонки с 0)
        message: Краткое сообщение, например "expected `ref`"
        source: Исходный текст, в котором найдена ошибка

    Returns:
        Многострочный текст с исходником и маркерами
    """
    if span.start_line == span.end_line and span.end_col > span.start_col:
        return format_single_line(span, message, source)
    return format_multi_line(span, message, source)


__all__ = ["format_diagnostic", "format_single_line", "format_multi_line"]
