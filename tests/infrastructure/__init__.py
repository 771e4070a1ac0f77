"""
Общая тестовая инфраструктура strtpl.

Модули:
- file_utils: создание файлов групп и настроек
- rendering_utils: компиляция и рендеринг шаблонов
"""

from .file_utils import write, write_group
from .rendering_utils import parse_template, parse_group, get_template, render_template, error_message

__all__ = [
    "write",
    "write_group",
    "parse_template",
    "parse_group",
    "get_template",
    "render_template",
    "error_message",
]
