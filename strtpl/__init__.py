"""
strtpl: небольшой язык строковых шаблонов.

Текст с литералами и выражениями <...> компилируется в последовательность
выражений и рендерится по набору именованных атрибутов. Шаблоны объединяются
в группы, где один шаблон может включать другой по имени.
"""

from __future__ import annotations

from .compiler import compile_group, compile_static_group, compile_template
from .config import Settings, configure, get_settings, load_settings
from .context import Attributes, Context
from .errors import (
    CompileError,
    ConfigError,
    NoSuchAttribute,
    RecursionLimitExceeded,
    SerializationError,
    StUserError,
)
from .group import Group, StaticGroup, Template
from .loader import load_group, load_groups
from .template.nodes import Attribute, AttributePath, CompiledTemplate, Expr, Include, Literal
from .version import tool_version

__version__ = tool_version()

__all__ = [
    "compile_template",
    "compile_group",
    "compile_static_group",
    "Group",
    "StaticGroup",
    "Template",
    "CompiledTemplate",
    "Expr",
    "Literal",
    "Attribute",
    "AttributePath",
    "Include",
    "Context",
    "Attributes",
    "Settings",
    "configure",
    "get_settings",
    "load_settings",
    "load_group",
    "load_groups",
    "StUserError",
    "CompileError",
    "NoSuchAttribute",
    "SerializationError",
    "RecursionLimitExceeded",
    "ConfigError",
]
