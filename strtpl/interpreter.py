"""
Интерпретатор скомпилированных шаблонов.

Один проход слева направо по последовательности выражений без возвратов.
Отсутствующие атрибуты и включения выводятся пустой строкой, рендеринг
не падает; единственное исключение составляет превышение глубины включений.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from .config import Settings, get_settings
from .context import Attributes, Context
from .errors import RecursionLimitExceeded
from .template.nodes import Attribute, AttributePath, CompiledTemplate, Expr, Include, Literal

if TYPE_CHECKING:
    from .group import Group

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Вычислитель шаблонов относительно группы.

    Не изменяет ни атрибуты, ни группу; результат является чистой функцией
    (шаблон, атрибуты, содержимое группы).
    """

    def __init__(self, group: Group, settings: Optional[Settings] = None):
        self.group = group
        self.settings = settings if settings is not None else get_settings()

    def render(self, template: CompiledTemplate, attributes: Attributes) -> str:
        """
        Рендерит шаблон.

        Raises:
            RecursionLimitExceeded: При слишком глубокой цепочке включений
        """
        return self._render(template, attributes, depth=0)

    def _render(self, template: CompiledTemplate, attributes: Attributes, depth: int) -> str:
        out: List[str] = []
        for expr in template.expressions:
            out.append(self._evaluate(expr, attributes, depth))
        return "".join(out)

    def _evaluate(self, expr: Expr, attributes: Attributes, depth: int) -> str:
        if isinstance(expr, Literal):
            return expr.text
        if isinstance(expr, Attribute):
            return self._lookup(attributes, expr.name).render()
        if isinstance(expr, AttributePath):
            return self._lookup(attributes, expr.name).navigate(expr.path).render()
        if isinstance(expr, Include):
            return self._include(expr, depth)
        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    @staticmethod
    def _lookup(attributes: Attributes, name: str) -> Context:
        context = attributes.get(name)
        return context if context is not None else Context.null()

    def _include(self, expr: Include, depth: int) -> str:
        """
        Рендерит включённый шаблон с его собственными пустыми атрибутами.

        Атрибуты текущего шаблона во включение не передаются.
        """
        included = self.group.get(expr.name)
        if included is None:
            level = logging.WARNING if self.settings.warn_missing_includes else logging.DEBUG
            logger.log(level, "Included template '%s' not found in group, rendering nothing", expr.name)
            return ""

        limit = self.settings.max_include_depth
        if limit is not None and depth + 1 > limit:
            raise RecursionLimitExceeded(expr.name, limit)

        return self._render(included.compiled, included.attributes, depth + 1)


__all__ = ["Interpreter"]
