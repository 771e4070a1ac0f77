"""
Модель значений атрибутов.

Context: дерево значений в духе JSON (null, строка, булево, число, список,
словарь), в которое сериализуется любое значение, переданное в Template.add().
Повторное присваивание атрибута не перезаписывает значение, а накапливает
его в список (concat).
"""

from __future__ import annotations

import copy
import decimal
import json
import math
from typing import Any, Dict, Iterator, Optional, Protocol, Sequence, Tuple, runtime_checkable

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from .errors import SerializationError

# Заглушка, которой отображается словарь при выводе
OBJECT_PLACEHOLDER = "[object]"

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


@runtime_checkable
class ContextConvertible(Protocol):
    """
    Протокол для значений, которые сами знают своё представление в контексте.

    Используется, например, шаблоном, переданным как значение атрибута:
    он отдаёт дерево своих атрибутов.
    """

    def to_context_data(self) -> Any:
        ...


def _format_float(value: float) -> str:
    """
    Кратчайшая запись числа с плавающей точкой в стиле JSON-сериализатора.

    Целые значения получают суффикс .0, экспонента пишется без знака +
    и ведущих нулей (1e16, 1.5e-7); в диапазоне [1e-5, 1e16) запись
    всегда десятичная. NaN и бесконечности в JSON становятся null.
    """
    if not math.isfinite(value):
        return ""
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return f"{sign}0.0"

    _, digit_tuple, exponent = decimal.Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    # 10 ** (point - 1) <= |value| < 10 ** point
    point = len(digits) + exponent

    if exponent >= 0 and point <= 16:
        text = digits + "0" * exponent + ".0"
    elif 0 < point <= 16:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -5 < point <= 0:
        text = "0." + "0" * -point + digits
    elif len(digits) == 1:
        text = f"{digits}e{point - 1}"
    else:
        text = f"{digits[0]}.{digits[1:]}e{point - 1}"
    return sign + text


def render_value(data: Any) -> str:
    """
    Проекция значения в текст для вывода.

    Строка выводится как есть, null пустой строкой, список конкатенацией
    элементов без разделителя, словарь заглушкой [object].
    """
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    if isinstance(data, float):
        return _format_float(data)
    if isinstance(data, (bool, int)):
        return json.dumps(data)
    if isinstance(data, list):
        return "".join(render_value(item) for item in data)
    if isinstance(data, dict):
        return OBJECT_PLACEHOLDER
    raise TypeError(f"Unexpected context node type: {type(data).__name__}")


class Context:
    """Значение одного атрибута (возможно накопленное)."""

    __slots__ = ("data",)

    def __init__(self, data: Any = None):
        self.data = data

    @classmethod
    def null(cls) -> Context:
        return cls(None)

    @classmethod
    def wraps(cls, value: Any) -> Context:
        """
        Сериализует произвольное значение в дерево контекста.

        Поддерживаются всё, что умеет pydantic в режиме JSON: словари, списки,
        кортежи, множества, dataclass-ы, pydantic-модели, перечисления, даты;
        а также объекты с протоколом ContextConvertible.

        Raises:
            SerializationError: Если значение не сериализуется
        """
        if isinstance(value, Context):
            return cls(copy.deepcopy(value.data))
        if isinstance(value, ContextConvertible):
            value = value.to_context_data()
        try:
            data = _ANY_ADAPTER.dump_python(value, mode="json")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationError(value, e) from e
        return cls(data)

    def navigate(self, path: Sequence[str]) -> Context:
        """
        Спускается по пути внутрь словарей.

        Отсутствующий ключ даёт null; если по пути встретилось
        не-словарное значение, результатом будет null. Никогда не падает.
        """
        node = self.data
        for segment in path:
            if not isinstance(node, dict):
                return Context.null()
            node = node.get(segment)
        return Context(copy.deepcopy(node))

    def concat(self, other: Context) -> None:
        """
        Накапливает новое значение.

        - null заменяется новым значением;
        - к списку новое значение добавляется последним элементом;
        - скаляр или словарь превращается в список [старое, новое].
        """
        if self.data is None:
            self.data = other.data
        elif isinstance(self.data, list):
            self.data.append(other.data)
        else:
            self.data = [self.data, other.data]

    def is_null(self) -> bool:
        return self.data is None

    def render(self) -> str:
        return render_value(self.data)

    def __str__(self) -> str:
        return self.render()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Context) and other.data == self.data

    def __repr__(self) -> str:
        return f"Context({self.data!r})"


class Attributes:
    """
    Набор атрибутов одного шаблона: имя -> Context.

    Каждый экземпляр Template владеет своим Attributes эксклюзивно.
    """

    def __init__(self):
        self._values: Dict[str, Context] = {}

    def insert(self, name: str, context: Context) -> None:
        """Добавляет значение, накапливая его к уже существующему."""
        existing = self._values.get(name)
        if existing is None:
            self._values[name] = context
        else:
            existing.concat(context)

    def get(self, name: str) -> Optional[Context]:
        return self._values.get(name)

    def items(self) -> Iterator[Tuple[str, Context]]:
        return iter(self._values.items())

    def to_data(self) -> Dict[str, Any]:
        """Дерево всех атрибутов в виде словаря."""
        return {name: copy.deepcopy(ctx.data) for name, ctx in self._values.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"Attributes({self.to_data()!r})"


__all__ = [
    "OBJECT_PLACEHOLDER",
    "ContextConvertible",
    "render_value",
    "Context",
    "Attributes",
]
