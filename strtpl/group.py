"""
Группы шаблонов и готовые к рендерингу шаблоны.

Group: общий реестр скомпилированных шаблонов. Все шаблоны, полученные
из одной группы, и все включения при их рендеринге видят одно и то же
содержимое реестра. Template: связка (группа, скомпилированный шаблон,
собственные атрибуты).
"""

from __future__ import annotations

import functools
import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .config import Settings
from .context import Attributes, Context
from .errors import NoSuchAttribute, SerializationError
from .interpreter import Interpreter
from .template.nodes import CompiledTemplate
from .template.parser import GroupBody, StaticGroupDeclaration, parse_static_group

logger = logging.getLogger(__name__)


class Group:
    """
    Реестр шаблонов: имя -> CompiledTemplate.

    Содержимое фиксируется при создании и далее только читается.
    """

    def __init__(self, templates: Optional[Mapping[str, CompiledTemplate]] = None):
        self._templates: Mapping[str, CompiledTemplate] = MappingProxyType(dict(templates or {}))

    @classmethod
    def from_body(cls, body: GroupBody) -> Group:
        return cls(body.templates)

    @property
    def templates(self) -> Mapping[str, CompiledTemplate]:
        """Только-для-чтения представление реестра."""
        return self._templates

    def get(self, name: str) -> Optional[Template]:
        """
        Возвращает новый шаблон с пустыми атрибутами или None, если имени нет.
        """
        compiled = self._templates.get(name)
        if compiled is None:
            return None
        return Template(compiled, group=self)

    def names(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __repr__(self) -> str:
        return f"Group({self.names()!r})"


class Template:
    """
    Шаблон, готовый к рендерингу.

    Атрибуты принадлежат только этому экземпляру; группа разделяется
    со всеми шаблонами, полученными из неё.
    """

    def __init__(self, compiled: CompiledTemplate, group: Optional[Group] = None):
        self.compiled = compiled
        self.group = group if group is not None else Group()
        self.attributes = Attributes()

    def add(self, name: str, value: Any) -> Template:
        """
        Добавляет значение атрибута.

        Повторные вызовы с тем же именем накапливают значения в порядке вызовов.
        Возвращает self, поэтому вызовы можно объединять в цепочку.

        Raises:
            NoSuchAttribute: Если шаблон объявляет формальные аргументы и имени среди них нет
            SerializationError: Если значение не сериализуется
        """
        if not self.compiled.accepts(name):
            raise NoSuchAttribute(name)
        self.attributes.insert(name, Context.wraps(value))
        return self

    def render(self, settings: Optional[Settings] = None) -> str:
        """Рендерит шаблон; отсутствующие атрибуты и включения дают пустую строку."""
        return Interpreter(self.group, settings).render(self.compiled, self.attributes)

    def to_context_data(self) -> Dict[str, Any]:
        """Представление шаблона как значения атрибута: дерево его атрибутов."""
        return self.attributes.to_data()

    def __repr__(self) -> str:
        return f"Template({self.compiled.source!r}, attributes={self.attributes!r})"


class StaticGroup:
    """
    Группа, объявленная текстом `[pub] static ref name { ... }`.

    Текст компилируется при первом обращении, ровно один раз даже при
    конкурентном доступе. Объявленные шаблоны доступны как методы:
    `group.a()` эквивалентно `group.get("a")`.
    """

    def __init__(self, source: str):
        self._source = source
        self._lock = threading.Lock()
        self._declaration: Optional[StaticGroupDeclaration] = None
        self._group: Optional[Group] = None

    def _ensure(self) -> Group:
        if self._group is None:
            with self._lock:
                if self._group is None:
                    declaration = parse_static_group(self._source)
                    self._declaration = declaration
                    self._group = Group.from_body(declaration.body)
                    logger.debug(
                        "Initialized static group '%s' with %d templates",
                        declaration.name, len(self._group),
                    )
        return self._group

    @property
    def group(self) -> Group:
        return self._ensure()

    @property
    def name(self) -> str:
        self._ensure()
        assert self._declaration is not None
        return self._declaration.name

    @property
    def public(self) -> bool:
        self._ensure()
        assert self._declaration is not None
        return self._declaration.public

    @property
    def initialized(self) -> bool:
        return self._group is not None

    def get(self, name: str) -> Optional[Template]:
        return self.group.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.group

    def to_context_data(self) -> Any:
        """
        Группа не может быть значением атрибута.

        Проверка протокола ContextConvertible находит этот метод без
        обращения к __getattr__, текст группы при этом не компилируется.

        Raises:
            SerializationError: Всегда
        """
        raise SerializationError(self)

    def __getattr__(self, item: str) -> Callable[[], Template]:
        if item.startswith("_"):
            raise AttributeError(item)
        group = self._ensure()
        if item not in group:
            raise AttributeError(f"static group has no template '{item}'")
        return functools.partial(_get_declared, group, item)

    def __repr__(self) -> str:
        if self._declaration is None:
            return "StaticGroup(<uninitialized>)"
        return f"StaticGroup({self._declaration.name!r}, {self.group.names()!r})"


def _get_declared(group: Group, name: str) -> Template:
    template = group.get(name)
    assert template is not None
    return template


__all__ = ["Group", "Template", "StaticGroup"]
