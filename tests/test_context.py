"""Тесты модели значений атрибутов: Context и Attributes."""

from dataclasses import dataclass
from enum import Enum

import pytest
from pydantic import BaseModel

from strtpl.context import OBJECT_PLACEHOLDER, Attributes, Context, render_value
from strtpl.errors import SerializationError
from tests.infrastructure.rendering_utils import parse_template


@dataclass
class Person:
    name: str


class User(BaseModel):
    id: int
    name: str


class Color(Enum):
    RED = "red"


class TestWraps:
    """Сериализация значений в дерево контекста."""

    @pytest.mark.parametrize("value, data", [
        (None, None),
        ("Ter", "Ter"),
        (1, 1),
        (1.5, 1.5),
        (True, True),
        (["a", "b"], ["a", "b"]),
        (("a", "b"), ["a", "b"]),
        ({"a": "b"}, {"a": "b"}),
        (Person(name="John"), {"name": "John"}),
        (User(id=1, name="John"), {"id": 1, "name": "John"}),
        (Color.RED, "red"),
    ])
    def test_wraps_host_values(self, value, data):
        """Значения Python переводятся в JSON-подобное дерево."""
        assert Context.wraps(value).data == data

    def test_unserializable_value(self):
        """Несериализуемое значение даёт SerializationError с причиной."""
        with pytest.raises(SerializationError) as exc_info:
            Context.wraps(object())

        assert exc_info.value.cause is not None

    def test_wraps_copies_context(self):
        """Обёртка над Context копирует данные, а не разделяет их."""
        original = Context.wraps(["a"])
        copy = Context.wraps(original)
        copy.concat(Context.wraps("b"))

        assert original.data == ["a"]


class TestNavigate:

    def test_navigate_map(self):
        """Путь спускается по вложенным словарям."""
        ctx = Context.wraps({"person": {"name": "John"}})

        assert ctx.navigate(["person", "name"]).data == "John"

    def test_missing_key_is_null(self):
        """Отсутствующий ключ даёт null."""
        assert Context.wraps({"a": "b"}).navigate(["x"]).is_null()

    def test_non_map_stops_navigation(self):
        """Спуск внутрь не-словаря даёт null."""
        assert Context.wraps({"a": "b"}).navigate(["a", "b"]).is_null()
        assert Context.wraps(["a"]).navigate(["0"]).is_null()

    def test_empty_path_returns_value(self):
        """Пустой путь возвращает само значение."""
        assert Context.wraps("x").navigate([]).data == "x"


class TestConcat:
    """Правила накопления значений."""

    def test_null_is_replaced(self):
        """null заменяется первым значением."""
        ctx = Context.null()
        ctx.concat(Context.wraps("Ter"))

        assert ctx.data == "Ter"

    def test_scalar_becomes_list(self):
        """Второе значение превращает скаляр в список."""
        ctx = Context.wraps("Ter")
        ctx.concat(Context.wraps("Tom"))

        assert ctx.data == ["Ter", "Tom"]

    def test_list_is_appended(self):
        """Значение дописывается в конец списка."""
        ctx = Context.wraps(["Ter", "Tom"])
        ctx.concat(Context.wraps("Sumana"))

        assert ctx.data == ["Ter", "Tom", "Sumana"]

    def test_map_becomes_list(self):
        """Словарь тоже превращается в список при накоплении."""
        ctx = Context.wraps({"a": 1})
        ctx.concat(Context.wraps(2))

        assert ctx.data == [{"a": 1}, 2]


class TestRender:
    """Вывод значений в текст."""

    @pytest.mark.parametrize("data, text", [
        (None, ""),
        ("Ter", "Ter"),
        (True, "true"),
        (False, "false"),
        (1, "1"),
        (1.5, "1.5"),
        (["Jeff", "John", "Carl"], "JeffJohnCarl"),
        (["Ter", ["Tom", 1]], "TerTom1"),
        ({"a": "b"}, OBJECT_PLACEHOLDER),
    ])
    def test_render_value(self, data, text):
        """Проекция каждого вида значения в текст."""
        assert render_value(data) == text

    @pytest.mark.parametrize("number, text", [
        (1e16, "1e16"),
        (1.5e-7, "1.5e-7"),
        (1e-6, "1e-6"),
        (1e-5, "0.00001"),
        (0.1, "0.1"),
        (100.0, "100.0"),
        (1e15, "1000000000000000.0"),
        (1.2345678901234568e17, "1.2345678901234568e17"),
        (-2.5, "-2.5"),
        (-0.0, "-0.0"),
        (float("nan"), ""),
        (float("inf"), ""),
    ])
    def test_render_float(self, number, text):
        """Дробные числа выводятся в JSON-записи без знака + в экспоненте."""
        assert render_value(number) == text

    def test_float_attribute_renders_in_json_notation(self):
        """NaN после сериализации становится null и выводится пустой строкой."""
        template = parse_template("<x>|<y>|<z>")
        template.add("x", 1e16).add("y", 0.1).add("z", float("nan"))

        assert template.render() == "1e16|0.1|"

    def test_str_renders(self):
        """str() совпадает с render()."""
        assert str(Context.wraps([1, None, "x"])) == "1x"

    def test_render_does_not_mutate(self):
        """Рендеринг не меняет данные."""
        ctx = Context.wraps(["a", "b"])
        ctx.render()

        assert ctx.data == ["a", "b"]


class TestAttributes:

    def test_insert_and_get(self):
        """Вставка и чтение атрибута по имени."""
        attributes = Attributes()
        attributes.insert("name", Context.wraps("World"))

        assert attributes.get("name") == Context.wraps("World")
        assert attributes.get("missing") is None
        assert "name" in attributes
        assert len(attributes) == 1

    def test_insert_accumulates(self):
        """Повторная вставка накапливает значения."""
        attributes = Attributes()
        attributes.insert("names", Context.wraps("Ter"))
        attributes.insert("names", Context.wraps("Tom"))

        assert attributes.to_data() == {"names": ["Ter", "Tom"]}
