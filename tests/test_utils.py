"""按名称读取属性的工具函数测试。"""

from __future__ import annotations

import pytest

from aurimyth.generic_api.common import (
    MissingValueError,
    PropertyNotFoundError,
    get_property_value,
    resolve_property_name,
    to_snake_case,
)
from tests.conftest import AddTestModelDto, TestModel


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Id", "id"),
        ("UniqueName", "unique_name"),
        ("uniqueName", "unique_name"),
        ("unique_name", "unique_name"),
        ("HTTPStatus", "http_status"),
    ],
)
def test_to_snake_case(name: str, expected: str) -> None:
    assert to_snake_case(name) == expected


def test_get_property_value_returns_value() -> None:
    model = TestModel(id=1, name="TestModel1", unique_name="TestModel1")

    assert get_property_value(model, "Id", int) == 1
    assert get_property_value(model, "UniqueName", str) == "TestModel1"
    assert get_property_value(model, "name") == "TestModel1"


def test_get_property_value_reads_dto() -> None:
    dto = AddTestModelDto(name="x", unique_name="TestModel1")
    assert get_property_value(dto, "uniqueName", str) == "TestModel1"


def test_get_property_value_coerces() -> None:
    model = TestModel(id=7, name="42")
    assert get_property_value(model, "Id", str) == "7"
    assert get_property_value(model, "Name", int) == 42


def test_get_property_value_coercion_failure_propagates() -> None:
    model = TestModel(id=7, name="not a number")
    with pytest.raises(ValueError):
        get_property_value(model, "Name", int)


def test_get_property_value_raises_not_found() -> None:
    model = TestModel(id=1, name="TestModel1")
    with pytest.raises(PropertyNotFoundError, match="NotExisting"):
        get_property_value(model, "NotExisting", str)


def test_get_property_value_raises_on_null() -> None:
    model = TestModel(id=1, name="TestModel1")
    with pytest.raises(MissingValueError):
        get_property_value(model, "Nullable", str)


def test_instance_attributes_are_not_resolved() -> None:
    model = TestModel(id=1)
    model.extra = "value"
    with pytest.raises(PropertyNotFoundError):
        get_property_value(model, "extra")


def test_private_names_are_not_resolved() -> None:
    assert resolve_property_name(TestModel, "_sa_instance_state") is None
    assert resolve_property_name(TestModel, "Id") == "id"
    assert resolve_property_name(AddTestModelDto, "UniqueName") == "unique_name"


@pytest.mark.parametrize("name", ["copy", "model_dump", "Dict"])
def test_methods_are_not_resolved_on_dto(name: str) -> None:
    dto = AddTestModelDto(name="x", unique_name="u")
    with pytest.raises(PropertyNotFoundError):
        get_property_value(dto, name, str)


def test_methods_are_not_resolved_on_entity() -> None:
    model = TestModel(id=1, name="TestModel1")
    with pytest.raises(PropertyNotFoundError):
        get_property_value(model, "metadata")
    assert resolve_property_name(TestModel, "registry") is None


class PlainRecord:
    id: int
    label: str = ""

    def __init__(self, id: int, label: str) -> None:
        self.id = id
        self.label = label

    @property
    def display(self) -> str:
        return f"{self.id}:{self.label}"

    def describe(self) -> str:
        return self.display


def test_plain_class_fields_and_properties() -> None:
    record = PlainRecord(5, "five")

    assert get_property_value(record, "Id", int) == 5
    assert get_property_value(record, "Label") == "five"
    assert get_property_value(record, "Display") == "5:five"
    with pytest.raises(PropertyNotFoundError):
        get_property_value(record, "describe")
