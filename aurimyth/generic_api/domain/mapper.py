"""对象映射器。

在 ORM 模型与 DTO 之间逐字段复制数据：
- DTO -> 新模型（新增）
- DTO -> 已存在的模型（合并式更新，只覆盖两边共有的字段）
- 模型 -> DTO（读取）

只处理两边同名的字段，映射关系由模型和 DTO 的字段声明决定。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

D = TypeVar("D")


def _is_pydantic_class(cls: type) -> bool:
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _mapped_columns(cls: type) -> list[str] | None:
    """返回 SQLAlchemy 映射类的列属性名，非映射类返回 None。"""
    mapper = sa_inspect(cls, raiseerr=False)
    if mapper is None or not hasattr(mapper, "column_attrs"):
        return None
    return [attr.key for attr in mapper.column_attrs]


def field_names(cls: type) -> list[str]:
    """获取类声明的数据字段名。"""
    if _is_pydantic_class(cls):
        return list(cls.model_fields)
    columns = _mapped_columns(cls)
    if columns is not None:
        return columns
    annotations: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        annotations.update(getattr(klass, "__annotations__", {}))
    return [name for name in annotations if not name.startswith("_")]


def extract_fields(source: Any) -> dict[str, Any]:
    """读取对象的数据字段值。"""
    source_type = type(source)
    if _is_pydantic_class(source_type) or _mapped_columns(source_type) is not None:
        return {name: getattr(source, name) for name in field_names(source_type)}
    return {key: value for key, value in vars(source).items() if not key.startswith("_")}


class IMapper(ABC):
    """对象映射器接口。"""

    @abstractmethod
    def map(self, source: Any, destination_type: type[D]) -> D:
        """把 source 映射为 destination_type 的新实例。"""

    @abstractmethod
    def map_onto(self, source: Any, destination: D) -> D:
        """把 source 的字段合并到已存在的 destination 上。"""


class ObjectMapper(IMapper):
    """默认映射器。

    - pydantic 目标：按字段别名组装输入后调用 model_validate
    - SQLAlchemy 目标：以共有字段作为构造参数或逐个 setattr

    使用示例:
        mapper = ObjectMapper()
        entity = mapper.map(add_dto, User)
        mapper.map_onto(update_dto, entity)
        get_dto = mapper.map(entity, GetUserDto)
    """

    def map(self, source: Any, destination_type: type[D]) -> D:
        values = self._shared_values(source, destination_type)
        if _is_pydantic_class(destination_type):
            fields = destination_type.model_fields
            payload = {self._input_key(name, fields[name]): value for name, value in values.items()}
            return destination_type.model_validate(payload)
        return destination_type(**values)

    def map_onto(self, source: Any, destination: D) -> D:
        for name, value in self._shared_values(source, type(destination)).items():
            setattr(destination, name, value)
        return destination

    @staticmethod
    def _shared_values(source: Any, destination_type: type) -> dict[str, Any]:
        targets = set(field_names(destination_type))
        return {name: value for name, value in extract_fields(source).items() if name in targets}

    @staticmethod
    def _input_key(name: str, field_info: Any) -> str:
        alias = field_info.validation_alias
        if isinstance(alias, str):
            return alias
        return field_info.alias or name


__all__ = [
    "IMapper",
    "ObjectMapper",
    "extract_fields",
    "field_names",
]
