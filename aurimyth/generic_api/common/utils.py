"""通用工具函数。

提供按名称读取对象属性的辅助函数，服务层通过它读取主键字段和唯一性字段。
"""

from __future__ import annotations

import re
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from .exceptions import MissingValueError, PropertyNotFoundError

T = TypeVar("T")

_MISSING = object()
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """把 PascalCase / camelCase 名称转换为 snake_case。

    示例:
        >>> to_snake_case("UniqueName")
        'unique_name'
        >>> to_snake_case("Id")
        'id'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def resolve_property_name(obj_type: type, property_name: str) -> str | None:
    """解析类型上实际声明的属性名。

    依次尝试原始名称和其 snake_case 形式。只识别类型声明的数据字段：
    pydantic 字段、SQLAlchemy 映射属性、类注解和 property。
    方法以及实例上临时挂载的属性都不会被识别。

    Args:
        obj_type: 目标类型
        property_name: 属性名称（允许 PascalCase / camelCase）

    Returns:
        str | None: 实际属性名，不存在时返回 None
    """
    for candidate in dict.fromkeys((property_name, to_snake_case(property_name))):
        if candidate.startswith("_"):
            continue
        if _is_declared_field(obj_type, candidate):
            return candidate
    return None


def _is_declared_field(obj_type: type, name: str) -> bool:
    """判断名称是否为类型声明的数据字段（方法等可调用属性不算）。"""
    if isinstance(obj_type, type) and issubclass(obj_type, BaseModel):
        return name in obj_type.model_fields

    mapper = sa_inspect(obj_type, raiseerr=False)
    if mapper is not None and hasattr(mapper, "attrs"):
        return name in mapper.attrs

    for klass in obj_type.__mro__:
        if name in getattr(klass, "__annotations__", {}):
            return True
        if name in vars(klass):
            return isinstance(vars(klass)[name], property)
    return False


def get_property_value(obj: Any, property_name: str, expected_type: type[T] | None = None) -> T:
    """按名称读取对象属性值。

    Args:
        obj: 目标对象（ORM 实体或 DTO）
        property_name: 属性名称
        expected_type: 期望类型，值不是该类型时尝试转换

    Returns:
        属性值

    Raises:
        PropertyNotFoundError: 对象类型上不存在该属性
        MissingValueError: 属性值为 None
    """
    name = resolve_property_name(type(obj), property_name)
    if name is None:
        raise PropertyNotFoundError(f'{type(obj).__name__} 没有属性 "{property_name}"')

    value = getattr(obj, name, _MISSING)
    if value is _MISSING:
        raise PropertyNotFoundError(f'{type(obj).__name__} 没有属性 "{property_name}"')
    if value is None:
        raise MissingValueError(f"{type(obj).__name__}.{property_name} 的值为空")

    if expected_type is None or isinstance(value, expected_type):
        return value
    return expected_type(value)


__all__ = [
    "get_property_value",
    "resolve_property_name",
    "to_snake_case",
]
