"""基础异常定义。

所有内部异常均继承自 GenericApiError。
这些异常不会直接跨越 HTTP 边界：运行时数据错误由服务层统一转换为
UnknownError 响应码，注册期错误在应用启动时直接抛出。
"""

from __future__ import annotations

from typing import Any


class GenericApiError(Exception):
    """异常基类。

    Attributes:
        message: 错误消息
        metadata: 元数据
    """

    default_message: str = "通用接口错误"

    def __init__(self, message: str | None = None, *args: object, metadata: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.metadata = metadata or {}
        super().__init__(self.message, *args)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} message={self.message}>"


class PropertyNotFoundError(GenericApiError):
    """对象的运行时类型上不存在指定名称的属性。"""

    default_message = "属性不存在"


class MissingValueError(GenericApiError):
    """属性存在，但其值为空（None）。"""

    default_message = "属性值为空"


class RegistrationError(GenericApiError):
    """注册模型或 DTO 时的配置错误（程序错误，应在启动时暴露）。"""

    default_message = "注册配置错误"


__all__ = [
    "GenericApiError",
    "MissingValueError",
    "PropertyNotFoundError",
    "RegistrationError",
]
