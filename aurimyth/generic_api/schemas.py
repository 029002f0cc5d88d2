"""统一响应模型。

提供所有接口共用的响应信封和响应码。

响应信封的 JSON 形状固定为::

    {"data": T | null, "responseCode": "<响应码名称>", "responseMessage": "..."}

响应码按名称（而非序号）序列化，名称拼写属于线上协议的一部分，不可修改。
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# 泛型类型变量
T = TypeVar("T")

# 序号小于该阈值的响应码表示成功
SUCCESS_THRESHOLD = 5


class ServiceResponseCode(IntEnum):
    """响应码枚举。

    0-4 为成功，5-8 为失败。新增响应码必须保持这一分界，
    否则 ServiceResponse.success 的推导会失效。
    """

    DEFAULT = 0
    GET_SUCCESS = 1
    ADD_SUCCESS = 2
    UPDATE_SUCCESS = 3
    DELETE_SUCCESS = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    UNKNOWN_ERROR = 7
    NO_API_RESPONSE = 8  # 仅客户端使用

    @property
    def wire_name(self) -> str:
        """线上协议中的名称，如 GET_SUCCESS -> GetSuccess。"""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def is_success(self) -> bool:
        """是否为成功响应码。"""
        return self.value < SUCCESS_THRESHOLD

    @classmethod
    def parse(cls, value: Any) -> ServiceResponseCode:
        """从线上名称、成员名称或序号解析响应码。

        Args:
            value: 响应码的名称或序号

        Returns:
            ServiceResponseCode: 响应码

        Raises:
            ValueError: 无法识别的响应码
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value in (member.wire_name, member.name):
                    return member
            if value.isdigit():
                return cls(int(value))
            raise ValueError(f"未知的响应码: {value!r}")
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"未知的响应码: {value!r}")


class ServiceResponse(BaseModel, Generic[T]):
    """响应信封。

    所有 CRUD 操作的统一返回格式，无论成功还是失败。

    Attributes:
        data: 响应数据（失败时为 None）
        response_code: 响应码
        response_message: 响应消息（失败时可能包含原始异常信息，展示前需自行处理）
    """

    model_config = ConfigDict(populate_by_name=True)

    data: Optional[T] = Field(default=None, description="响应数据")
    response_code: ServiceResponseCode = Field(
        default=ServiceResponseCode.DEFAULT,
        alias="responseCode",
        description="响应码",
    )
    response_message: str = Field(default="", alias="responseMessage", description="响应消息")

    @field_validator("response_code", mode="before")
    @classmethod
    def parse_response_code(cls, value: Any) -> ServiceResponseCode:
        return ServiceResponseCode.parse(value)

    @field_validator("response_message", mode="before")
    @classmethod
    def default_response_message(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_serializer("response_code")
    def serialize_response_code(self, code: ServiceResponseCode) -> str:
        return code.wire_name

    @property
    def success(self) -> bool:
        """是否成功（由响应码推导）。"""
        return self.response_code.is_success

    @classmethod
    def fail(cls, code: ServiceResponseCode, message: str = "") -> ServiceResponse[T]:
        """创建不带数据的响应。"""
        return cls(response_code=code, response_message=message)

    def to_wire(self) -> dict[str, Any]:
        """转换为线上 JSON 字典（按别名输出）。"""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "SUCCESS_THRESHOLD",
    "ServiceResponse",
    "ServiceResponseCode",
]
