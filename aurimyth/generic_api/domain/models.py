"""ORM 基类定义。"""

from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """纯净基类，不包含任何字段。"""


class IDMixin:
    """标准自增整数主键。

    通用服务按 "Id" 名称读取主键，所有接入的模型都必须提供该字段。
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, comment="主键")


__all__ = [
    "Base",
    "IDMixin",
]
