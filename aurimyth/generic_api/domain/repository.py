"""Repository 抽象基类和实现。

Repository 是通用服务依赖的数据存储抽象，只提供四类操作：
读取全部实体、添加、删除、提交变更。查找逻辑由服务层完成。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from aurimyth.generic_api.common.logging import logger
from aurimyth.generic_api.domain.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class IRepository(ABC, Generic[ModelType]):
    """Repository 接口定义。"""

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """模型类。"""

    @abstractmethod
    async def list_all(self) -> list[ModelType]:
        """获取全部实体。"""

    @abstractmethod
    async def add(self, entity: ModelType) -> ModelType:
        """添加实体（提交前不生效）。"""

    @abstractmethod
    async def remove(self, entity: ModelType) -> None:
        """删除实体（提交前不生效）。"""

    @abstractmethod
    async def commit(self) -> None:
        """提交变更。"""

    @abstractmethod
    async def refresh(self, entity: ModelType) -> ModelType:
        """从存储重新加载实体。"""

    @abstractmethod
    async def rollback(self) -> None:
        """回滚未提交的变更。"""


class GenericRepository(IRepository[ModelType]):
    """基于 SQLAlchemy AsyncSession 的 Repository 实现。

    与事务相关的约定：
    - add / remove 只登记变更，不执行 flush
    - commit 由服务层在一次操作结束时调用

    Attributes:
        session: 数据库会话
        model_class: 模型类
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelType]) -> None:
        """初始化 Repository。

        Args:
            session: 数据库会话
            model_class: 模型类
        """
        self._session = session
        self._model_class = model_class
        logger.debug(f"初始化 {self.__class__.__name__}[{model_class.__name__}]")

    @property
    def session(self) -> AsyncSession:
        """获取数据库会话。"""
        return self._session

    @property
    def model_class(self) -> type[ModelType]:
        """获取模型类。"""
        return self._model_class

    async def list_all(self) -> list[ModelType]:
        """获取全部实体，按主键排序。

        Returns:
            list[ModelType]: 实体列表
        """
        primary_key = inspect(self._model_class).primary_key
        query = select(self._model_class).order_by(*primary_key)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def add(self, entity: ModelType) -> ModelType:
        """把实体加入会话（不提交）。

        Args:
            entity: 新实体

        Returns:
            ModelType: 同一实体
        """
        self._session.add(entity)
        logger.debug(f"添加实体: {entity}")
        return entity

    async def remove(self, entity: ModelType) -> None:
        """从会话中标记删除实体（不提交）。

        Args:
            entity: 已持久化的实体
        """
        await self._session.delete(entity)
        logger.debug(f"删除实体: {entity}")

    async def commit(self) -> None:
        """提交当前会话中的全部变更。"""
        await self._session.commit()

    async def refresh(self, entity: ModelType) -> ModelType:
        """从数据库重新加载实体。

        Args:
            entity: 已持久化的实体

        Returns:
            ModelType: 刷新后的同一实体
        """
        await self._session.refresh(entity)
        return entity

    async def rollback(self) -> None:
        """回滚当前会话中未提交的变更。"""
        await self._session.rollback()

    def __repr__(self) -> str:
        """字符串表示。"""
        return f"<{self.__class__.__name__} model={self._model_class.__name__}>"


__all__ = [
    "GenericRepository",
    "IRepository",
    "ModelType",
]
