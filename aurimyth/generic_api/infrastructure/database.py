"""数据库管理器。

提供统一的数据库连接管理、会话创建和健康检查功能。
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from aurimyth.generic_api.config import DatabaseSettings
from aurimyth.generic_api.common.logging import log_exceptions, logger
from aurimyth.generic_api.domain.models import Base


class DatabaseManager:
    """数据库管理器。

    职责：
    1. 管理数据库引擎和连接池
    2. 提供会话工厂
    3. 健康检查
    4. 生命周期管理

    可以直接实例化（测试、多库场景），也可以通过 get_instance() 使用进程级默认实例。

    使用示例:
        db_manager = DatabaseManager(DatabaseSettings(url="sqlite+aiosqlite:///:memory:"))
        await db_manager.initialize()
        await db_manager.create_all()

        async with db_manager.session() as session:
            pass

        await db_manager.cleanup()
    """

    _instance: Optional[DatabaseManager] = None

    def __init__(self, config: DatabaseSettings | None = None) -> None:
        self._config = config or DatabaseSettings()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

    @classmethod
    def get_instance(cls) -> DatabaseManager:
        """获取进程级默认实例。"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def config(self) -> DatabaseSettings:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def engine(self) -> AsyncEngine:
        """获取数据库引擎。"""
        if self._engine is None:
            raise RuntimeError("数据库管理器未初始化，请先调用 initialize()")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """获取会话工厂。"""
        if self._session_factory is None:
            raise RuntimeError("数据库管理器未初始化，请先调用 initialize()")
        return self._session_factory

    def _engine_options(self) -> dict[str, Any]:
        """根据数据库类型组装引擎参数。

        SQLite 不支持连接池参数；内存库必须共享同一个连接，否则每个连接看到的都是空库。
        """
        url = make_url(self._config.url)
        options: dict[str, Any] = {"echo": self._config.echo}
        if url.get_backend_name() == "sqlite":
            if url.database in (None, "", ":memory:"):
                options["poolclass"] = StaticPool
                options["connect_args"] = {"check_same_thread": False}
            return options

        options.update(
            pool_pre_ping=True,
            pool_size=self._config.pool_size,
            max_overflow=self._config.max_overflow,
            pool_recycle=self._config.pool_recycle,
        )
        return options

    async def initialize(self) -> None:
        """初始化数据库连接（重复调用会被忽略）。"""
        if self._initialized:
            logger.warning("数据库管理器已初始化，跳过重复初始化")
            return

        self._engine = create_async_engine(self._config.url, **self._engine_options())
        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            autoflush=False,
            class_=AsyncSession,
        )

        self._initialized = True
        logger.info(f"数据库管理器初始化完成: {make_url(self._config.url).render_as_string(hide_password=True)}")

    @log_exceptions
    async def create_all(self) -> None:
        """按模型元数据建表（已存在的表不受影响）。"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"数据表已就绪: {', '.join(sorted(Base.metadata.tables)) or '-'}")

    async def health_check(self) -> bool:
        """健康检查。

        Returns:
            bool: 连接是否正常
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("数据库健康检查通过")
            return True
        except Exception as exc:
            logger.error(f"数据库健康检查失败: {exc}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """获取数据库会话（上下文管理器）。

        Yields:
            AsyncSession: 数据库会话

        使用示例:
            async with db_manager.session() as session:
                result = await session.execute(query)
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as exc:
            await session.rollback()
            logger.exception(f"数据库会话异常: {exc}")
            raise
        finally:
            await session.close()

    async def cleanup(self) -> None:
        """清理资源，关闭所有连接。"""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("数据库连接已关闭")

        self._engine = None
        self._session_factory = None
        self._initialized = False

    def __repr__(self) -> str:
        """字符串表示。"""
        status = "initialized" if self._initialized else "not initialized"
        return f"<DatabaseManager status={status}>"


__all__ = [
    "DatabaseManager",
]
