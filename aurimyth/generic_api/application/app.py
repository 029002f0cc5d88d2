"""应用装配。

GenericApiApp 在 FastAPI 之上完成：配置加载、日志初始化、数据库生命周期、
请求日志中间件、异常处理器，以及按模型注册通用控制器。
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from aurimyth.generic_api.application.controller import GenericController
from aurimyth.generic_api.application.errors import register_exception_handlers
from aurimyth.generic_api.application.middleware import RequestLoggingMiddleware
from aurimyth.generic_api.common.exceptions import RegistrationError
from aurimyth.generic_api.common.logging import logger, setup_logging
from aurimyth.generic_api.config import BaseConfig
from aurimyth.generic_api.domain.mapper import IMapper, ObjectMapper
from aurimyth.generic_api.domain.repository import GenericRepository
from aurimyth.generic_api.domain.service import GenericService, check_model_types
from aurimyth.generic_api.infrastructure.database import DatabaseManager
from aurimyth.generic_api.schemas import ServiceResponse, ServiceResponseCode


def normalize_prefix(prefix: str) -> str:
    """规范化路由前缀：以 / 开头、不以 / 结尾，空前缀返回空字符串。"""
    stripped = prefix.strip("/")
    return f"/{stripped}" if stripped else ""


class GenericApiApp(FastAPI):
    """通用 CRUD 应用。

    使用示例:
        app = GenericApiApp()
        app.register(User, GetUserDto, AddUserDto, UpdateUserDto)

        # 自定义路由中的模型名称
        app.register(User, GetUserDto, AddUserDto, UpdateUserDto, model_name="Member")
    """

    def __init__(
        self,
        config: BaseConfig | None = None,
        *,
        database: DatabaseManager | None = None,
        mapper: IMapper | None = None,
        **kwargs: Any,
    ) -> None:
        """初始化应用。

        Args:
            config: 应用配置（可选，默认从环境变量加载）
            database: 数据库管理器（可选，默认按配置创建）
            mapper: 对象映射器（可选，默认 ObjectMapper）
            **kwargs: 传递给 FastAPI 的其他参数
        """
        if config is None:
            config = BaseConfig()
        self._config = config

        # 初始化日志（必须在其他操作之前）
        setup_logging(log_level=config.log.level, log_file=config.log.file)

        self._database = database or DatabaseManager(config.database)
        self._mapper = mapper or ObjectMapper()
        self._controllers: dict[str, GenericController] = {}

        kwargs.setdefault("title", config.api.title)
        kwargs.setdefault("version", config.api.version)
        super().__init__(lifespan=self._lifespan, **kwargs)

        self.add_middleware(RequestLoggingMiddleware)
        register_exception_handlers(self)

        if config.health_check.enabled:
            self.add_api_route(config.health_check.path, self.health, methods=["GET"], name="health")

        logger.info(f"应用初始化完成: {config.api.title}")

    @property
    def config(self) -> BaseConfig:
        return self._config

    @property
    def database(self) -> DatabaseManager:
        return self._database

    @property
    def controllers(self) -> dict[str, GenericController]:
        """已注册的控制器（按模型名称）。"""
        return dict(self._controllers)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncGenerator[None, None]:
        await self._database.initialize()
        if self._config.database.create_tables:
            await self._database.create_all()
        try:
            yield
        finally:
            await self._database.cleanup()

    def register(
        self,
        model: type,
        get_dto: type,
        add_dto: type,
        update_dto: type,
        *,
        model_name: str | None = None,
        mapper: IMapper | None = None,
    ) -> GenericController:
        """注册一个模型的全部 CRUD 路由。

        Args:
            model: ORM 模型类
            get_dto: 读取 DTO 类型
            add_dto: 新增 DTO 类型
            update_dto: 更新 DTO 类型
            model_name: 路由中的模型名称（默认模型类名）
            mapper: 该模型专用的映射器（默认使用应用级映射器）

        Returns:
            GenericController: 已挂载的控制器

        Raises:
            RegistrationError: 模型或 DTO 不满足约定，或模型名称重复
        """
        check_model_types(model, get_dto, add_dto, update_dto)
        name = model_name or model.__name__
        if name in self._controllers:
            raise RegistrationError(f"模型名称 {name} 已注册")

        database = self._database
        model_mapper = mapper or self._mapper

        async def service_dependency() -> AsyncGenerator[GenericService, None]:
            async with database.session() as session:
                yield GenericService(
                    GenericRepository(session, model),
                    get_dto=get_dto,
                    add_dto=add_dto,
                    update_dto=update_dto,
                    mapper=model_mapper,
                )

        controller = GenericController(
            service_dependency,
            model_name=name,
            get_dto=get_dto,
            add_dto=add_dto,
            update_dto=update_dto,
        )
        prefix = normalize_prefix(self._config.api.route_prefix)
        self.include_router(controller.router, prefix=prefix)
        self._controllers[name] = controller
        logger.info(f"注册模型路由: {prefix}/{name}")
        return controller

    async def health(self) -> JSONResponse:
        """健康检查端点。"""
        healthy = self._database.is_initialized and await self._database.health_check()
        response: ServiceResponse[dict[str, str]] = ServiceResponse(
            data={"database": "ok" if healthy else "unavailable"},
            response_code=ServiceResponseCode.DEFAULT if healthy else ServiceResponseCode.UNKNOWN_ERROR,
        )
        return GenericController.validate_response(response)


__all__ = [
    "GenericApiApp",
    "normalize_prefix",
]
