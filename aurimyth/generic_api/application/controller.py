"""通用控制器。

把通用服务的每个操作注册为一个 HTTP 路由，并按响应信封的 success
标志决定 HTTP 状态码：成功 200，失败 400，两种情况都以信封作为响应体。

路由（model_name 在注册时确定）：
    GET    /{model_name}/all
    GET    /{model_name}/{id}
    DELETE /{model_name}/{id}
    POST   /{model_name}
    POST   /{model_name}/{unique_field}
    PUT    /{model_name}/{id}
    PUT    /{model_name}/{id}/{unique_field}
"""

# 路由参数注解必须是真实的 DTO 类型对象，本模块不能使用 `from __future__ import annotations`。

from collections.abc import Callable
from typing import Any, Generic

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from aurimyth.generic_api.common.logging import logger
from aurimyth.generic_api.domain.repository import ModelType
from aurimyth.generic_api.domain.service import AddDtoType, GetDtoType, IGenericService, UpdateDtoType
from aurimyth.generic_api.schemas import ServiceResponse


class GenericController(Generic[ModelType, GetDtoType, AddDtoType, UpdateDtoType]):
    """通用控制器。

    不包含任何业务逻辑，只负责路由分发和状态码转换。

    Attributes:
        router: 已注册全部路由的 APIRouter
        model_name: 路由中的模型名称

    使用示例:
        async def user_service():
            async with db.session() as session:
                yield GenericService(GenericRepository(session, User), ...)

        controller = GenericController(
            user_service,
            model_name="User",
            get_dto=GetUserDto,
            add_dto=AddUserDto,
            update_dto=UpdateUserDto,
        )
        app.include_router(controller.router, prefix="/api")
    """

    def __init__(
        self,
        service_dependency: Callable[..., Any],
        *,
        model_name: str,
        get_dto: type[GetDtoType],
        add_dto: type[AddDtoType],
        update_dto: type[UpdateDtoType],
        tags: list[str] | None = None,
    ) -> None:
        """初始化控制器。

        Args:
            service_dependency: 提供 IGenericService 的 FastAPI 依赖
            model_name: 路由中的模型名称
            get_dto: 读取 DTO 类型
            add_dto: 新增 DTO 类型
            update_dto: 更新 DTO 类型
            tags: OpenAPI 标签（默认使用模型名称）
        """
        self._service_dependency = service_dependency
        self._model_name = model_name
        self._get_dto = get_dto
        self._add_dto = add_dto
        self._update_dto = update_dto
        self._router = APIRouter(tags=tags or [model_name])
        self._register_routes()
        logger.debug(f"初始化 {self.__class__.__name__}[{model_name}]")

    @property
    def router(self) -> APIRouter:
        return self._router

    @property
    def model_name(self) -> str:
        return self._model_name

    @staticmethod
    def validate_response(response: ServiceResponse[Any]) -> JSONResponse:
        """按 success 标志转换为 HTTP 响应。"""
        status_code = status.HTTP_200_OK if response.success else status.HTTP_400_BAD_REQUEST
        return JSONResponse(status_code=status_code, content=response.to_wire())

    def _register_routes(self) -> None:
        router = self._router
        name = self._model_name
        base_path = f"/{name}"
        add_dto = self._add_dto
        update_dto = self._update_dto
        service_dependency = self._service_dependency
        validate = self.validate_response

        list_response = ServiceResponse[list[self._get_dto]]
        item_response = ServiceResponse[self._get_dto]
        list_responses = {status.HTTP_400_BAD_REQUEST: {"model": list_response}}
        item_responses = {status.HTTP_400_BAD_REQUEST: {"model": item_response}}

        # /all 必须先于 /{id} 注册
        @router.get(f"{base_path}/all", response_model=list_response, responses=list_responses, name=f"{name}.get_all")
        async def get_all(service: IGenericService = Depends(service_dependency)) -> JSONResponse:
            return validate(await service.get_all())

        @router.get(f"{base_path}/{{id}}", response_model=item_response, responses=item_responses, name=f"{name}.get")
        async def get(id: int, service: IGenericService = Depends(service_dependency)) -> JSONResponse:
            return validate(await service.get(id))

        @router.delete(
            f"{base_path}/{{id}}", response_model=list_response, responses=list_responses, name=f"{name}.delete"
        )
        async def delete(id: int, service: IGenericService = Depends(service_dependency)) -> JSONResponse:
            return validate(await service.delete(id))

        @router.post(base_path, response_model=item_response, responses=item_responses, name=f"{name}.add")
        async def add(dto: add_dto, service: IGenericService = Depends(service_dependency)) -> JSONResponse:
            return validate(await service.add(dto))

        @router.post(
            f"{base_path}/{{unique_field}}",
            response_model=item_response,
            responses=item_responses,
            name=f"{name}.add_unique",
        )
        async def add_unique(
            unique_field: str,
            dto: add_dto,
            service: IGenericService = Depends(service_dependency),
        ) -> JSONResponse:
            return validate(await service.add(dto, unique_field))

        @router.put(f"{base_path}/{{id}}", response_model=item_response, responses=item_responses, name=f"{name}.update")
        async def update(
            id: int,
            dto: update_dto,
            service: IGenericService = Depends(service_dependency),
        ) -> JSONResponse:
            return validate(await service.update(dto, id))

        @router.put(
            f"{base_path}/{{id}}/{{unique_field}}",
            response_model=item_response,
            responses=item_responses,
            name=f"{name}.update_unique",
        )
        async def update_unique(
            id: int,
            unique_field: str,
            dto: update_dto,
            service: IGenericService = Depends(service_dependency),
        ) -> JSONResponse:
            return validate(await service.update(dto, id, unique_field))


__all__ = [
    "GenericController",
]
