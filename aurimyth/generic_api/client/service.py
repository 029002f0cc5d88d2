"""通用客户端服务。

与服务端控制器的路由一一对应，把响应体反序列化为 ServiceResponse 后原样返回。
调用失败（网络错误、空响应体、非 JSON、结构不匹配）时返回本地构造的
NoApiResponse 响应，不向调用方抛出异常。
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from aurimyth.generic_api.common.logging import TRACE_ID_HEADER, LoggerMixin, get_trace_id, logger
from aurimyth.generic_api.config import ClientSettings
from aurimyth.generic_api.schemas import ServiceResponse, ServiceResponseCode

GetDtoType = TypeVar("GetDtoType", bound=BaseModel)
AddDtoType = TypeVar("AddDtoType", bound=BaseModel)
UpdateDtoType = TypeVar("UpdateDtoType", bound=BaseModel)


class GenericClient(LoggerMixin, Generic[GetDtoType, AddDtoType, UpdateDtoType]):
    """通用客户端服务（基于 httpx）。

    使用示例:
        async with httpx.AsyncClient(base_url="http://localhost:8000") as http_client:
            client = GenericClient(http_client, model_name="User", get_dto=GetUserDto)
            response = await client.get(1)
            if response.success:
                print(response.data)

        # 从配置创建（客户端自行管理连接）
        async with GenericClient.from_settings(ClientSettings(), "User", GetUserDto) as client:
            users = await client.get_all()
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        model_name: str,
        get_dto: type[GetDtoType],
        route_prefix: str = "api",
        owns_client: bool = False,
    ) -> None:
        """初始化客户端。

        Args:
            http_client: httpx 异步客户端（需已设置 base_url）
            model_name: 路由中的模型名称
            get_dto: 读取 DTO 类型
            route_prefix: 服务端路由前缀
            owns_client: 为 True 时 close() 会关闭 http_client
        """
        self._http_client = http_client
        self._model_name = model_name
        self._get_dto = get_dto
        self._owns_client = owns_client
        prefix = route_prefix.strip("/")
        self._base_path = f"{prefix}/{model_name}" if prefix else model_name
        self._list_response = ServiceResponse[list[get_dto]]
        self._item_response = ServiceResponse[get_dto]

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        model_name: str,
        get_dto: type[GetDtoType],
    ) -> GenericClient[GetDtoType, Any, Any]:
        """从配置创建客户端。

        Args:
            settings: 客户端配置
            model_name: 路由中的模型名称
            get_dto: 读取 DTO 类型

        Returns:
            GenericClient: 持有自己 http 连接的客户端
        """
        http_client = httpx.AsyncClient(base_url=settings.base_url, timeout=settings.timeout)
        logger.debug(f"创建客户端: base_url={settings.base_url}, model={model_name}")
        return cls(
            http_client,
            model_name=model_name,
            get_dto=get_dto,
            route_prefix=settings.route_prefix,
            owns_client=True,
        )

    @property
    def base_path(self) -> str:
        return self._base_path

    async def get_all(self) -> ServiceResponse[list[GetDtoType]]:
        """获取全部实体。

        Returns:
            ServiceResponse[list[GetDtoType]]: 服务端响应信封
        """
        return await self._call("GET", f"{self._base_path}/all", self._list_response)

    async def get(self, id: int) -> ServiceResponse[GetDtoType]:
        """按 ID 获取实体。

        Args:
            id: 实体 ID

        Returns:
            ServiceResponse[GetDtoType]: 服务端响应信封（不存在时为 NotFound）
        """
        return await self._call("GET", f"{self._base_path}/{id}", self._item_response)

    async def delete(self, id: int) -> ServiceResponse[list[GetDtoType]]:
        """按 ID 删除实体。

        Args:
            id: 实体 ID

        Returns:
            ServiceResponse[list[GetDtoType]]: 删除后剩余的实体列表
        """
        return await self._call("DELETE", f"{self._base_path}/{id}", self._list_response)

    async def add(self, add_dto: AddDtoType, unique_field: Optional[str] = None) -> ServiceResponse[GetDtoType]:
        """新增实体。

        Args:
            add_dto: 新增 DTO
            unique_field: 唯一性检查字段名（可选）

        Returns:
            ServiceResponse[GetDtoType]: 新增后的实体（重复时为 AlreadyExists）
        """
        path = self._base_path if unique_field is None else f"{self._base_path}/{unique_field}"
        return await self._call("POST", path, self._item_response, add_dto)

    async def update(
        self,
        update_dto: UpdateDtoType,
        id: int,
        unique_field: Optional[str] = None,
    ) -> ServiceResponse[GetDtoType]:
        """更新实体。

        Args:
            update_dto: 更新 DTO
            id: 实体 ID
            unique_field: 唯一性检查字段名（可选）

        Returns:
            ServiceResponse[GetDtoType]: 更新后的实体
        """
        path = f"{self._base_path}/{id}" if unique_field is None else f"{self._base_path}/{id}/{unique_field}"
        return await self._call("PUT", path, self._item_response, update_dto)

    async def _call(
        self,
        method: str,
        path: str,
        response_type: type[ServiceResponse[Any]],
        body: BaseModel | None = None,
    ) -> ServiceResponse[Any]:
        """发送请求并解析响应信封。"""
        payload = body.model_dump(mode="json", by_alias=True) if body is not None else None
        headers = {TRACE_ID_HEADER: get_trace_id()}
        self.logger.debug(f"请求: {method} {path}")
        try:
            response = await self._http_client.request(method, path, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            self.logger.warning(f"请求失败: {method} {path} | {type(exc).__name__}: {exc}")
            return self._no_api_response()

        return self._check_api_response(response, response_type)

    def _check_api_response(
        self,
        response: httpx.Response,
        response_type: type[ServiceResponse[Any]],
    ) -> ServiceResponse[Any]:
        if not response.content:
            self.logger.warning(f"空响应: {response.request.method} {response.request.url} | 状态: {response.status_code}")
            return self._no_api_response()
        try:
            parsed = response_type.model_validate_json(response.content)
        except ValidationError as exc:
            self.logger.warning(
                f"响应无法解析: {response.request.method} {response.request.url} | "
                f"状态: {response.status_code} | {exc.error_count()} 个错误"
            )
            return self._no_api_response()
        return parsed

    @staticmethod
    def _no_api_response() -> ServiceResponse[Any]:
        return ServiceResponse.fail(ServiceResponseCode.NO_API_RESPONSE)

    async def close(self) -> None:
        """关闭自己持有的 http 连接。"""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> GenericClient[GetDtoType, AddDtoType, UpdateDtoType]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        """字符串表示。"""
        return f"<{self.__class__.__name__} path={self._base_path}>"


__all__ = [
    "GenericClient",
]
