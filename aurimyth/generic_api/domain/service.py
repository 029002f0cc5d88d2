"""通用 CRUD 服务。

一个实现服务所有 "模型 + 三种 DTO" 组合：
- GetDto：读取形状
- AddDto：新增输入形状
- UpdateDto：更新输入形状

所有操作都返回 ServiceResponse，不向调用方抛出异常。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from aurimyth.generic_api.common.exceptions import RegistrationError
from aurimyth.generic_api.common.logging import LoggerMixin, logger
from aurimyth.generic_api.common.utils import get_property_value, resolve_property_name
from aurimyth.generic_api.domain.mapper import IMapper, ObjectMapper
from aurimyth.generic_api.domain.repository import IRepository, ModelType
from aurimyth.generic_api.schemas import ServiceResponse, ServiceResponseCode

GetDtoType = TypeVar("GetDtoType", bound=BaseModel)
AddDtoType = TypeVar("AddDtoType", bound=BaseModel)
UpdateDtoType = TypeVar("UpdateDtoType", bound=BaseModel)

# 主键属性名（按名称读取）
ID_PROPERTY = "Id"


def check_model_types(model: type, get_dto: type, add_dto: type, update_dto: type) -> None:
    """注册时校验模型与 DTO 类型。

    Raises:
        RegistrationError: 模型没有主键字段，或 DTO 不是 pydantic 模型
    """
    if resolve_property_name(model, ID_PROPERTY) is None:
        raise RegistrationError(f'模型 {model.__name__} 没有 "{ID_PROPERTY}" 字段，请继承 IDMixin')
    for role, dto in (("get_dto", get_dto), ("add_dto", add_dto), ("update_dto", update_dto)):
        if not (isinstance(dto, type) and issubclass(dto, BaseModel)):
            raise RegistrationError(f"{role} 必须是 pydantic BaseModel 子类，实际为 {dto!r}")


def catch_unknown_error(
    func: Callable[..., Awaitable[ServiceResponse[Any]]],
) -> Callable[..., Awaitable[ServiceResponse[Any]]]:
    """服务操作的兜底异常处理。

    未预期的异常会被记录并回滚会话，返回 UnknownError，
    异常消息原样写入 response_message。
    """
    @wraps(func)
    async def wrapper(self: GenericService, *args: Any, **kwargs: Any) -> ServiceResponse[Any]:
        try:
            return await func(self, *args, **kwargs)
        except Exception as exc:
            self.logger.exception(
                f"{self.model_class.__name__}.{func.__name__} 执行失败 | "
                f"异常: {type(exc).__name__}: {exc}"
            )
            await self._rollback()
            return ServiceResponse.fail(ServiceResponseCode.UNKNOWN_ERROR, str(exc))

    return wrapper


class IGenericService(ABC, Generic[ModelType, GetDtoType, AddDtoType, UpdateDtoType]):
    """通用服务接口。控制器只依赖此接口。"""

    @abstractmethod
    async def get_all(self) -> ServiceResponse[list[GetDtoType]]:
        """获取全部实体。"""

    @abstractmethod
    async def get(self, id: int) -> ServiceResponse[GetDtoType]:
        """按 ID 获取实体。"""

    @abstractmethod
    async def delete(self, id: int) -> ServiceResponse[list[GetDtoType]]:
        """按 ID 删除实体，返回剩余实体。"""

    @abstractmethod
    async def add(self, add_dto: AddDtoType, unique_field: Optional[str] = None) -> ServiceResponse[GetDtoType]:
        """新增实体，可选唯一性检查。"""

    @abstractmethod
    async def update(
        self,
        update_dto: UpdateDtoType,
        id: int,
        unique_field: Optional[str] = None,
    ) -> ServiceResponse[GetDtoType]:
        """按 ID 更新实体，可选唯一性检查。"""


class GenericService(LoggerMixin, IGenericService[ModelType, GetDtoType, AddDtoType, UpdateDtoType]):
    """通用服务实现。

    职责：
    1. 按 ID 查找实体（线性扫描，按 "Id" 名称读取主键）
    2. 按调用方指定的字段名做唯一性检查
    3. 通过 Repository 修改存储并提交
    4. 通过映射器在模型和 DTO 之间转换

    注意：查找与修改之间没有事务隔离，并发请求之间可能存在竞争。

    使用示例:
        async with db.session() as session:
            service = GenericService(
                GenericRepository(session, User),
                get_dto=GetUserDto,
                add_dto=AddUserDto,
                update_dto=UpdateUserDto,
            )
            response = await service.add(AddUserDto(name="alice"), "name")
    """

    def __init__(
        self,
        repository: IRepository[ModelType],
        *,
        get_dto: type[GetDtoType],
        add_dto: type[AddDtoType],
        update_dto: type[UpdateDtoType],
        mapper: IMapper | None = None,
    ) -> None:
        """初始化服务。

        Args:
            repository: 数据存储
            get_dto: 读取 DTO 类型
            add_dto: 新增 DTO 类型
            update_dto: 更新 DTO 类型
            mapper: 对象映射器（默认 ObjectMapper）
        """
        self._repository = repository
        self._get_dto = get_dto
        self._add_dto = add_dto
        self._update_dto = update_dto
        self._mapper = mapper or ObjectMapper()
        logger.debug(f"初始化 {self.__class__.__name__}[{repository.model_class.__name__}]")

    @property
    def repository(self) -> IRepository[ModelType]:
        return self._repository

    @property
    def model_class(self) -> type[ModelType]:
        return self._repository.model_class

    @catch_unknown_error
    async def get_all(self) -> ServiceResponse[list[GetDtoType]]:
        return ServiceResponse(
            data=await self._map_all(),
            response_code=ServiceResponseCode.GET_SUCCESS,
        )

    @catch_unknown_error
    async def get(self, id: int) -> ServiceResponse[GetDtoType]:
        entity = await self._find_by_id(id)
        if entity is None:
            return ServiceResponse.fail(ServiceResponseCode.NOT_FOUND)
        return ServiceResponse(
            data=self._mapper.map(entity, self._get_dto),
            response_code=ServiceResponseCode.GET_SUCCESS,
        )

    @catch_unknown_error
    async def delete(self, id: int) -> ServiceResponse[list[GetDtoType]]:
        entity = await self._find_by_id(id)
        if entity is None:
            return ServiceResponse.fail(ServiceResponseCode.NOT_FOUND)

        await self._repository.remove(entity)
        await self._repository.commit()
        self.logger.info(f"删除 {self.model_class.__name__}: id={id}")
        return ServiceResponse(
            data=await self._map_all(),
            response_code=ServiceResponseCode.DELETE_SUCCESS,
        )

    @catch_unknown_error
    async def add(self, add_dto: AddDtoType, unique_field: Optional[str] = None) -> ServiceResponse[GetDtoType]:
        if unique_field is not None:
            unique_value = get_property_value(add_dto, unique_field, str)
            if await self._get_id_by_unique_identifier(unique_field, unique_value) is not None:
                return ServiceResponse.fail(ServiceResponseCode.ALREADY_EXISTS)

        entity = self._mapper.map(add_dto, self.model_class)
        await self._repository.add(entity)
        await self._repository.commit()
        await self._repository.refresh(entity)
        self.logger.info(f"新增 {self.model_class.__name__}: id={getattr(entity, 'id', None)}")
        return ServiceResponse(
            data=self._mapper.map(entity, self._get_dto),
            response_code=ServiceResponseCode.ADD_SUCCESS,
        )

    @catch_unknown_error
    async def update(
        self,
        update_dto: UpdateDtoType,
        id: int,
        unique_field: Optional[str] = None,
    ) -> ServiceResponse[GetDtoType]:
        holder_id: int | None = None
        if unique_field is not None:
            unique_value = get_property_value(update_dto, unique_field, str)
            holder_id = await self._get_id_by_unique_identifier(unique_field, unique_value)

        entity = await self._find_by_id(id)
        if entity is None:
            return ServiceResponse.fail(ServiceResponseCode.NOT_FOUND)
        if holder_id is not None and holder_id != get_property_value(entity, ID_PROPERTY, int):
            return ServiceResponse.fail(ServiceResponseCode.ALREADY_EXISTS)

        self._mapper.map_onto(update_dto, entity)
        await self._repository.commit()
        await self._repository.refresh(entity)
        self.logger.info(f"更新 {self.model_class.__name__}: id={id}")
        return ServiceResponse(
            data=self._mapper.map(entity, self._get_dto),
            response_code=ServiceResponseCode.UPDATE_SUCCESS,
        )

    async def _map_all(self) -> list[GetDtoType]:
        return [self._mapper.map(entity, self._get_dto) for entity in await self._repository.list_all()]

    async def _find_by_id(self, id: int) -> ModelType | None:
        for entity in await self._repository.list_all():
            if get_property_value(entity, ID_PROPERTY, int) == id:
                return entity
        return None

    async def _get_id_by_unique_identifier(self, unique_field: str, unique_value: str) -> int | None:
        """返回当前持有该唯一值的实体 ID，不存在时返回 None。"""
        for entity in await self._repository.list_all():
            if get_property_value(entity, unique_field, str) == unique_value:
                return get_property_value(entity, ID_PROPERTY, int)
        return None

    async def _rollback(self) -> None:
        try:
            await self._repository.rollback()
        except Exception as exc:
            self.logger.warning(f"回滚失败: {type(exc).__name__}: {exc}")

    def __repr__(self) -> str:
        """字符串表示。"""
        return f"<{self.__class__.__name__} model={self.model_class.__name__}>"


__all__ = [
    "ID_PROPERTY",
    "GenericService",
    "IGenericService",
    "catch_unknown_error",
    "check_model_types",
]
