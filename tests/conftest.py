"""共享测试夹具。

测试模型与种子数据：
    (1, "TestModel1", "TestModel1")
    (2, "TestModel2", "TestModel2")
    (3, "TestModel3", "")
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import String
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from aurimyth.generic_api.config import DatabaseSettings
from aurimyth.generic_api.domain import Base, GenericRepository, GenericService, IDMixin
from aurimyth.generic_api.infrastructure import DatabaseManager

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


class TestModel(IDMixin, Base):
    __tablename__ = "test_model"
    __test__ = False

    name: Mapped[str] = mapped_column(String(100), default="")
    nullable: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    unique_name: Mapped[str] = mapped_column(String(100), default="")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GetTestModelDto(CamelModel):
    id: int
    name: str = ""
    nullable: Optional[str] = None
    unique_name: str = ""


class AddTestModelDto(CamelModel):
    name: str = ""
    nullable: Optional[str] = None
    unique_name: str = ""


class UpdateTestModelDto(CamelModel):
    name: str = ""
    nullable: Optional[str] = None
    unique_name: str = ""


SEED = [
    (1, "TestModel1", "TestModel1"),
    (2, "TestModel2", "TestModel2"),
    (3, "TestModel3", ""),
]


async def seed(session: AsyncSession) -> None:
    session.add_all([TestModel(id=id, name=name, unique_name=unique_name) for id, name, unique_name in SEED])
    await session.commit()


@pytest.fixture
async def database() -> AsyncGenerator[DatabaseManager, None]:
    """已建表并写入种子数据的内存数据库。"""
    manager = DatabaseManager(DatabaseSettings(url=MEMORY_URL))
    await manager.initialize()
    await manager.create_all()
    async with manager.session() as session:
        await seed(session)
    yield manager
    await manager.cleanup()


@pytest.fixture
async def session(database: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest.fixture
def service(session: AsyncSession) -> GenericService:
    return GenericService(
        GenericRepository(session, TestModel),
        get_dto=GetTestModelDto,
        add_dto=AddTestModelDto,
        update_dto=UpdateTestModelDto,
    )
