"""应用装配端到端测试：GenericClient -> ASGI -> GenericApiApp -> 内存 SQLite。"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi.testclient import TestClient
import httpx
from pydantic import BaseModel
import pytest

from aurimyth.generic_api.application import GenericApiApp, normalize_prefix
from aurimyth.generic_api.client import GenericClient
from aurimyth.generic_api.common import RegistrationError
from aurimyth.generic_api.config import ApiSettings, BaseConfig, DatabaseSettings
from aurimyth.generic_api.infrastructure import DatabaseManager
from aurimyth.generic_api.schemas import ServiceResponseCode
from tests.conftest import MEMORY_URL, AddTestModelDto, GetTestModelDto, TestModel, UpdateTestModelDto


def make_config(**api: str) -> BaseConfig:
    return BaseConfig(database=DatabaseSettings(url=MEMORY_URL), api=ApiSettings(**api))


@pytest.fixture
def app(database: DatabaseManager) -> GenericApiApp:
    app = GenericApiApp(make_config(), database=database)
    app.register(TestModel, GetTestModelDto, AddTestModelDto, UpdateTestModelDto)
    return app


@pytest.fixture
async def http_client(app: GenericApiApp) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def client(http_client: httpx.AsyncClient) -> GenericClient:
    return GenericClient(http_client, model_name="TestModel", get_dto=GetTestModelDto)


@pytest.mark.parametrize(("prefix", "expected"), [("/api", "/api"), ("api/", "/api"), ("", ""), ("/", "")])
def test_normalize_prefix(prefix: str, expected: str) -> None:
    assert normalize_prefix(prefix) == expected


async def test_round_trip(client: GenericClient) -> None:
    assert len((await client.get_all()).data) == 3

    first = await client.get(1)
    assert first.response_code is ServiceResponseCode.GET_SUCCESS
    assert first.data.name == "TestModel1"

    missing = await client.get(99)
    assert missing.response_code is ServiceResponseCode.NOT_FOUND
    assert missing.data is None

    added = await client.add(AddTestModelDto(name="TestModel4", unique_name="TestModel4"), "uniqueName")
    assert added.response_code is ServiceResponseCode.ADD_SUCCESS
    assert added.data.id == 4

    duplicate = await client.add(AddTestModelDto(name="x", unique_name="TestModel1"), "uniqueName")
    assert duplicate.response_code is ServiceResponseCode.ALREADY_EXISTS

    conflict = await client.update(UpdateTestModelDto(name="x", unique_name="TestModel1"), 2, "uniqueName")
    assert conflict.response_code is ServiceResponseCode.ALREADY_EXISTS

    updated = await client.update(UpdateTestModelDto(name="Renamed", unique_name="TestModel2"), 2, "uniqueName")
    assert updated.response_code is ServiceResponseCode.UPDATE_SUCCESS
    assert updated.data.name == "Renamed"

    remaining = await client.delete(1)
    assert remaining.response_code is ServiceResponseCode.DELETE_SUCCESS
    assert [dto.id for dto in remaining.data] == [2, 3, 4]


async def test_failure_statuses(http_client: httpx.AsyncClient) -> None:
    not_found = await http_client.get("/api/TestModel/99")
    assert not_found.status_code == 400
    assert not_found.json() == {"data": None, "responseCode": "NotFound", "responseMessage": ""}

    unknown_field = await http_client.post("/api/TestModel/NotExisting", json={"name": "x"})
    assert unknown_field.status_code == 400
    assert unknown_field.json()["responseCode"] == "UnknownError"
    assert "NotExisting" in unknown_field.json()["responseMessage"]


async def test_trace_id_is_echoed(http_client: httpx.AsyncClient) -> None:
    response = await http_client.get("/api/TestModel/all", headers={"X-Trace-ID": "trace-123"})

    assert response.headers["x-trace-id"] == "trace-123"


async def test_health(http_client: httpx.AsyncClient) -> None:
    response = await http_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"data": {"database": "ok"}, "responseCode": "Default", "responseMessage": ""}


def test_health_without_database() -> None:
    app = GenericApiApp(make_config())

    response = TestClient(app).get("/health")

    assert response.status_code == 400
    assert response.json()["responseCode"] == "UnknownError"
    assert response.json()["data"] == {"database": "unavailable"}


def test_lifespan_creates_tables() -> None:
    app = GenericApiApp(make_config(route_prefix="/v1"))
    app.register(TestModel, GetTestModelDto, AddTestModelDto, UpdateTestModelDto, model_name="Item")

    with TestClient(app) as test_client:
        assert test_client.get("/health").status_code == 200
        response = test_client.get("/v1/Item/all")
        assert response.status_code == 200
        assert response.json()["data"] == []

    assert not app.database.is_initialized


def test_register_returns_controller(app: GenericApiApp) -> None:
    assert set(app.controllers) == {"TestModel"}
    assert app.controllers["TestModel"].model_name == "TestModel"


def test_register_rejects_duplicate_name(app: GenericApiApp) -> None:
    with pytest.raises(RegistrationError):
        app.register(TestModel, GetTestModelDto, AddTestModelDto, UpdateTestModelDto)


def test_register_rejects_model_without_id() -> None:
    class NoIdModel:
        name: str = ""

    app = GenericApiApp(make_config())
    with pytest.raises(RegistrationError, match="Id"):
        app.register(NoIdModel, GetTestModelDto, AddTestModelDto, UpdateTestModelDto)


def test_register_rejects_non_pydantic_dto() -> None:
    class PlainDto:
        pass

    class OtherDto(BaseModel):
        name: str = ""

    app = GenericApiApp(make_config())
    with pytest.raises(RegistrationError, match="add_dto"):
        app.register(TestModel, OtherDto, PlainDto, OtherDto)
