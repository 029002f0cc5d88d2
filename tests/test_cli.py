"""命令行测试（uvicorn.run 以 monkeypatch 替代）。"""

from __future__ import annotations

from typing import Any

import pytest
from typer.testing import CliRunner

from aurimyth.generic_api.commands import server_app
from aurimyth.generic_api.commands import server as server_module

runner = CliRunner()


@pytest.fixture
def uvicorn_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, dict[str, Any]]]:
    calls: list[tuple[str, dict[str, Any]]] = []

    def fake_run(app: str, **kwargs: Any) -> None:
        calls.append((app, kwargs))

    monkeypatch.setattr(server_module.uvicorn, "run", fake_run)
    return calls


def test_run_defaults(uvicorn_calls) -> None:
    result = runner.invoke(server_app, ["run"])

    assert result.exit_code == 0, result.output
    ((app, kwargs),) = uvicorn_calls
    assert app == "main:app"
    assert kwargs["reload"] is False
    assert kwargs["workers"] == 1


def test_run_options(uvicorn_calls) -> None:
    result = runner.invoke(server_app, ["run", "project.main:app", "--port", "9000", "--workers", "4"])

    assert result.exit_code == 0, result.output
    ((app, kwargs),) = uvicorn_calls
    assert app == "project.main:app"
    assert kwargs["port"] == 9000
    assert kwargs["workers"] == 4


def test_dev_enables_reload(uvicorn_calls) -> None:
    result = runner.invoke(server_app, ["dev", "--port", "9001"])

    assert result.exit_code == 0, result.output
    ((_, kwargs),) = uvicorn_calls
    assert kwargs["reload"] is True
    assert kwargs["workers"] is None
    assert kwargs["log_level"] == "debug"


def test_invalid_app_path(uvicorn_calls) -> None:
    result = runner.invoke(server_app, ["run", "main"])

    assert result.exit_code == 1
    assert uvicorn_calls == []
