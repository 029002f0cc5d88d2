"""服务器运行命令实现。"""

from __future__ import annotations

import os
import sys

import typer
import uvicorn

from aurimyth.generic_api.config import ServerSettings

# 创建 Typer 应用
app = typer.Typer(
    name="generic-api",
    help="通用 API 服务器管理工具",
    add_completion=False,
)

DEFAULT_APP = "main:app"


def _ensure_cwd_importable() -> None:
    """把当前工作目录加入导入路径，使 main:app 这类应用路径可被 uvicorn 找到。"""
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)


def _serve(
    app_path: str,
    *,
    host: str,
    port: int,
    workers: int,
    reload: bool,
    log_level: str,
) -> None:
    if ":" not in app_path:
        typer.echo(f"❌ 错误：应用路径应为 module:attribute 形式，收到 {app_path!r}", err=True)
        raise typer.Exit(1)

    _ensure_cwd_importable()

    typer.echo("🚀 启动服务器...")
    typer.echo(f"   应用: {app_path}")
    typer.echo(f"   地址: http://{host}:{port}")
    typer.echo(f"   工作进程: {workers}")
    typer.echo(f"   热重载: {'✅' if reload else '❌'}")

    try:
        uvicorn.run(
            app_path,
            host=host,
            port=port,
            # 热重载与多进程互斥
            workers=None if reload else workers,
            reload=reload,
            log_level=log_level.lower(),
        )
    except KeyboardInterrupt:
        typer.echo("\n👋 服务器已停止")
    except Exception as e:
        typer.echo(f"❌ 错误：{e}", err=True)
        raise typer.Exit(1) from e


_settings = ServerSettings()


@app.command()
def run(
    app_path: str = typer.Argument(
        DEFAULT_APP,
        help="应用路径（module:attribute）",
    ),
    host: str = typer.Option(
        _settings.host,
        "--host",
        "-h",
        help="监听地址",
    ),
    port: int = typer.Option(
        _settings.port,
        "--port",
        "-p",
        help="监听端口",
    ),
    workers: int = typer.Option(
        _settings.workers,
        "--workers",
        "-w",
        help="工作进程数",
    ),
    reload: bool = typer.Option(
        _settings.reload,
        "--reload",
        help="启用热重载（开发模式）",
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        help="uvicorn 日志级别",
    ),
) -> None:
    """运行服务器。

    示例：

        generic-api run

        generic-api run myproject.main:app --workers 4
    """
    _serve(app_path, host=host, port=port, workers=workers, reload=reload, log_level=log_level)


@app.command()
def dev(
    app_path: str = typer.Argument(
        DEFAULT_APP,
        help="应用路径（module:attribute）",
    ),
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        "-h",
        help="监听地址",
    ),
    port: int = typer.Option(
        _settings.port,
        "--port",
        "-p",
        help="监听端口",
    ),
) -> None:
    """启动开发服务器（热重载）。

    快捷命令，相当于 run --reload --log-level debug
    """
    _serve(app_path, host=host, port=port, workers=1, reload=True, log_level="debug")


def server_cli() -> None:
    """CLI 入口点。"""
    app()


__all__ = [
    "app",
    "dev",
    "run",
    "server_cli",
]
