"""日志管理器 - 统一的日志配置和管理。

提供：
- 统一的日志配置（控制台 + 可选的滚动文件）
- 链路追踪 ID 支持
- 异常日志装饰器
- 日志混入类

注意：HTTP 请求日志由 application.middleware.RequestLoggingMiddleware 负责。
"""

from __future__ import annotations

from collections.abc import Callable
from contextvars import ContextVar
from functools import wraps
from typing import Any, TypeVar
import uuid

from loguru import logger

T = TypeVar("T")

# 链路追踪 ID 的请求头名称（服务端回写、客户端透传）
TRACE_ID_HEADER = "x-trace-id"

_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)


def _inject_trace_id(record: dict[str, Any]) -> None:
    record["extra"].setdefault("trace_id", _trace_id.get() or "-")


# 移除默认配置，由setup_logging统一配置
logger.remove()
logger.configure(patcher=_inject_trace_id)

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[trace_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[trace_id]} | {name}:{function}:{line} - {message}"


def get_trace_id() -> str:
    """获取当前链路追踪ID（不存在时生成）。"""
    trace_id = _trace_id.get()
    if trace_id is None:
        trace_id = str(uuid.uuid4())
        _trace_id.set(trace_id)
    return trace_id


def set_trace_id(trace_id: str) -> None:
    """设置当前上下文的链路追踪ID。"""
    _trace_id.set(trace_id)


def setup_logging(log_level: str = "INFO", log_file: str | None = None) -> None:
    """设置日志配置。

    重复调用时会先移除已有输出，避免日志重复。

    Args:
        log_level: 日志级别（默认：INFO）
        log_file: 日志文件路径（可选，不设置则仅输出到控制台）
    """
    log_level = log_level.upper()
    logger.remove()

    # 控制台输出
    logger.add(
        lambda msg: print(msg, end=""),
        format=_CONSOLE_FORMAT,
        level=log_level,
        colorize=True,
    )

    # 文件输出
    if log_file:
        logger.add(
            log_file,
            rotation="00:00",
            retention="7 days",
            level=log_level,
            format=_FILE_FORMAT,
            encoding="utf-8",
            enqueue=True,  # 异步写入
        )

    logger.info(f"日志系统初始化完成，级别: {log_level}")


def log_exceptions(func: Callable[..., T]) -> Callable[..., T]:
    """异常日志装饰器。

    自动记录协程抛出的异常后重新抛出。

    使用示例:
        @log_exceptions
        async def risky_operation():
            pass
    """
    @wraps(func)
    async def wrapper(*args, **kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            logger.exception(
                f"异常捕获: {func.__module__}.{func.__name__} | "
                f"异常: {type(exc).__name__}: {exc}"
            )
            raise

    return wrapper


class LoggerMixin:
    """日志混入类。

    为类提供绑定了类名的日志器。

    使用示例:
        class MyService(LoggerMixin):
            def do_something(self):
                self.logger.info("执行操作")
    """

    @property
    def logger(self) -> Any:
        """获取类专用的日志器。"""
        class_name = self.__class__.__name__
        module_name = self.__class__.__module__
        return logger.bind(name=f"{module_name}.{class_name}")


__all__ = [
    "TRACE_ID_HEADER",
    "LoggerMixin",
    "get_trace_id",
    "log_exceptions",
    "logger",
    "set_trace_id",
    "setup_logging",
]
