"""Common 层模块。

最基础层，提供：
- 异常基类
- 日志系统
- 属性读取工具
"""

from .exceptions import GenericApiError, MissingValueError, PropertyNotFoundError, RegistrationError
from .logging import (
    TRACE_ID_HEADER,
    LoggerMixin,
    get_trace_id,
    log_exceptions,
    logger,
    set_trace_id,
    setup_logging,
)
from .utils import get_property_value, resolve_property_name, to_snake_case

__all__ = [
    # 异常
    "GenericApiError",
    "MissingValueError",
    "PropertyNotFoundError",
    "RegistrationError",
    # 日志
    "TRACE_ID_HEADER",
    "LoggerMixin",
    "get_trace_id",
    "log_exceptions",
    "logger",
    "set_trace_id",
    "setup_logging",
    # 工具
    "get_property_value",
    "resolve_property_name",
    "to_snake_case",
]
