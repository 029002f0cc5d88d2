"""应用层。

- app: 应用装配与模型注册
- controller: 通用控制器
- errors: 异常处理链
- middleware: 请求日志中间件
"""

from .app import GenericApiApp, normalize_prefix
from .controller import GenericController
from .errors import global_exception_handler, register_exception_handlers
from .middleware import RequestLoggingMiddleware

__all__ = [
    "GenericApiApp",
    "GenericController",
    "RequestLoggingMiddleware",
    "global_exception_handler",
    "normalize_prefix",
    "register_exception_handlers",
]
