"""错误处理器实现。

提供责任链模式的错误处理器，保证路由之外产生的失败（请求校验失败、
未知路由等）也以响应信封作为响应体。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from aurimyth.generic_api.common.exceptions import GenericApiError
from aurimyth.generic_api.common.logging import logger
from aurimyth.generic_api.schemas import ServiceResponse, ServiceResponseCode


def _envelope(status_code: int, code: ServiceResponseCode, message: str) -> JSONResponse:
    response: ServiceResponse[None] = ServiceResponse.fail(code, message)
    return JSONResponse(status_code=status_code, content=response.to_wire())


class ErrorHandler(ABC):
    """错误处理器抽象基类 - 责任链模式。"""

    def __init__(self) -> None:
        self._next_handler: ErrorHandler | None = None

    def set_next(self, handler: ErrorHandler) -> ErrorHandler:
        """设置下一个处理器。

        Args:
            handler: 下一个处理器

        Returns:
            ErrorHandler: 下一个处理器（支持链式调用）
        """
        self._next_handler = handler
        return handler

    @abstractmethod
    def can_handle(self, exception: Exception) -> bool:
        """判断是否可以处理该异常。"""

    @abstractmethod
    async def handle(self, exception: Exception, request: Request) -> JSONResponse:
        """处理异常。"""

    async def process(self, exception: Exception, request: Request) -> JSONResponse:
        """处理异常（责任链入口）。"""
        if self.can_handle(exception):
            return await self.handle(exception, request)

        if self._next_handler:
            return await self._next_handler.process(exception, request)

        return await self._default_handle(exception, request)

    async def _default_handle(self, exception: Exception, request: Request) -> JSONResponse:
        logger.exception(f"未处理的异常: {request.method} {request.url.path} | {type(exception).__name__}: {exception}")
        return _envelope(status.HTTP_400_BAD_REQUEST, ServiceResponseCode.UNKNOWN_ERROR, str(exception))


class ValidationErrorHandler(ErrorHandler):
    """请求校验异常处理器（请求体不合法、路径参数类型错误等）。"""

    def can_handle(self, exception: Exception) -> bool:
        return isinstance(exception, RequestValidationError)

    async def handle(self, exception: RequestValidationError, request: Request) -> JSONResponse:
        logger.warning(f"数据验证失败: {request.method} {request.url.path} | {exception.errors()}")
        message = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in exception.errors()
        )
        return _envelope(status.HTTP_400_BAD_REQUEST, ServiceResponseCode.UNKNOWN_ERROR, message)


class HTTPExceptionHandler(ErrorHandler):
    """HTTP 异常处理器，保留原状态码。"""

    def can_handle(self, exception: Exception) -> bool:
        return isinstance(exception, StarletteHTTPException)

    async def handle(self, exception: StarletteHTTPException, request: Request) -> JSONResponse:
        logger.warning(f"HTTP异常: {exception.status_code} - {exception.detail}")
        code = (
            ServiceResponseCode.NOT_FOUND
            if exception.status_code == status.HTTP_404_NOT_FOUND
            else ServiceResponseCode.UNKNOWN_ERROR
        )
        return _envelope(exception.status_code, code, str(exception.detail))


class GenericApiErrorHandler(ErrorHandler):
    """内部异常处理器（正常情况下服务层已兜底，这里处理服务层之外抛出的）。"""

    def can_handle(self, exception: Exception) -> bool:
        return isinstance(exception, GenericApiError)

    async def handle(self, exception: GenericApiError, request: Request) -> JSONResponse:
        logger.error(f"内部异常: {request.method} {request.url.path} | {exception!r}")
        return _envelope(status.HTTP_400_BAD_REQUEST, ServiceResponseCode.UNKNOWN_ERROR, exception.message)


def build_error_chain() -> ErrorHandler:
    """构建默认的错误处理链。"""
    chain = ValidationErrorHandler()
    chain.set_next(HTTPExceptionHandler()).set_next(GenericApiErrorHandler())
    return chain


_error_chain = build_error_chain()


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """全局异常处理入口。"""
    return await _error_chain.process(exc, request)


def register_exception_handlers(app: FastAPI) -> None:
    """为应用注册异常处理器。"""
    for exception_class in (RequestValidationError, StarletteHTTPException, GenericApiError):
        app.add_exception_handler(exception_class, global_exception_handler)


__all__ = [
    "ErrorHandler",
    "GenericApiErrorHandler",
    "HTTPExceptionHandler",
    "ValidationErrorHandler",
    "build_error_chain",
    "global_exception_handler",
    "register_exception_handlers",
]
