"""HTTP 请求日志中间件。"""

from __future__ import annotations

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from aurimyth.generic_api.common.logging import TRACE_ID_HEADER, logger, set_trace_id


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """请求日志中间件（支持链路追踪）。

    记录请求方法、路径、客户端、响应状态码和耗时；
    链路追踪 ID 取自 X-Trace-ID / X-Request-ID 请求头，缺失时生成，并回写到响应头。

    使用示例:
        app.add_middleware(RequestLoggingMiddleware)
    """

    def __init__(self, app, slow_request_threshold: float = 1.0) -> None:
        super().__init__(app)
        self._slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.time()

        trace_id = (
            request.headers.get(TRACE_ID_HEADER) or
            request.headers.get("x-request-id") or
            str(uuid.uuid4())
        )
        set_trace_id(trace_id)

        client_host = request.client.host if request.client else "unknown"
        logger.info(
            f"→ {request.method} {request.url.path} | "
            f"客户端: {client_host} | "
            f"Trace-ID: {trace_id}"
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                f"✗ {request.method} {request.url.path} | "
                f"异常: {type(exc).__name__}: {exc} | "
                f"耗时: {duration:.3f}s | "
                f"Trace-ID: {trace_id}"
            )
            raise

        duration = time.time() - start_time
        response.headers[TRACE_ID_HEADER] = trace_id

        status_code = response.status_code
        log_level = "ERROR" if status_code >= 500 else "WARNING" if status_code >= 400 else "INFO"
        logger.log(
            log_level,
            f"← {request.method} {request.url.path} | "
            f"状态: {status_code} | "
            f"耗时: {duration:.3f}s | "
            f"Trace-ID: {trace_id}"
        )

        if duration > self._slow_request_threshold:
            logger.warning(
                f"慢请求: {request.method} {request.url.path} | "
                f"耗时: {duration:.3f}s (阈值: {self._slow_request_threshold}s) | "
                f"Trace-ID: {trace_id}"
            )

        return response


__all__ = [
    "TRACE_ID_HEADER",
    "RequestLoggingMiddleware",
]
