"""客户端：与服务端路由对应的通用 HTTP 调用。"""

from .service import GenericClient

__all__ = [
    "GenericClient",
]
