"""命令行工具模块。"""

from .server import app as server_app
from .server import server_cli

__all__ = [
    "server_app",
    "server_cli",
]
