"""基础设施层：数据库连接管理。"""

from .database import DatabaseManager

__all__ = [
    "DatabaseManager",
]
