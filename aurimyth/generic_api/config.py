"""共享配置。

使用 pydantic-settings 进行分组配置管理，每组配置有独立的环境变量前缀。
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """数据库配置。

    环境变量前缀: DATABASE_
    示例: DATABASE_URL, DATABASE_ECHO, DATABASE_POOL_SIZE
    """

    url: str = Field(
        default="sqlite+aiosqlite:///./generic_api.db",
        description="数据库连接字符串"
    )
    echo: bool = Field(
        default=False,
        description="是否输出 SQL 语句"
    )
    pool_size: int = Field(
        default=5,
        description="数据库连接池大小（SQLite 忽略）"
    )
    max_overflow: int = Field(
        default=10,
        description="连接池最大溢出连接数（SQLite 忽略）"
    )
    pool_recycle: int = Field(
        default=3600,
        description="连接回收时间（秒）"
    )
    create_tables: bool = Field(
        default=True,
        description="启动时是否按模型元数据建表"
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
    )


class ApiSettings(BaseSettings):
    """接口配置。

    环境变量前缀: API_
    示例: API_ROUTE_PREFIX, API_TITLE
    """

    route_prefix: str = Field(
        default="/api",
        description="所有模型路由的公共前缀"
    )
    title: str = Field(
        default="Generic API",
        description="应用标题"
    )
    version: str = Field(
        default="0.1.0",
        description="应用版本"
    )

    model_config = SettingsConfigDict(
        env_prefix="API_",
        case_sensitive=False,
    )


class ClientSettings(BaseSettings):
    """客户端配置。

    环境变量前缀: CLIENT_
    示例: CLIENT_BASE_URL, CLIENT_TIMEOUT
    """

    base_url: str = Field(
        default="http://localhost:8000",
        description="服务端基础地址"
    )
    route_prefix: str = Field(
        default="api",
        description="服务端路由前缀"
    )
    timeout: float = Field(
        default=30.0,
        description="请求超时时间（秒）"
    )

    model_config = SettingsConfigDict(
        env_prefix="CLIENT_",
        case_sensitive=False,
    )


class ServerSettings(BaseSettings):
    """服务器配置。

    环境变量前缀: SERVER_
    示例: SERVER_HOST, SERVER_PORT, SERVER_RELOAD
    """

    host: str = Field(
        default="127.0.0.1",
        description="服务器监听地址"
    )
    port: int = Field(
        default=8000,
        description="服务器监听端口"
    )
    reload: bool = Field(
        default=False,
        description="是否启用热重载"
    )
    workers: int = Field(
        default=1,
        description="工作进程数"
    )

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """日志配置。

    环境变量前缀: LOG_
    示例: LOG_LEVEL, LOG_FILE
    """

    level: str = Field(
        default="INFO",
        description="日志级别"
    )
    file: str | None = Field(
        default=None,
        description="日志文件路径（如果不设置则仅输出到控制台）"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class HealthCheckSettings(BaseSettings):
    """健康检查配置。

    环境变量前缀: HEALTH_CHECK_
    示例: HEALTH_CHECK_PATH, HEALTH_CHECK_ENABLED
    """

    path: str = Field(
        default="/health",
        description="健康检查端点路径"
    )
    enabled: bool = Field(
        default=True,
        description="是否启用健康检查端点"
    )

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_CHECK_",
        case_sensitive=False,
    )


class BaseConfig(BaseSettings):
    """应用配置汇总。

    各分组从各自前缀的环境变量读取，也可以直接传入实例覆盖。
    """

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    health_check: HealthCheckSettings = Field(default_factory=HealthCheckSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = [
    "ApiSettings",
    "BaseConfig",
    "ClientSettings",
    "DatabaseSettings",
    "HealthCheckSettings",
    "LogSettings",
    "ServerSettings",
]
