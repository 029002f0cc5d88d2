"""AuriMyth Generic API - 通用 CRUD 接口工具包。

为任意实体类型提供统一的增删改查服务、HTTP 控制器与客户端，
所有结果都包装在 ServiceResponse 信封中。

模块结构：
- common: 最基础层（异常基类、日志系统、属性访问工具）
- schemas: 响应信封与响应码
- domain: 领域层（模型基类、仓储、对象映射、通用服务）
- infrastructure: 基础设施层（数据库管理器）
- application: 应用层（控制器、错误处理、中间件、应用组装）
- client: 客户端（HTTP 调用）
- commands: 命令行工具
"""

from . import application, client, common, domain, infrastructure
from .config import BaseConfig
from .schemas import ServiceResponse, ServiceResponseCode

__version__ = "0.1.0"
__all__ = [
    "BaseConfig",
    "ServiceResponse",
    "ServiceResponseCode",
    "application",
    "client",
    "common",
    "domain",
    "infrastructure",
]
