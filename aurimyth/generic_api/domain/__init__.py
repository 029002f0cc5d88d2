"""领域层。

- models: ORM 基类与主键 Mixin
- repository: 数据存储抽象与 SQLAlchemy 实现
- mapper: 模型与 DTO 之间的对象映射
- service: 通用 CRUD 服务
"""

from .mapper import IMapper, ObjectMapper
from .models import Base, IDMixin
from .repository import GenericRepository, IRepository
from .service import ID_PROPERTY, GenericService, IGenericService, check_model_types

__all__ = [
    "ID_PROPERTY",
    "Base",
    "GenericRepository",
    "GenericService",
    "IDMixin",
    "IGenericService",
    "IMapper",
    "IRepository",
    "ObjectMapper",
    "check_model_types",
]
