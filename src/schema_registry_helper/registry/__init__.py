"""
Schema Registry 클라이언트 모듈

주요 기능:
- ID / subject-version 기준 스키마 조회 (읽기 캐시)
- 스키마 존재 확인 및 등록
- check-then-create export
"""

from schema_registry_helper.registry.client import SchemaRegistryClient
from schema_registry_helper.registry.exceptions import (
    ERR_NOT_FOUND,
    DecodeError,
    NotFoundError,
    RegistryError,
    SchemaRegistryError,
    TransportError,
    is_not_found,
)
from schema_registry_helper.registry.export import export_schema, export_schema_file
from schema_registry_helper.registry.models import (
    Reference,
    Schema,
    SchemaResponse,
    SchemaType,
)
from schema_registry_helper.registry.subjects import concrete_subject

__all__ = [
    # Client
    "SchemaRegistryClient",
    # Models
    "Reference",
    "Schema",
    "SchemaResponse",
    "SchemaType",
    # Errors
    "ERR_NOT_FOUND",
    "DecodeError",
    "NotFoundError",
    "RegistryError",
    "SchemaRegistryError",
    "TransportError",
    "is_not_found",
    # Helpers
    "concrete_subject",
    "export_schema",
    "export_schema_file",
]
