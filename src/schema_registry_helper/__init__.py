"""Confluent 호환 Schema Registry 클라이언트 (캐시 + export)"""

from schema_registry_helper.registry import (
    ERR_NOT_FOUND,
    DecodeError,
    NotFoundError,
    Reference,
    RegistryError,
    Schema,
    SchemaRegistryClient,
    SchemaRegistryError,
    SchemaResponse,
    SchemaType,
    TransportError,
    concrete_subject,
    export_schema,
    export_schema_file,
    is_not_found,
)

__version__ = "0.1.0"

__all__ = [
    "SchemaRegistryClient",
    "Reference",
    "Schema",
    "SchemaResponse",
    "SchemaType",
    "ERR_NOT_FOUND",
    "DecodeError",
    "NotFoundError",
    "RegistryError",
    "SchemaRegistryError",
    "TransportError",
    "is_not_found",
    "concrete_subject",
    "export_schema",
    "export_schema_file",
]
