from __future__ import annotations

import re
from collections.abc import Iterable

import orjson

from schema_registry_helper.registry.models import Reference, SchemaRequest, SchemaType

# 레지스트리 subject 네이밍 규칙 (TopicNameStrategy)
KEY_SUFFIX = "-key"
VALUE_SUFFIX = "-value"

LATEST_VERSION = "latest"

_NEWLINE = re.compile(r"\r?\n")


def concrete_subject(subject: str, is_key: bool) -> str:
    """토픽 이름에 -key / -value 접미사를 붙인 실제 subject"""
    return f"{subject}{KEY_SUFFIX if is_key else VALUE_SUFFIX}"


def cache_key(subject: str, version: str | int) -> str:
    return f"{subject}-{version}"


def normalize_schema(schema: str, schema_type: SchemaType) -> str:
    """Avro/JSON 스키마의 개행을 공백으로 치환합니다.

    Protobuf 문법은 개행에 의미가 있으므로 그대로 둡니다.
    """
    if schema_type == SchemaType.PROTOBUF:
        return schema
    return _NEWLINE.sub(" ", schema)


def build_payload(
    schema: str,
    schema_type: SchemaType,
    references: Iterable[Reference] | None = None,
) -> bytes:
    """{schema, schemaType, references} 요청 바디 (references 는 항상 리스트)"""
    request = SchemaRequest(
        schema_str=normalize_schema(schema, schema_type),
        schema_type=schema_type,
        references=list(references or ()),
    )
    return orjson.dumps(request.model_dump(by_alias=True))
