"""Schema Registry 데이터 모델

- Schema: 캐시에 저장되는 불변 값 객체
- Reference: 다른 subject/version 을 가리키는 참조 (Protobuf import, JSON Schema $ref)
- SchemaRequest / SchemaResponse: I/O 경계 DTO (Pydantic v2)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SchemaType(StrEnum):
    """레지스트리가 지원하는 스키마 타입 (schemaType 값 그대로)"""

    PROTOBUF = "PROTOBUF"
    AVRO = "AVRO"
    JSON = "JSON"


@dataclass(slots=True, frozen=True)
class Schema:
    """레지스트리에서 조회한 스키마.

    version 은 subject 기준 조회에서만 알 수 있으며, ID 로만 조회한 경우 None 입니다.
    """

    id: int
    schema: str
    version: int | None = None


class Reference(BaseModel):
    """스키마 참조 (name 은 import 경로 또는 $ref 값)"""

    name: str
    subject: str
    version: int

    model_config = ConfigDict(frozen=True, extra="forbid")


class SchemaRequest(BaseModel):
    """POST /subjects/{subject}[/versions] 요청 바디"""

    schema_str: str = Field(serialization_alias="schema")
    schema_type: SchemaType = Field(serialization_alias="schemaType")
    references: list[Reference] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, use_enum_values=True)


class SchemaResponse(BaseModel):
    """레지스트리 응답 바디.

    엔드포인트마다 내려주는 필드가 달라 모두 기본값을 둡니다.
    (/schemas/ids/{id} 는 schema 만, POST .../versions 는 id 만 내려옴)
    """

    subject: str = ""
    version: int = 0
    schema_str: str = Field(default="", alias="schema")
    id: int = 0

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")
