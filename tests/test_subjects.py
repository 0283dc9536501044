from __future__ import annotations

import orjson

from schema_registry_helper.registry.models import Reference, SchemaType
from schema_registry_helper.registry.subjects import (
    build_payload,
    cache_key,
    concrete_subject,
    normalize_schema,
)
from tests.factory_builders import build_protobuf_schema


def test_concrete_subject_suffixes() -> None:
    assert concrete_subject("orders", is_key=False) == "orders-value"
    assert concrete_subject("orders", is_key=True) == "orders-key"


def test_cache_key_joins_subject_and_version() -> None:
    assert cache_key("orders-value", 3) == "orders-value-3"
    assert cache_key("orders-value", "3") == "orders-value-3"


def test_avro_and_json_newlines_become_spaces() -> None:
    assert normalize_schema("a\nb", SchemaType.AVRO) == "a b"
    assert normalize_schema("a\r\nb", SchemaType.JSON) == "a b"


def test_protobuf_text_is_untouched() -> None:
    proto = build_protobuf_schema()
    assert normalize_schema("a\nb", SchemaType.PROTOBUF) == "a\nb"
    assert normalize_schema(proto, SchemaType.PROTOBUF) == proto


def test_payload_always_carries_reference_list() -> None:
    body = orjson.loads(build_payload("a\nb", SchemaType.AVRO))

    assert body == {"schema": "a b", "schemaType": "AVRO", "references": []}


def test_payload_serializes_references() -> None:
    ref = Reference(name="common.proto", subject="common-value", version=2)
    body = orjson.loads(build_payload("a\nb", SchemaType.PROTOBUF, [ref]))

    assert body["schema"] == "a\nb"
    assert body["schemaType"] == "PROTOBUF"
    assert body["references"] == [
        {"name": "common.proto", "subject": "common-value", "version": 2}
    ]
