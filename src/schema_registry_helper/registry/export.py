"""
스키마 export (check-then-create)

이미 같은 스키마가 등록되어 있으면 그 버전을, 없으면 새로 등록한 버전을 반환합니다.

주의: 확인과 등록은 원자적이지 않습니다. 새 subject 에 두 클라이언트가 동시에 export 하면
양쪽 모두 등록을 시도할 수 있으며, 같은 스키마 텍스트는 같은 ID 로 수렴한다는
레지스트리의 멱등성에 기대어 결과가 일치합니다. 로컬 락은 두지 않습니다.
"""

from __future__ import annotations

from pathlib import Path

from schema_registry_helper.common.logger import PipelineLogger
from schema_registry_helper.registry.client import SchemaRegistryClient
from schema_registry_helper.registry.exceptions import SchemaRegistryError, is_not_found
from schema_registry_helper.registry.models import SchemaType

logger = PipelineLogger.get_logger("schema_export", "registry")


async def export_schema(
    schema_bytes: bytes,
    topic: str,
    schema_type: SchemaType,
    client: SchemaRegistryClient,
    is_key: bool = False,
) -> int:
    """
    스키마를 레지스트리에 export 하고 버전 번호를 반환합니다.

    Args:
        schema_bytes: 스키마 원문 (UTF-8)
        topic: 토픽(=subject) 이름, -key/-value 접미사 제외
        schema_type: 스키마 타입
        client: Schema Registry 클라이언트
        is_key: 키 스키마 여부

    Returns:
        기존(또는 새로 등록된) 스키마 버전

    Raises:
        SchemaRegistryError: 404 이외의 오류 (서버 오류, 전송 실패 등)
    """
    # 잘못된 UTF-8 바이트는 U+FFFD 로 치환해 그대로 export 한다.
    schema = schema_bytes.decode("utf-8", errors="replace")

    try:
        existing = await client.check_schema(topic, schema, schema_type, is_key)
    except SchemaRegistryError as e:
        if not is_not_found(e):
            raise
        # 등록되지 않은 스키마 -> 새로 등록
        created = await client.create_schema(topic, schema, schema_type, is_key)
        logger.info(f"새 스키마 export: topic={topic}, version={created.version}")
        return created.version

    logger.info(f"이미 등록된 스키마: topic={topic}, version={existing.version}")
    return existing.version


async def export_schema_file(
    schema_file_path: str | Path,
    topic: str,
    schema_type: SchemaType,
    client: SchemaRegistryClient,
    is_key: bool = False,
) -> int:
    """파일에서 스키마를 읽어 export 합니다."""
    path = Path(schema_file_path)
    if not path.exists():
        raise FileNotFoundError(f"스키마 파일을 찾을 수 없습니다: {path}")

    return await export_schema(path.read_bytes(), topic, schema_type, client, is_key)
