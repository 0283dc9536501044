"""
Schema Registry 클라이언트 구현

Confluent 호환 Schema Registry HTTP API 위에서 스키마 조회/등록을 수행하고,
ID 캐시와 subject-version 캐시 두 개로 불필요한 네트워크 왕복을 줄입니다.

캐시 정책:
    - ID 캐시: schema_id -> Schema
    - subject-version 캐시: "<subject>-<key|value>-<version>" -> Schema
    - "latest" 는 계속 바뀌는 대상이므로 절대 캐시하지 않습니다.
    - 캐시는 늘어나기만 하며 무효화하지 않습니다 (스키마는 거의 바뀌지 않는다는 전제).
"""

from __future__ import annotations

from collections.abc import Iterable
from http import HTTPStatus
from typing import Any, TypeVar
from urllib.parse import quote

import aiohttp
import orjson
from pydantic import BaseModel, TypeAdapter, ValidationError

from schema_registry_helper.common.logger import PipelineLogger
from schema_registry_helper.config.settings import SchemaRegistrySettings, registry_settings
from schema_registry_helper.registry.cache import SchemaCache
from schema_registry_helper.registry.exceptions import (
    DecodeError,
    NotFoundError,
    RegistryError,
    TransportError,
)
from schema_registry_helper.registry.models import (
    Reference,
    Schema,
    SchemaResponse,
    SchemaType,
)
from schema_registry_helper.registry.subjects import (
    LATEST_VERSION,
    build_payload,
    cache_key,
    concrete_subject,
)

logger = PipelineLogger.get_logger("schema_registry", "registry")

CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"
DEFAULT_TIMEOUT = 5.0

SCHEMA_BY_ID = "/schemas/ids/{id}"
SUBJECT_CHECK = "/subjects/{subject}"
SUBJECT_VERSIONS = "/subjects/{subject}/versions"
SUBJECT_BY_VERSION = "/subjects/{subject}/versions/{version}"

M = TypeVar("M", bound=BaseModel)

_versions_adapter = TypeAdapter(list[int])


class SchemaRegistryClient:
    """
    Schema Registry 클라이언트

    여러 코루틴(또는 스레드의 이벤트 루프)이 동시에 사용해도 되며,
    두 캐시는 각자의 락을 가지므로 ID 조회와 subject 조회가 서로를 막지 않습니다.
    재시도는 하지 않습니다. 실패는 즉시 호출 측으로 전달됩니다.

    Example:
        >>> async with SchemaRegistryClient("http://localhost:8081") as client:
        >>>     schema = await client.get_latest_schema("orders", is_key=False)
        >>>     same = await client.get_schema(schema.id)
    """

    def __init__(
        self,
        base_url: str,
        auth: tuple[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        caching_enabled: bool = True,
        session: aiohttp.ClientSession | None = None,
    ):
        """
        Args:
            base_url: 레지스트리 주소 (예: http://localhost:8081)
            auth: Basic 인증 (username, password)
            timeout: 요청당 타임아웃 (초)
            caching_enabled: 캐시 사용 여부
            session: 외부에서 관리하는 aiohttp 세션 (지정 시 close()가 닫지 않음)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._auth: aiohttp.BasicAuth | None = None
        self._caching_enabled = caching_enabled
        self._session = session
        self._owns_session = session is None
        self._id_cache: SchemaCache[int] = SchemaCache()
        self._subject_cache: SchemaCache[str] = SchemaCache()
        if auth:
            self.set_credentials(*auth)

    @classmethod
    def from_settings(
        cls, settings: SchemaRegistrySettings | None = None
    ) -> SchemaRegistryClient:
        """환경변수 기반 설정으로 클라이언트 생성"""
        settings = settings or registry_settings
        return cls(
            base_url=settings.url,
            auth=settings.auth,
            timeout=settings.timeout,
            caching_enabled=settings.caching_enabled,
        )

    async def __aenter__(self) -> SchemaRegistryClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """HTTP 세션을 생성하거나 재사용합니다."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(limit=100, limit_per_host=30)
            self._session = aiohttp.ClientSession(connector=connector)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """직접 만든 HTTP 세션만 종료합니다."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    # ------------------------------------------------------------------
    # 설정 변경
    # ------------------------------------------------------------------

    def set_credentials(self, username: str, password: str) -> None:
        """Basic 인증 설정 (둘 중 하나라도 비어 있으면 무시)"""
        if username and password:
            self._auth = aiohttp.BasicAuth(username, password)

    def set_timeout(self, timeout: float) -> None:
        """이후 요청부터 적용되는 타임아웃 (초)"""
        self.timeout = timeout

    def set_caching_enabled(self, value: bool) -> None:
        """
        캐시 사용 여부를 변경합니다.

        끄더라도 이미 캐시된 항목은 지우지 않으며, 다시 켜면 그대로 재사용됩니다.

        Args:
            value: True 면 ID / subject-version 캐시를 읽고 씀
        """
        self._caching_enabled = value

    @property
    def caching_enabled(self) -> bool:
        """현재 캐시 사용 여부"""
        return self._caching_enabled

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    async def get_schema(self, schema_id: int) -> Schema:
        """ID 로 스키마를 조회합니다. 이 경로에서는 version 을 알 수 없습니다."""
        if self._caching_enabled:
            cached = self._id_cache.get(schema_id)
            if cached is not None:
                logger.debug(f"ID 캐시 적중: id={schema_id}")
                return cached

        data = await self._request("GET", SCHEMA_BY_ID.format(id=schema_id))
        response = _decode_model(data, SchemaResponse)
        schema = Schema(id=schema_id, schema=response.schema_str)

        if self._caching_enabled:
            self._id_cache.put(schema_id, schema)

        return schema

    async def get_latest_schema(self, subject: str, is_key: bool = False) -> Schema:
        """subject 의 최신 버전 스키마.

        캐시 설정과 무관하게 항상 레지스트리에서 직접 조회하며,
        결과도 어느 캐시에도 넣지 않습니다.
        """
        return await self._get_version(subject, LATEST_VERSION, is_key, use_cache=False)

    async def get_schema_versions(self, subject: str, is_key: bool = False) -> list[int]:
        """subject 에 등록된 버전 번호 목록 (캐시하지 않음)"""
        subject_name = concrete_subject(subject, is_key)
        data = await self._request(
            "GET", SUBJECT_VERSIONS.format(subject=_quote(subject_name))
        )
        try:
            return _versions_adapter.validate_python(data)
        except ValidationError as e:
            raise DecodeError(f"버전 목록 형식 오류: {subject_name}") from e

    async def get_schema_by_version(
        self, subject: str, version: int, is_key: bool = False
    ) -> Schema:
        """
        subject 의 특정 버전 스키마를 조회합니다.

        캐시가 켜져 있으면 "<subject>-<key|value>-<version>" 키로 캐시하고,
        네트워크로 가져온 경우 ID 캐시도 함께 채웁니다.

        Args:
            subject: 토픽 이름 (-key/-value 접미사 제외)
            version: 버전 번호
            is_key: 키 스키마 여부

        Returns:
            id / schema / version 이 모두 채워진 Schema
        """
        return await self._get_version(
            subject, str(version), is_key, use_cache=self._caching_enabled
        )

    # ------------------------------------------------------------------
    # 등록
    # ------------------------------------------------------------------

    async def check_schema(
        self,
        subject: str,
        schema: str,
        schema_type: SchemaType,
        is_key: bool = False,
        references: Iterable[Reference] | None = None,
    ) -> SchemaResponse:
        """동일한 스키마가 subject 에 이미 등록되어 있는지 확인합니다.

        등록되어 있으면 등록 정보를 반환하고, 없으면 NotFoundError 가 발생합니다.
        레지스트리 상태는 바꾸지 않습니다.
        """
        subject_name = concrete_subject(subject, is_key)
        payload = build_payload(schema, schema_type, references)
        data = await self._request(
            "POST", SUBJECT_CHECK.format(subject=_quote(subject_name)), payload
        )
        return _decode_model(data, SchemaResponse)

    async def create_schema(
        self,
        subject: str,
        schema: str,
        schema_type: SchemaType,
        is_key: bool = False,
        references: Iterable[Reference] | None = None,
    ) -> Schema:
        """스키마를 새 버전으로 등록하고 (id, version) 을 포함한 Schema 를 반환합니다."""
        subject_name = concrete_subject(subject, is_key)
        payload = build_payload(schema, schema_type, references)
        data = await self._request(
            "POST", SUBJECT_VERSIONS.format(subject=_quote(subject_name)), payload
        )
        if not isinstance(data, dict) or "id" not in data:
            raise DecodeError(f"등록 응답에 id 가 없습니다: {subject_name}")

        # 등록 응답에는 version 이 없으므로 latest 를 다시 조회한다.
        # 다른 클라이언트가 동시에 같은 subject 에 등록하면 그쪽 스키마가 보일 수 있으며,
        # 같은 스키마 텍스트는 같은 ID 로 수렴한다는 레지스트리의 멱등성에 의존한다.
        new_schema = await self.get_latest_schema(subject, is_key)

        if self._caching_enabled:
            self._subject_cache.put(cache_key(subject_name, new_schema.version), new_schema)
            self._id_cache.put(new_schema.id, new_schema)

        logger.info(
            f"스키마 등록 완료: subject={subject_name}, id={new_schema.id}, "
            f"version={new_schema.version}"
        )
        return new_schema

    # ------------------------------------------------------------------
    # 내부 구현
    # ------------------------------------------------------------------

    async def _get_version(
        self, subject: str, version: str, is_key: bool, use_cache: bool
    ) -> Schema:
        subject_name = concrete_subject(subject, is_key)
        key = cache_key(subject_name, version)

        if use_cache:
            cached = self._subject_cache.get(key)
            if cached is not None:
                logger.debug(f"subject 캐시 적중: {key}")
                return cached

        data = await self._request(
            "GET",
            SUBJECT_BY_VERSION.format(subject=_quote(subject_name), version=version),
        )
        response = _decode_model(data, SchemaResponse)
        schema = Schema(
            id=response.id,
            schema=response.schema_str,
            version=response.version,
        )

        if use_cache:
            self._subject_cache.put(key, schema)
            self._id_cache.put(schema.id, schema)

        return schema

    async def _request(self, method: str, path: str, payload: bytes | None = None) -> Any:
        """Schema Registry API 요청 후 JSON 으로 디코딩한 바디를 반환합니다."""
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"

        try:
            async with session.request(
                method,
                url,
                data=payload,
                headers={"Content-Type": CONTENT_TYPE},
                auth=self._auth,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                body = await response.read()
                status = response.status
                reason = response.reason
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(f"HTTP 요청 실패: {method} {url} ({e!r})")
            raise TransportError(f"HTTP request failed: {method} {url}: {e!r}") from e

        if status < 200 or status > 299:
            error = _create_error(status, reason, body)
            logger.warning(f"레지스트리 오류 응답: {method} {path} -> {error}")
            raise error

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise DecodeError(f"JSON 디코딩 실패: {method} {path}") from e


def _quote(subject: str) -> str:
    return quote(subject, safe="")


def _decode_model(data: Any, model: type[M]) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"응답 형식 오류 ({model.__name__}): {e}") from e


def _create_error(status: int, reason: str | None, body: bytes) -> RegistryError:
    """{error_code, message} 바디가 있으면 메시지를 포함한 에러 생성"""
    if not reason:
        try:
            reason = HTTPStatus(status).phrase
        except ValueError:
            reason = ""

    message: str | None = None
    error_code: int | None = None
    try:
        decoded = orjson.loads(body) if body else None
    except orjson.JSONDecodeError:
        decoded = None
    if isinstance(decoded, dict):
        message = decoded.get("message")
        error_code = decoded.get("error_code")

    error_cls = NotFoundError if status == HTTPStatus.NOT_FOUND else RegistryError
    return error_cls(status, reason, message=message, error_code=error_code)
