"""Schema Registry 예외 정의

- TransportError: 네트워크/연결/타임아웃 실패
- RegistryError: 2xx 이외의 응답 (상태 라인 + 선택적 메시지)
- NotFoundError: 404 응답 (RegistryError 하위, 상태 라인에 "404 Not Found" 포함)
- DecodeError: 응답 바디가 JSON 이 아니거나 기대한 형태가 아님

호출 측에서 "없음" 과 "실패" 를 구분할 때는 is_not_found() 로 상태 문자열을 확인합니다.
"""

from __future__ import annotations

from typing import Final

ERR_NOT_FOUND: Final[str] = "404 Not Found"


class SchemaRegistryError(Exception):
    """Schema Registry 관련 기본 예외"""

    pass


class TransportError(SchemaRegistryError):
    """HTTP 요청 자체가 실패했을 때 (연결 실패, 타임아웃 등)"""

    pass


class DecodeError(SchemaRegistryError):
    """응답 바디를 해석할 수 없을 때"""

    pass


class RegistryError(SchemaRegistryError):
    """레지스트리가 2xx 이외의 상태로 응답했을 때"""

    def __init__(
        self,
        status: int,
        reason: str | None,
        message: str | None = None,
        error_code: int | None = None,
    ) -> None:
        self.status = status
        self.reason = reason or ""
        self.message = message
        self.error_code = error_code
        super().__init__(str(self))

    @property
    def status_line(self) -> str:
        return f"{self.status} {self.reason}".rstrip()

    def __str__(self) -> str:
        if self.message:
            return f"{self.status_line}: {self.message}"
        return self.status_line


class NotFoundError(RegistryError):
    """404 - subject 또는 스키마가 존재하지 않음"""

    pass


def is_not_found(exc: BaseException) -> bool:
    """에러 문자열에 404 상태 라인이 들어 있는지 확인"""
    return ERR_NOT_FOUND in str(exc)
