"""Settings 모듈 - 환경변수 기반

설정 우선순위:
    1. 환경변수 (최우선) - export SCHEMA_REGISTRY_URL=...
    2. .env 파일 - config/.env
    3. 코드 기본값

사용 예시:
    # 개발 환경 (기본값 사용)
    schema-registry-helper latest orders
    # → http://localhost:8081

    # 인증이 필요한 레지스트리 (Confluent Cloud 등)
    export SCHEMA_REGISTRY_URL=https://psrc-xxxx.confluent.cloud
    export SCHEMA_REGISTRY_USERNAME=...
    export SCHEMA_REGISTRY_PASSWORD=...
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# 설정 파일 경로
config_dir = Path(__file__).parent


def env_settings(prefix: str) -> SettingsConfigDict:
    """환경변수 + .env 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: SCHEMA_REGISTRY_, LOG_)
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class SchemaRegistrySettings(BaseSettings):
    """Schema Registry 접속 설정

    환경변수 오버라이드:
        SCHEMA_REGISTRY_URL: 레지스트리 주소 (기본: http://localhost:8081)
        SCHEMA_REGISTRY_USERNAME: Basic 인증 사용자 (선택)
        SCHEMA_REGISTRY_PASSWORD: Basic 인증 비밀번호 (선택, 환경변수 권장)
        SCHEMA_REGISTRY_TIMEOUT: HTTP 타임아웃 초 (기본: 5.0)
        SCHEMA_REGISTRY_CACHING_ENABLED: 캐시 사용 여부 (기본: true)
    """

    url: str = "http://localhost:8081"
    username: str | None = None
    password: str | None = None
    timeout: float = 5.0
    caching_enabled: bool = True

    model_config = env_settings("SCHEMA_REGISTRY_")

    @property
    def auth(self) -> tuple[str, str] | None:
        """username/password 가 모두 있을 때만 인증 튜플 반환"""
        if self.username and self.password:
            return (self.username, self.password)
        return None


class LoggingSettings(BaseSettings):
    """로깅 설정

    환경변수 오버라이드:
        LOG_LEVEL: 로깅 레벨 (기본: INFO)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
        LOG_DIR: 로그 디렉토리 (기본: logs)
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"

    model_config = env_settings("LOG_")


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================

registry_settings = SchemaRegistrySettings()
logging_settings = LoggingSettings()
