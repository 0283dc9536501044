from __future__ import annotations

import threading
from typing import Generic, TypeVar

from schema_registry_helper.registry.models import Schema

K = TypeVar("K")


class SchemaCache(Generic[K]):
    """락으로 보호되는 추가 전용(append-only) 스키마 캐시.

    항목은 늘어나기만 하고 프로세스 내에서 무효화되지 않습니다.
    같은 키에 대한 동시 미스는 각자 네트워크를 호출할 수 있습니다 (키 단위 락 없음).
    """

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._entries: dict[K, Schema] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Schema | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: K, schema: Schema) -> None:
        with self._lock:
            self._entries[key] = schema

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
