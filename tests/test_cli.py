from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import orjson
import pytest

from schema_registry_helper import cli
from schema_registry_helper.registry.exceptions import NotFoundError, RegistryError
from schema_registry_helper.registry.models import Schema, SchemaResponse, SchemaType


class StubClient:
    """cli.run 이 사용하는 메서드만 흉내내는 클라이언트"""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.check_error: Exception | None = None

    async def __aenter__(self) -> StubClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    async def get_schema(self, schema_id: int) -> Schema:
        self.calls.append(("get_schema", (schema_id,)))
        return Schema(id=schema_id, schema='"string"')

    async def get_latest_schema(self, subject: str, is_key: bool = False) -> Schema:
        self.calls.append(("get_latest_schema", (subject, is_key)))
        return Schema(id=7, schema='"string"', version=3)

    async def get_schema_versions(self, subject: str, is_key: bool = False) -> list[int]:
        self.calls.append(("get_schema_versions", (subject, is_key)))
        return [1, 2, 3]

    async def check_schema(
        self, subject: str, schema: str, schema_type: SchemaType, is_key: bool = False
    ) -> SchemaResponse:
        self.calls.append(("check_schema", (subject, schema_type, is_key)))
        if self.check_error is not None:
            raise self.check_error
        return SchemaResponse(subject=f"{subject}-value", version=2, id=7, schema=schema)

    async def create_schema(
        self, subject: str, schema: str, schema_type: SchemaType, is_key: bool = False
    ) -> Schema:
        self.calls.append(("create_schema", (subject, schema_type, is_key)))
        return Schema(id=8, schema=schema, version=4)


@pytest.fixture
def stub(monkeypatch: pytest.MonkeyPatch) -> StubClient:
    client = StubClient()

    def _create_client(args: argparse.Namespace) -> StubClient:
        return client

    monkeypatch.setattr(cli, "create_client", _create_client)
    return client


def test_get_prints_schema_json(stub: StubClient, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["get", "42"])

    out = orjson.loads(capsys.readouterr().out)
    assert out == {"id": 42, "schema": '"string"', "version": None}


def test_latest_and_versions(stub: StubClient, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["latest", "orders", "--key"])
    cli.main(["versions", "orders"])

    lines = capsys.readouterr().out.splitlines()
    assert orjson.loads(lines[0])["version"] == 3
    assert orjson.loads(lines[1]) == [1, 2, 3]
    assert stub.calls == [
        ("get_latest_schema", ("orders", True)),
        ("get_schema_versions", ("orders", False)),
    ]


def test_export_creates_when_absent(
    tmp_path: Path, stub: StubClient, capsys: pytest.CaptureFixture[str]
) -> None:
    schema_file = tmp_path / "orders.proto"
    schema_file.write_text('syntax = "proto3";\n', encoding="utf-8")
    stub.check_error = NotFoundError(404, "Not Found", "Subject 'orders-value' not found.")

    cli.main(["export", str(schema_file), "--topic", "orders", "--type", "PROTOBUF"])

    assert "version=4" in capsys.readouterr().out
    assert stub.calls[-1] == ("create_schema", ("orders", SchemaType.PROTOBUF, False))


def test_check_reports_absence(
    tmp_path: Path, stub: StubClient, capsys: pytest.CaptureFixture[str]
) -> None:
    schema_file = tmp_path / "orders.avsc"
    schema_file.write_text('"string"', encoding="utf-8")
    stub.check_error = NotFoundError(404, "Not Found", "Schema not found")

    cli.main(["check", str(schema_file), "--subject", "orders"])

    assert "404 Not Found" in capsys.readouterr().out


def test_registry_error_exits_with_status_1(
    tmp_path: Path, stub: StubClient, capsys: pytest.CaptureFixture[str]
) -> None:
    schema_file = tmp_path / "orders.avsc"
    schema_file.write_text('"string"', encoding="utf-8")
    stub.check_error = RegistryError(500, "Internal Server Error")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["export", str(schema_file), "--topic", "orders"])

    assert exc_info.value.code == 1
    assert "500 Internal Server Error" in capsys.readouterr().err


def test_create_client_applies_overrides() -> None:
    args = cli.build_parser().parse_args(
        ["--url", "http://registry:8081/", "--timeout", "1.5", "versions", "orders"]
    )

    client = cli.create_client(args)

    assert client.base_url == "http://registry:8081"
    assert client.timeout == 1.5


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main([])

    assert "usage: schema-registry-helper" in capsys.readouterr().out
