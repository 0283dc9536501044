"""
Schema Registry 명령줄 도구

사용 예시:
  # 스키마 export (이미 있으면 기존 버전, 없으면 새로 등록)
  schema-registry-helper export orders.avsc --topic orders

  # ID 로 스키마 조회
  schema-registry-helper get 42

  # 최신 스키마 / 버전 목록 조회
  schema-registry-helper latest orders
  schema-registry-helper versions orders --key

  # 등록 여부 확인
  schema-registry-helper check orders.proto --subject orders --type PROTOBUF
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import asdict
from pathlib import Path

import orjson

from schema_registry_helper.config.settings import registry_settings
from schema_registry_helper.registry.client import SchemaRegistryClient
from schema_registry_helper.registry.exceptions import SchemaRegistryError, is_not_found
from schema_registry_helper.registry.export import export_schema_file
from schema_registry_helper.registry.models import SchemaType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema-registry-helper",
        description="Schema Registry 스키마 조회/등록 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--url", help=f"레지스트리 주소 (기본: {registry_settings.url})")
    parser.add_argument("--username", help="Basic 인증 사용자")
    parser.add_argument("--password", help="Basic 인증 비밀번호")
    parser.add_argument("--timeout", type=float, help="HTTP 타임아웃 (초)")

    subparsers = parser.add_subparsers(dest="command", help="사용 가능한 명령어")

    export_parser = subparsers.add_parser("export", help="스키마 export (check-then-create)")
    export_parser.add_argument("file", help="스키마 파일 경로")
    export_parser.add_argument("--topic", "-t", required=True, help="토픽 이름")
    _add_type_and_key(export_parser)

    check_parser = subparsers.add_parser("check", help="스키마 등록 여부 확인")
    check_parser.add_argument("file", help="스키마 파일 경로")
    check_parser.add_argument("--subject", "-s", required=True, help="subject 이름")
    _add_type_and_key(check_parser)

    get_parser = subparsers.add_parser("get", help="ID 로 스키마 조회")
    get_parser.add_argument("id", type=int, help="스키마 ID")

    latest_parser = subparsers.add_parser("latest", help="최신 스키마 조회")
    latest_parser.add_argument("subject", help="subject 이름")
    latest_parser.add_argument("--key", action="store_true", help="키 스키마 여부")

    versions_parser = subparsers.add_parser("versions", help="버전 목록 조회")
    versions_parser.add_argument("subject", help="subject 이름")
    versions_parser.add_argument("--key", action="store_true", help="키 스키마 여부")

    return parser


def _add_type_and_key(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type",
        dest="schema_type",
        type=SchemaType,
        choices=list(SchemaType),
        default=SchemaType.AVRO,
        help="스키마 타입 (기본: AVRO)",
    )
    parser.add_argument("--key", action="store_true", help="키 스키마 여부")


def create_client(args: argparse.Namespace) -> SchemaRegistryClient:
    client = SchemaRegistryClient.from_settings()
    if args.url:
        client.base_url = args.url.rstrip("/")
    if args.username and args.password:
        client.set_credentials(args.username, args.password)
    if args.timeout:
        client.set_timeout(args.timeout)
    return client


async def run(args: argparse.Namespace) -> None:
    async with create_client(args) as client:
        if args.command == "export":
            version = await export_schema_file(
                args.file, args.topic, args.schema_type, client, args.key
            )
            print(f"✅ export 완료: topic={args.topic}, version={version}")

        elif args.command == "check":
            schema = Path(args.file).read_text(encoding="utf-8")
            try:
                info = await client.check_schema(
                    args.subject, schema, args.schema_type, args.key
                )
            except SchemaRegistryError as e:
                if not is_not_found(e):
                    raise
                print(f"📭 등록되지 않은 스키마입니다: {e}")
                return
            print(f"✅ 등록된 스키마: id={info.id}, version={info.version}")

        elif args.command == "get":
            schema = await client.get_schema(args.id)
            print(orjson.dumps(asdict(schema)).decode())

        elif args.command == "latest":
            schema = await client.get_latest_schema(args.subject, args.key)
            print(orjson.dumps(asdict(schema)).decode())

        elif args.command == "versions":
            versions = await client.get_schema_versions(args.subject, args.key)
            print(orjson.dumps(versions).decode())


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        asyncio.run(run(args))
    except (SchemaRegistryError, FileNotFoundError) as e:
        print(f"❌ 요청 실패: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
