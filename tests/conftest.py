from __future__ import annotations

import pytest_asyncio
from aiohttp.test_utils import TestServer

from schema_registry_helper.registry.client import SchemaRegistryClient
from tests.fake_registry import FakeRegistry


@pytest_asyncio.fixture
async def registry() -> FakeRegistry:
    fake = FakeRegistry()
    server = TestServer(fake.build_app())
    await server.start_server()
    fake.url = f"http://{server.host}:{server.port}"
    yield fake
    await server.close()


@pytest_asyncio.fixture
async def client(registry: FakeRegistry) -> SchemaRegistryClient:
    async with SchemaRegistryClient(registry.url) as c:
        yield c
