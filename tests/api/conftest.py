"""API test fixtures — FastAPI test client with a fake host resolver.

Invariants:
    - No test reaches the OS resolver: get_host_resolver is always overridden
    - Overrides are cleared after each test

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises routing, validation and
      the global error handlers exactly as deployed
"""

import pytest
from httpx import ASGITransport, AsyncClient

from repltopo.api.routes.topology import get_host_resolver
from repltopo.core.errors import HostResolutionError
from repltopo.main import app


class FakeResolver:
    def __init__(self):
        self.names = {"db1": "db1.prod.example.com."}

    def resolve_canonical_name(self, host: str) -> str:
        if host not in self.names:
            raise HostResolutionError(host, "no such host")
        return self.names[host]


@pytest.fixture
def fake_resolver():
    return FakeResolver()


@pytest.fixture
async def client(fake_resolver):
    app.dependency_overrides[get_host_resolver] = lambda: fake_resolver
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
