"""Shared pytest fixtures.

The provider is replaced with an in-memory fake so no test touches the network.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from fakes import FakeGenerator
from prompt_tester.web_app import app, get_generator


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
async def client(fake_generator):
    """Async test client with the provider replaced by `fake_generator`."""
    app.dependency_overrides[get_generator] = lambda: fake_generator
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
