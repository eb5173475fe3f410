"""
Pytest configuration for CRM FetchKit.

Provides fixtures for:
- Settings isolated from the developer's environment and .env file
- Clients wired to a simulated Organization service (httpx.MockTransport)
"""

from __future__ import annotations

from typing import Callable, Generator, List

import pytest

from crm_fetchkit.client import CrmFetchKit
from crm_fetchkit.config import Settings
from tests.soap_fixtures import SERVER_URL, FakeCrmServer

TEST_MAX_PAGES = 50


@pytest.fixture()
def test_settings() -> Settings:
    """
    Settings fixture with test-specific values; ignores .env on purpose.
    """
    return Settings(
        _env_file=None,
        crm_server_url=SERVER_URL,
        crm_timeout_seconds=5.0,
        crm_max_pages=TEST_MAX_PAGES,
        log_level="DEBUG",
    )


@pytest.fixture()
def make_kit(
    test_settings: Settings,
) -> Generator[Callable[..., CrmFetchKit], None, None]:
    """
    Factory building a CrmFetchKit that talks to a FakeCrmServer.

    Sync clients are closed on teardown; async tests should use ``async with``.
    """
    created: List[CrmFetchKit] = []

    def _make(server: FakeCrmServer, **kwargs) -> CrmFetchKit:
        kwargs.setdefault("settings", test_settings)
        transport = server.transport
        kit = CrmFetchKit(transport=transport, async_transport=transport, **kwargs)
        created.append(kit)
        return kit

    yield _make

    for kit in created:
        kit.close()
