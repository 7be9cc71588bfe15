from __future__ import annotations

import pytest

from helpers import HOST, SYMBOL, FakePortal
from uonet_session.core.session_store import SessionStore
from uonet_session.models.tenant import TenantCoordinates


@pytest.fixture
def portal() -> FakePortal:
    return FakePortal()


@pytest.fixture
async def transport(portal):
    transport = portal.transport()
    yield transport
    await transport.close()


@pytest.fixture
def store(transport) -> SessionStore:
    return SessionStore(transport.cookies)


@pytest.fixture
def tenant() -> TenantCoordinates:
    return TenantCoordinates(
        scheme="https",
        host=HOST,
        symbol=SYMBOL,
        version="24.04.0004.58722",
        school_id="123456",
    )
