"""Session lifecycle facade: login, module priming, endpoint lookup, logout."""

from __future__ import annotations

from uonet_session.core.config import AppConfig
from uonet_session.core.endpoints import EndpointResolver
from uonet_session.core.logging import get_logger
from uonet_session.core.session_store import SessionStore
from uonet_session.core.transport import HttpTransport
from uonet_session.core.urls import Site, UrlGenerator
from uonet_session.login.handshake import AuthHandshakeEngine
from uonet_session.login.login_type import LoginTypeResolver
from uonet_session.login.module_primer import ModulePrimer
from uonet_session.models.login import LoginResult
from uonet_session.models.tenant import Credentials, LoginVariant, TenantCoordinates

log = get_logger("session_manager")


class SessionManager:
    """Owns one logical user session against one tenant.

    Usage::

        async with SessionManager(config) as session:
            result = await session.login(Credentials(login="jan", password="..."))
            await session.prime(Site.STUDENT)
            endpoint = session.resolve_endpoint(Site.STUDENT, "Oceny")
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        transport: HttpTransport | None = None,
        endpoints: EndpointResolver | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.transport = transport or HttpTransport(self.config.http)
        self.store = SessionStore(self.transport.cookies)
        self.endpoints = endpoints or EndpointResolver()
        self.variant: LoginVariant = self.config.login.variant
        self.login_types = LoginTypeResolver(self.transport)
        self.engine = AuthHandshakeEngine(self.transport, self.store)
        self.primer = ModulePrimer(self.transport, self.store, UrlGenerator(self.tenant))

    @property
    def tenant(self) -> TenantCoordinates:
        return self.config.tenant

    async def __aenter__(self) -> SessionManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def login(self, credentials: Credentials) -> LoginResult:
        """Resolve the login variant if needed, then run the handshake."""
        if self.variant == LoginVariant.AUTO:
            self.variant = await self.login_types.resolve(self.tenant, self.variant)
        result = await self.engine.login(self.tenant, credentials, self.variant)
        log.info("session_established", host=self.tenant.host, symbol=self.tenant.symbol)
        return result

    async def prime(self, site: Site) -> None:
        await self.primer.prime(site)

    def resolve_endpoint(self, module: str, operation: str, vtoken: bool = False) -> str:
        version = self.tenant.version
        if vtoken:
            return self.endpoints.resolve_vtoken(version, module, operation)
        return self.endpoints.resolve(version, module, operation)

    async def logout(self) -> None:
        await self.engine.logout()
