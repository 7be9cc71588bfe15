"""Detection of the authentication variant a tenant uses."""

from __future__ import annotations

from uonet_session.core.exceptions import UnknownLoginVariantError
from uonet_session.core.logging import get_logger
from uonet_session.core.pages import PageSignature, first_form_action, inspect_page
from uonet_session.core.transport import HttpTransport
from uonet_session.core.urls import UrlGenerator
from uonet_session.models.tenant import LoginVariant, TenantCoordinates

log = get_logger("login_type")

ADFS_LIGHT_CUFS_HOST = "cufs.edu.lublin.eu"


class LoginTypeResolver:
    """Picks a LoginVariant from configuration or by probing the login page."""

    def __init__(self, transport: HttpTransport) -> None:
        self.transport = transport

    async def resolve(
        self,
        tenant: TenantCoordinates,
        explicit: LoginVariant = LoginVariant.AUTO,
    ) -> LoginVariant:
        if explicit != LoginVariant.AUTO:
            return explicit

        url = UrlGenerator(tenant).login_page()
        response = await self.transport.fetch(url)
        variant = self.classify(response.text, tenant.symbol)
        log.info("login_variant_detected", variant=variant.value, host=tenant.host)
        return variant

    @staticmethod
    def classify(html: str, symbol: str) -> LoginVariant:
        """Map login page markup to a variant, in fixed precedence order."""
        page = inspect_page(html)
        if page.has(PageSignature.STANDARD_LOGIN):
            return LoginVariant.STANDARD
        if page.has(PageSignature.ADFS_LOGIN):
            return LoginVariant.ADFS
        if page.has(PageSignature.ADFS_LIGHT_LOGIN):
            action = first_form_action(html)
            if ADFS_LIGHT_CUFS_HOST in action:
                return LoginVariant.ADFS_LIGHT_CUFS
            if action.startswith("/LoginPage.aspx"):
                return LoginVariant.ADFS_LIGHT
            if action.startswith(f"/{symbol}/LoginPage.aspx"):
                return LoginVariant.ADFS_LIGHT_SCOPED
            raise UnknownLoginVariantError(
                f"Unknown ADFS light form action: {action!r}", title=page.title
            )
        if page.has(PageSignature.ADFS_CARDS_LOGIN):
            return LoginVariant.ADFS_CARDS
        raise UnknownLoginVariantError(f"Unknown login page: '{page.title}'", title=page.title)
