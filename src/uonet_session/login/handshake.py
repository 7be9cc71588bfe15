"""Multi-step authentication handshake.

Each login variant only differs in how credentials are submitted and how many
realm hops follow; every variant ends with the same hidden certificate form,
which is posted to its action to obtain the landing page.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import httpx

from uonet_session.core.exceptions import (
    AccountInactiveError,
    BadCredentialsError,
    InvalidHandshakeResponseError,
    LoginVariantNotResolvedError,
    ServiceUnavailableError,
)
from uonet_session.core.logging import get_logger
from uonet_session.core.pages import (
    PageInspection,
    PageSignature,
    extract_student_schools,
    inspect_page,
    parse_anonymous_form,
    parse_certificate,
)
from uonet_session.core.session_store import SessionStore
from uonet_session.core.transport import HttpTransport, PageResponse
from uonet_session.core.urls import Site, UrlGenerator, encode, utc_timestamp
from uonet_session.models.certificate import CertificateToken
from uonet_session.models.login import LoginResult
from uonet_session.models.tenant import Credentials, LoginVariant, TenantCoordinates

log = get_logger("handshake")

# Hosts whose ADFS expects a domain-qualified login
ADFS_LOGIN_PREFIXES: dict[str, str] = {
    "umt.tarnow.pl": "EDUNET",
    "eduportal.koszalin.pl": "EDUPORTAL",
    "eszkola.opolskie.pl": "EDUPORTAL",
}
# Hosts advertised as ADFS that actually run the light CUFS exchange
ADFS_AS_LIGHT_CUFS_HOSTS = frozenset({"edu.gdansk.pl"})

STANDARD_REALM_HOP = "uonetplus-logowanie"
LIGHT_REALM_HOP = "dziennik-logowanie"


def normalize_adfs_login(login: str, prefix: str) -> str:
    if "@" in login or "\\" in login:
        return login
    return f"{prefix}\\{login}"


def detect_edu_one(student_schools: list[str]) -> bool:
    """True when the first student module routes to the student-plus backend."""
    if not student_schools:
        return False
    host = httpx.URL(student_schools[0]).host
    return host.startswith(Site.STUDENT_PLUS.value)


class AuthHandshakeEngine:
    """Executes a variant-specific credential exchange and validates the result."""

    def __init__(
        self,
        transport: HttpTransport,
        store: SessionStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.transport = transport
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    async def login(
        self,
        tenant: TenantCoordinates,
        credentials: Credentials,
        variant: LoginVariant,
    ) -> LoginResult:
        if variant == LoginVariant.AUTO:
            raise LoginVariantNotResolvedError(
                "Login variant must be resolved before logging in"
            )

        # Accumulated stale cookies make the portal reject requests as too large
        await self.store.reset()
        try:
            return await self._login(UrlGenerator(tenant), credentials, variant)
        except BaseException:
            self.store.discard_cookies()
            raise

    async def logout(self) -> None:
        await self.store.reset()
        log.info("logged_out")

    # ------------------------------------------------------------------
    # Common sequence
    # ------------------------------------------------------------------

    async def _login(
        self,
        urls: UrlGenerator,
        credentials: Credentials,
        variant: LoginVariant,
    ) -> LoginResult:
        log.info("login_started", variant=variant.value, host=urls.tenant.host, symbol=urls.symbol)
        token = await self._send_credentials(urls, credentials, variant)
        if not token.action.strip():
            raise InvalidHandshakeResponseError(
                f"Invalid certificate page: '{token.diagnostic()}'. Try again",
                snippet=token.diagnostic(),
            )
        self._check_credentials_error(inspect_page(token.html))

        landing = await self._send_certificate(urls, token, credentials)
        student_schools = extract_student_schools(landing.text)
        if not student_schools:
            self._check_landing_errors(inspect_page(landing.text))

        is_edu_one = detect_edu_one(student_schools)
        log.info(
            "login_completed",
            variant=variant.value,
            schools=len(student_schools),
            edu_one=is_edu_one,
        )
        return LoginResult(is_edu_one=is_edu_one, student_schools=student_schools)

    async def _send_certificate(
        self,
        urls: UrlGenerator,
        token: CertificateToken,
        credentials: Credentials,
    ) -> PageResponse:
        response = await self.transport.post_form(
            token.action,
            token.fields(),
            headers={"Referer": urls.referer(Site.LOGIN)},
        )
        if credentials.switch_target:
            await self.transport.fetch(f"{token.action}?rebuild={encode(credentials.switch_target)}")
            log.debug("login_switched")
        return response

    @staticmethod
    def _check_credentials_error(page: PageInspection) -> None:
        if not page.has(PageSignature.ERROR_BANNER):
            return
        # A pending certificate form means the banner is left over on a redirect page
        if page.has(PageSignature.CERTIFICATE):
            log.warning("unexpected_login_page", title=page.title)
            return
        raise BadCredentialsError(page.error_message)

    @staticmethod
    def _check_landing_errors(page: PageInspection) -> None:
        if page.has(PageSignature.ACCOUNT_INACTIVE):
            raise AccountInactiveError(page.banner_message)
        if page.has(PageSignature.SERVICE_UNAVAILABLE):
            raise ServiceUnavailableError(page.banner_message)

    # ------------------------------------------------------------------
    # Variant dispatch
    # ------------------------------------------------------------------

    async def _send_credentials(
        self,
        urls: UrlGenerator,
        credentials: Credentials,
        variant: LoginVariant,
    ) -> CertificateToken:
        login = credentials.submitted_login
        password = credentials.password.get_secret_value()
        host = urls.tenant.host

        match variant:
            case LoginVariant.STANDARD:
                return await self._send_standard(urls, login, password)
            case LoginVariant.ADFS:
                if host in ADFS_AS_LIGHT_CUFS_HOSTS:
                    return await self._send_adfs_light(
                        urls, login, password, LoginVariant.ADFS_LIGHT_CUFS
                    )
                prefix = ADFS_LOGIN_PREFIXES.get(host)
                if prefix:
                    login = normalize_adfs_login(login, prefix)
                return await self._send_adfs(urls, login, password)
            case LoginVariant.ADFS_LIGHT | LoginVariant.ADFS_LIGHT_SCOPED | LoginVariant.ADFS_LIGHT_CUFS:
                return await self._send_adfs_light(urls, login, password, variant)
            case LoginVariant.ADFS_CARDS:
                return await self._send_adfs_cards(urls, login, password)
        raise LoginVariantNotResolvedError(f"Unsupported login variant: {variant}")

    async def _send_standard(self, urls: UrlGenerator, login: str, password: str) -> CertificateToken:
        return_url = self._realm_return_url(urls, STANDARD_REALM_HOP)
        url = urls.generate(Site.LOGIN) + "Account/LogOn?ReturnUrl=" + encode(return_url)
        token = await self._submit(url, {"LoginName": login, "Password": password})
        if STANDARD_REALM_HOP in token.action:
            return await self._follow(token)
        return token

    async def _send_adfs(self, urls: UrlGenerator, login: str, password: str) -> CertificateToken:
        token = await self._submit(
            self._adfs_url(urls, LoginVariant.ADFS),
            {
                "UserName": login,
                "Password": password,
                "AuthMethod": "FormsAuthentication",
            },
        )
        return await self._follow(token)

    async def _send_adfs_light(
        self,
        urls: UrlGenerator,
        login: str,
        password: str,
        variant: LoginVariant,
    ) -> CertificateToken:
        token = await self._submit(
            self._adfs_url(urls, variant),
            {"Username": login, "Password": password, "x": "0", "y": "0"},
        )
        log.debug(
            "credentials_sent",
            title=token.title,
            action=token.action,
            wresult_length=len(token.wresult),
        )
        token = await self._follow(token)
        if LIGHT_REALM_HOP in token.action:
            return await self._follow(token)
        return token

    async def _send_adfs_cards(self, urls: UrlGenerator, login: str, password: str) -> CertificateToken:
        response = await self.transport.fetch(self._adfs_url(urls, LoginVariant.ADFS_CARDS))
        form = parse_anonymous_form(response.text)
        if not form.action.strip():
            raise InvalidHandshakeResponseError(
                f"Invalid ADFS login page: '{form.title}'. Try again", snippet=form.title
            )

        scheme, host = urls.tenant.scheme, urls.tenant.host
        token = await self._submit(
            f"{scheme}://adfs.{host}/{form.action.lstrip('/')}",
            {
                "__db": form.db,
                "__VIEWSTATE": form.viewstate,
                "__VIEWSTATEGENERATOR": form.viewstate_generator,
                "__EVENTVALIDATION": form.event_validation,
                "UsernameTextBox": login,
                "PasswordTextBox": password,
                "SubmitButton.x": "0",
                "SubmitButton.y": "0",
            },
        )
        return await self._follow(token)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _submit(self, url: str, fields: dict[str, str]) -> CertificateToken:
        """Post credentials and fail fast on a reported authentication error."""
        response = await self.transport.post_form(url, fields)
        self._check_credentials_error(inspect_page(response.text))
        return parse_certificate(response.text)

    async def _follow(self, token: CertificateToken) -> CertificateToken:
        """Relay a certificate to its action and parse the next one."""
        if not token.action.strip():
            return token
        response = await self.transport.post_form(token.action, token.fields())
        return parse_certificate(response.text)

    def _timestamp(self) -> str:
        return utc_timestamp(self._clock())

    def _realm_return_url(self, urls: UrlGenerator, hop_prefix: str) -> str:
        scheme, symbol = urls.tenant.scheme, urls.symbol
        target_realm = encode(f"{scheme}://{urls.host_for(Site.HOME.value)}/{symbol}/LoginEndpoint.aspx")
        intermediate_path = (
            f"/{symbol}/FS/LS?wa=wsignin1.0"
            f"&wtrealm={target_realm}"
            f"&wctx={encode('auth=uonet')}"
        )
        intermediate_realm = encode(f"{scheme}://{urls.host_for(hop_prefix)}{intermediate_path}")
        return (
            f"/{symbol}/FS/LS?wa=wsignin1.0"
            f"&wtrealm={intermediate_realm}"
            f"&wctx={encode('rm=0&id=')}"
            f"&wct={encode(self._timestamp())}"
        )

    def _adfs_url(self, urls: UrlGenerator, variant: LoginVariant) -> str:
        tenant = urls.tenant
        scheme, host, symbol = tenant.scheme, tenant.host, urls.symbol

        if variant == LoginVariant.ADFS_LIGHT_SCOPED:
            return self._adfs_light_scoped_url(urls)

        realm = encode(f"{scheme}://{urls.host_for(Site.HOME.value)}/{symbol}/LoginEndpoint.aspx")
        ctx = encode("auth=uonet") if host == "umt.tarnow.pl" else realm
        first_step = f"/{symbol}/FS/LS?wa=wsignin1.0&wtrealm={realm}&wctx={ctx}"

        match variant:
            case LoginVariant.ADFS:
                realm_id = "ADFS" if host == "eduportal.koszalin.pl" else "adfs"
            case LoginVariant.ADFS_CARDS:
                realm_id = "eSzkola"
            case LoginVariant.ADFS_LIGHT_CUFS:
                realm_id = "AdfsLight"
            case _:
                realm_id = "ADFS"

        port = ":443" if scheme == "https" else ""
        query = (
            "?wa=wsignin1.0"
            "&wtrealm=" + encode(f"{scheme}://{urls.host_for(Site.LOGIN.value)}{port}/{symbol}/Account/LogOn")
            + "&wctx=" + encode(f"rm=0&id={realm_id}&ru=" + encode(first_step))
            + "&wct=" + encode(self._timestamp())
        )

        match variant:
            case LoginVariant.ADFS_LIGHT:
                return f"{scheme}://adfslight.{host}/LoginPage.aspx?ReturnUrl=" + encode(f"/{query}")
            case LoginVariant.ADFS_LIGHT_CUFS:
                return f"{scheme}://logowanie.{host}/LoginPage.aspx?ReturnUrl=" + encode(f"/{query}")
            case _:
                return f"{scheme}://adfs.{host}/adfs/ls/{query}"

    def _adfs_light_scoped_url(self, urls: UrlGenerator) -> str:
        tenant = urls.tenant
        scheme, host, symbol = tenant.scheme, tenant.host, urls.symbol
        return_url = self._realm_return_url(urls, LIGHT_REALM_HOP)
        realm_id = "AdfsLight" if symbol == "rzeszowprojekt" else "ADFSLight"
        query = (
            "?wa=wsignin1.0"
            f"&wtrealm={encode(f'https://{urls.host_for(Site.LOGIN.value)}/{symbol}/Account/LogOn')}"
            f"&wctx={encode(f'rm=0&id={realm_id}&ru=' + encode(return_url))}"
            f"&wct={encode(self._timestamp())}"
        )
        return (
            f"{scheme}://adfslight.{host}/{symbol}/LoginPage.aspx?ReturnUrl="
            + encode(f"/{symbol}/Default.aspx{query}")
        )
