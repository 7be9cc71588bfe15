"""Portal URL construction: sites, realms and parameter encoding."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from urllib.parse import quote_plus

from uonet_session.models.tenant import TenantCoordinates


class Site(StrEnum):
    """Sub-applications of the portal, each on its own host prefix."""

    LOGIN = "cufs"
    HOME = "uonetplus"
    STUDENT = "uonetplus-uczen"
    STUDENT_PLUS = "uonetplus-uczenplus"
    MESSAGES = "uonetplus-wiadomosciplus"

    @property
    def is_student(self) -> bool:
        return self in (Site.STUDENT, Site.STUDENT_PLUS)


def encode(value: str) -> str:
    """Percent-encode a single URL parameter value (form encoding, space -> +)."""
    return quote_plus(value, safe="")


def utc_timestamp(now: datetime | None = None) -> str:
    """UTC instant with second precision, e.g. ``2024-05-01T10:00:00Z``."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class UrlGenerator:
    """Builds tenant-specific URLs for every site."""

    def __init__(self, tenant: TenantCoordinates) -> None:
        self.tenant = tenant

    @property
    def symbol(self) -> str:
        return self.tenant.symbol

    def host_for(self, prefix: str) -> str:
        return f"{prefix}{self.tenant.domain_suffix}.{self.tenant.host}"

    def origin(self, site: Site) -> str:
        return f"{self.tenant.scheme}://{self.host_for(site.value)}"

    def generate(self, site: Site) -> str:
        url = f"{self.origin(site)}/{self.symbol}/"
        if site.is_student and self.tenant.school_id:
            url += f"{self.tenant.school_id}/"
        return url

    def referer(self, site: Site) -> str:
        return f"{self.origin(site)}/"

    def module_entry(self, site: Site) -> str:
        return self.generate(site) + "LoginEndpoint.aspx"

    def login_page(self) -> str:
        return self.generate(Site.LOGIN) + "Account/LogOn"
