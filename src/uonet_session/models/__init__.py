"""Pydantic data models for tenants, tokens and login results."""

from uonet_session.models.certificate import AnonymousForm, CertificateToken
from uonet_session.models.login import LoginResult
from uonet_session.models.tenant import Credentials, LoginVariant, TenantCoordinates

__all__ = [
    "AnonymousForm",
    "CertificateToken",
    "Credentials",
    "LoginResult",
    "LoginVariant",
    "TenantCoordinates",
]
