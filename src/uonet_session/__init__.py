"""Authenticated session core for the UONET+ school portal."""

from uonet_session.core.endpoints import EndpointResolver
from uonet_session.core.session_manager import SessionManager
from uonet_session.core.session_store import SessionStore
from uonet_session.core.urls import Site
from uonet_session.login import AuthHandshakeEngine, LoginTypeResolver, ModulePrimer
from uonet_session.models import Credentials, LoginResult, LoginVariant, TenantCoordinates

__all__ = [
    "AuthHandshakeEngine",
    "Credentials",
    "EndpointResolver",
    "LoginResult",
    "LoginTypeResolver",
    "LoginVariant",
    "ModulePrimer",
    "SessionManager",
    "SessionStore",
    "Site",
    "TenantCoordinates",
]
