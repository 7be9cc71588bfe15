"""Login variant detection, handshake and module priming."""

from uonet_session.login.handshake import AuthHandshakeEngine
from uonet_session.login.login_type import LoginTypeResolver
from uonet_session.login.module_primer import ModulePrimer

__all__ = ["AuthHandshakeEngine", "LoginTypeResolver", "ModulePrimer"]
