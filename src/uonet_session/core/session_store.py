"""Session state shared by the login handshake and module priming.

Cookies live in the transport's jar; this store owns their lifecycle together
with a generation counter that scopes the per-module "primed" flags. Every
login bumps the generation, so flags recorded for an older session are never
observed again.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx

from uonet_session.core.exceptions import SessionResetError
from uonet_session.core.logging import get_logger

log = get_logger("session")


@dataclass
class SessionState:
    generation: int = 0
    primed: dict[str, int] = field(default_factory=dict)  # module -> generation


class SessionStore:
    """Owns cookie state and per-module priming flags for one user session."""

    def __init__(self, cookies: httpx.Cookies | None = None) -> None:
        self.cookies = cookies if cookies is not None else httpx.Cookies()
        self.state = SessionState()
        self._lock = asyncio.Lock()

    @property
    def generation(self) -> int:
        return self.state.generation

    async def reset(self) -> int:
        """Clear every cookie and start a new generation. Returns the new generation."""
        async with self._lock:
            self.cookies.clear()
            self.state.generation += 1
            self.state.primed.clear()
            log.debug("session_reset", generation=self.state.generation)
            return self.state.generation

    def discard_cookies(self) -> None:
        """Drop cookies without waiting for the lock.

        Used when a login is aborted (including cancellation) after ``reset``
        already started the new generation.
        """
        self.cookies.clear()
        self.state.primed.clear()

    def discard_domain(self, domain: str) -> None:
        """Drop every cookie set for ``domain``."""
        stale = [c for c in self.cookies.jar if c.domain.lstrip(".") == domain.lstrip(".")]
        for cookie in stale:
            self.cookies.jar.clear(cookie.domain, cookie.path, cookie.name)
        if stale:
            log.debug("domain_cookies_discarded", domain=domain, count=len(stale))

    def cookies_for(self, domain: str) -> dict[str, str]:
        return {
            cookie.name: cookie.value or ""
            for cookie in self.cookies.jar
            if cookie.domain.lstrip(".") == domain.lstrip(".")
        }

    async def is_primed(self, module: str) -> bool:
        async with self._lock:
            return self.state.primed.get(module) == self.state.generation

    async def snapshot(self, module: str) -> tuple[int, bool]:
        """Return the current generation and whether ``module`` is primed in it."""
        async with self._lock:
            generation = self.state.generation
            return generation, self.state.primed.get(module) == generation

    async def mark_primed(self, module: str, generation: int | None = None) -> None:
        """Record ``module`` as primed.

        When ``generation`` is given it must still be current; otherwise a
        reset happened while priming was in flight and SessionResetError is
        raised instead of recording a stale flag.
        """
        async with self._lock:
            if generation is not None and generation != self.state.generation:
                raise SessionResetError(
                    f"Session was reset while priming {module} "
                    f"(started in generation {generation}, now {self.state.generation})"
                )
            self.state.primed[module] = self.state.generation
            log.debug("module_primed", module=module, generation=self.state.generation)
