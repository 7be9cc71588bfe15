"""Per-module handshake importing the session's trust into a module's cookie scope."""

from __future__ import annotations

import asyncio

from uonet_session.core.exceptions import SessionResetError, UnknownModuleStateError
from uonet_session.core.logging import get_logger
from uonet_session.core.pages import PageSignature, inspect_page, parse_certificate
from uonet_session.core.session_store import SessionStore
from uonet_session.core.transport import HttpTransport
from uonet_session.core.urls import Site, UrlGenerator

log = get_logger("module_primer")


class ModulePrimer:
    """Primes each module at most once per session generation."""

    def __init__(self, transport: HttpTransport, store: SessionStore, urls: UrlGenerator) -> None:
        self.transport = transport
        self.store = store
        self.urls = urls
        self._site_locks: dict[Site, asyncio.Lock] = {}

    async def prime(self, site: Site) -> None:
        lock = self._site_locks.setdefault(site, asyncio.Lock())
        async with lock:
            generation, primed = await self.store.snapshot(site.value)
            if primed:
                log.debug("module_already_primed", site=site.value)
                return
            await self._handshake(site)
            try:
                await self.store.mark_primed(site.value, generation)
            except SessionResetError:
                # Cookies the handshake just stored belong to the previous session
                self.store.discard_domain(self.urls.host_for(site.value))
                raise

    async def _handshake(self, site: Site) -> None:
        start = await self.transport.fetch(self.urls.module_entry(site))
        start_page = inspect_page(start.text)
        if not start_page.has(PageSignature.MODULE_HANDSHAKE):
            log.debug("module_cookies_present", site=site.value)
            return

        token = parse_certificate(start.text)
        if not token.action.strip():
            raise UnknownModuleStateError(
                f"Module handshake page without certificate form: {start_page.title}",
                title=start_page.title,
            )
        response = await self.transport.post_form(
            token.action,
            token.fields(),
            headers={"Referer": self.urls.referer(site)},
        )
        page = inspect_page(response.text)
        if not page.has(PageSignature.MODULE_READY):
            raise UnknownModuleStateError(
                f"Unknown module start page: {page.title}", title=page.title
            )
        log.debug("module_cookies_fetched", site=site.value)
