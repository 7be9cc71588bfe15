"""Fake portal and HTML builders shared by the test modules."""

from __future__ import annotations

import inspect
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.parse import parse_qs

import httpx

from uonet_session.core.transport import HttpTransport

HOST = "fakelog.cf"
SYMBOL = "powiatwulkanowy"
CUFS = f"https://cufs.{HOST}/{SYMBOL}"
HOME_ENDPOINT = f"https://uonetplus.{HOST}/{SYMBOL}/LoginEndpoint.aspx"
STUDENT_URL = f"https://uonetplus-uczen.{HOST}/{SYMBOL}/123456/Start"
FIXED_NOW = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)


class FakePortal:
    """Routes requests by method and URL without query string."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        body: str | Callable[[httpx.Request], Any] = "",
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        if callable(body):
            self.routes[(method, url)] = body
        else:
            self.routes[(method, url)] = lambda request: httpx.Response(
                status, html=body, headers=headers
            )

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, html="<title>Not found</title>")
        response = route(request)
        if inspect.isawaitable(response):
            response = await response
        return response

    def calls(self, method: str, url: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method
            and f"{r.url.scheme}://{r.url.host}{r.url.path}" == url
        ]

    def transport(self) -> HttpTransport:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler),
            follow_redirects=True,
        )
        return HttpTransport(client=client)


def form_of(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def certificate_page(action: str, title: str = "Working...", wctx: str = "ctx") -> str:
    return f"""
    <html><head><title>{title}</title></head><body>
    <form method="POST" name="hiddenform" action="{action}">
        <input type="hidden" name="wa" value="wsignin1.0" />
        <input type="hidden" name="wresult" value="trust-token" />
        <input type="hidden" name="wctx" value="{wctx}" />
        <noscript><p>Script is disabled. Click Submit to continue.</p>
        <input type="submit" value="Submit" /></noscript>
    </form></body></html>
    """


def landing_page(*links: str, extra: str = "") -> str:
    anchors = "".join(f'<a href="{link}">Uczeń</a>' for link in links)
    return f"""
    <html><head><title>Uonet+</title></head><body>
    <div class="panel linkownia pracownik klient">{anchors}</div>
    {extra}
    </body></html>
    """


STANDARD_LOGIN_PAGE = """
<html><head><title>Logowanie (powiatwulkanowy)</title></head><body>
<div class="LogOnBoard">
    <form method="post"><input type="text" name="LoginName" />
    <input type="password" name="Password" />
    <input type="submit" value="Zaloguj się" /></form>
</div></body></html>
"""

BAD_CREDENTIALS_PAGE = """
<html><head><title>Logowanie (powiatwulkanowy)</title></head><body>
<div class="LogOnBoard">
    <div class="ErrorMessage center">Zła nazwa użytkownika lub hasło.</div>
    <input type="submit" value="Zaloguj się" />
</div></body></html>
"""

ADFS_LOGIN_PAGE = """
<html><head><title>Logowanie</title></head><body>
<form name="form1" method="post" action="/adfs/ls/?wa=wsignin1.0">
    <input type="submit" id="SubmitButton" value="Zaloguj" />
</form></body></html>
"""


def adfs_light_page(action: str) -> str:
    return f"""
    <html><head><title>Logowanie</title></head><body>
    <form method="post" action="{action}">
        <input type="text" name="Username" /><input type="password" name="Password" />
        <input type="image" class="submit-button" />
    </form></body></html>
    """


ADFS_CARDS_PAGE = """
<html><head><title>Logowanie eSzkola</title></head><body>
<form method="post" action="/adfs/ls/?wa=wsignin1.0&amp;wtrealm=x" id="form1">
    <input type="hidden" name="__db" value="15" />
    <input type="hidden" name="__VIEWSTATE" id="__VIEWSTATE" value="viewstate-value" />
    <input type="hidden" name="__VIEWSTATEGENERATOR" id="__VIEWSTATEGENERATOR" value="C2EE9ABB" />
    <input type="hidden" name="__EVENTVALIDATION" id="__EVENTVALIDATION" value="event-value" />
    <input type="submit" id="PassiveSignInButton" value="Zaloguj" />
</form></body></html>
"""
