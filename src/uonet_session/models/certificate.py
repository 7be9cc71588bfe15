"""Intermediate artifacts of the WS-Federation style token relay."""

from __future__ import annotations

from pydantic import BaseModel


class CertificateToken(BaseModel):
    """Hidden form relayed between the login subsystem and a module."""

    action: str = ""
    wa: str = ""
    wresult: str = ""
    wctx: str = ""
    title: str = ""
    html: str = ""

    def fields(self) -> dict[str, str]:
        return {"wa": self.wa, "wresult": self.wresult, "wctx": self.wctx}

    def diagnostic(self) -> str:
        return self.title.strip() or self.html.strip()[:32]


class AnonymousForm(BaseModel):
    """Anonymous ASP.NET login form, harvested before submitting credentials."""

    action: str = ""
    title: str = ""
    db: str = ""
    viewstate: str = ""
    viewstate_generator: str = ""
    event_validation: str = ""
