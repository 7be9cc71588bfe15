"""Typed recognition of portal pages with selectolax.

Every marker the handshake depends on is declared here once, so new portal
markup only needs a new selector rather than changes at the call sites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from selectolax.parser import HTMLParser, Node

from uonet_session.models.certificate import AnonymousForm, CertificateToken


class PageSignature(StrEnum):
    STANDARD_LOGIN = "standard_login"
    ADFS_LOGIN = "adfs_login"
    ADFS_LIGHT_LOGIN = "adfs_light_login"
    ADFS_CARDS_LOGIN = "adfs_cards_login"
    CERTIFICATE = "certificate"
    ERROR_BANNER = "error_banner"
    ACCOUNT_INACTIVE = "account_inactive"
    SERVICE_UNAVAILABLE = "service_unavailable"
    MODULE_HANDSHAKE = "module_handshake"
    MODULE_READY = "module_ready"


SELECTOR_STANDARD = ".LogOnBoard input[type=submit]"
SELECTOR_ADFS = "form[name=form1] #SubmitButton"
SELECTOR_ADFS_LIGHT = ".submit-button, form #SubmitButton"
SELECTOR_ADFS_CARDS = "#PassiveSignInButton"
SELECTOR_ERROR = ".ErrorMessage, #ErrorTextLabel, #loginArea #errorText"
SELECTOR_SSO_REDIRECT = "input[name=wresult]"
SELECTOR_STUDENT_SCHOOLS = ".panel.linkownia.pracownik.klient a"
SELECTOR_INACTIVE_PANEL = ".panel.wychowawstwo.pracownik.klient"
SELECTOR_INFO_ERROR = ".info-error-message-text"

STUDENT_MODULE_MARKER = "uonetplus-uczen"
NO_PERMISSIONS_NAME = "Brak uprawnień"
NO_PERMISSIONS_INFO = "Nie masz wystarczających uprawnień"
DATABASE_UPDATE_INFO = "aktualizacja bazy"
MODULE_HANDSHAKE_TITLE = "Working"
ANTI_FORGERY_MARKER = "antiForgeryToken"


@dataclass
class PageInspection:
    """Recognized signatures of one page plus raw text kept for diagnostics."""

    title: str
    html: str
    signatures: set[PageSignature] = field(default_factory=set)
    error_message: str = ""
    banner_message: str = ""

    def has(self, signature: PageSignature) -> bool:
        return signature in self.signatures


def _attr(node: Node | None, name: str) -> str:
    if node is None:
        return ""
    return node.attributes.get(name) or ""


def _text(parser: HTMLParser, selector: str) -> str:
    return " ".join(node.text(strip=True) for node in parser.css(selector)).strip()


def page_title(parser: HTMLParser) -> str:
    node = parser.css_first("title")
    return node.text(strip=True) if node else ""


def inspect_page(html: str) -> PageInspection:
    """Classify a page by the markers it contains."""
    parser = HTMLParser(html)
    page = PageInspection(title=page_title(parser), html=html)

    if parser.css_first(SELECTOR_STANDARD) is not None:
        page.signatures.add(PageSignature.STANDARD_LOGIN)
    if parser.css_first(SELECTOR_ADFS) is not None:
        page.signatures.add(PageSignature.ADFS_LOGIN)
    if parser.css_first(SELECTOR_ADFS_LIGHT) is not None:
        page.signatures.add(PageSignature.ADFS_LIGHT_LOGIN)
    if parser.css_first(SELECTOR_ADFS_CARDS) is not None:
        page.signatures.add(PageSignature.ADFS_CARDS_LOGIN)
    if parser.css_first(SELECTOR_SSO_REDIRECT) is not None:
        page.signatures.add(PageSignature.CERTIFICATE)

    error = _text(parser, SELECTOR_ERROR)
    if error:
        page.signatures.add(PageSignature.ERROR_BANNER)
        page.error_message = error.rstrip(".")

    # Only the visible panel counts; hidden ones carry a style attribute
    for panel in parser.css(SELECTOR_INACTIVE_PANEL):
        if "style" in panel.attributes:
            continue
        name = " ".join(n.text(strip=True) for n in panel.css(".name"))
        if NO_PERMISSIONS_NAME in name:
            page.signatures.add(PageSignature.ACCOUNT_INACTIVE)
            page.banner_message = " ".join(
                n.text(strip=True) for n in panel.css(".additionalText")
            )
            break

    info = _text(parser, SELECTOR_INFO_ERROR)
    if NO_PERMISSIONS_INFO in info and not page.has(PageSignature.ACCOUNT_INACTIVE):
        page.signatures.add(PageSignature.ACCOUNT_INACTIVE)
        page.banner_message = info
    if DATABASE_UPDATE_INFO in info:
        page.signatures.add(PageSignature.SERVICE_UNAVAILABLE)
        if not page.banner_message:
            page.banner_message = info

    if MODULE_HANDSHAKE_TITLE in page.title:
        page.signatures.add(PageSignature.MODULE_HANDSHAKE)
    if ANTI_FORGERY_MARKER in html:
        page.signatures.add(PageSignature.MODULE_READY)
    return page


def first_form_action(html: str) -> str:
    return _attr(HTMLParser(html).css_first("form"), "action")


def parse_certificate(html: str) -> CertificateToken:
    """Extract the hidden wa/wresult/wctx form."""
    parser = HTMLParser(html)
    form = parser.css_first("form[name=hiddenform]") or parser.css_first("form")
    return CertificateToken(
        action=_attr(form, "action"),
        wa=_attr(parser.css_first("input[name=wa]"), "value"),
        wresult=_attr(parser.css_first("input[name=wresult]"), "value"),
        wctx=_attr(parser.css_first("input[name=wctx]"), "value"),
        title=page_title(parser),
        html=html,
    )


def parse_anonymous_form(html: str) -> AnonymousForm:
    """Extract anti-forgery and view-state fields of an ASP.NET login form."""
    parser = HTMLParser(html)
    return AnonymousForm(
        action=_attr(parser.css_first("form"), "action"),
        title=page_title(parser),
        db=_attr(parser.css_first("input[name=__db]"), "value"),
        viewstate=_attr(parser.css_first("#__VIEWSTATE"), "value"),
        viewstate_generator=_attr(parser.css_first("#__VIEWSTATEGENERATOR"), "value"),
        event_validation=_attr(parser.css_first("#__EVENTVALIDATION"), "value"),
    )


def extract_student_schools(html: str) -> list[str]:
    """Return the per-student module links from the post-login landing page."""
    parser = HTMLParser(html)
    links: list[str] = []
    for node in parser.css(SELECTOR_STUDENT_SCHOOLS):
        href = node.attributes.get("href") or ""
        if STUDENT_MODULE_MARKER in href:
            links.append(href)
    return links
