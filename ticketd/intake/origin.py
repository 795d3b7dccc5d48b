"""Origin admission for cross-site form submissions.

A request may write to a form when the host it declares (``Origin``, else
``Referer``) is the owning client's allowed domain or one of its subdomains.
``localhost`` and ``127.0.0.1`` are interchangeable and match on any port so
local development works without touching production rules.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union
from urllib.parse import urlsplit

from ticketd.errors import ErrorKind, TicketdError
from ticketd.shared.http import parse_id
from ticketd.store.repository import Repository

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = ("localhost", "127.0.0.1")


def extract_host(origin: str, referer: str) -> str:
    """Hostname from ``Origin``, falling back to ``Referer`` only when Origin is absent."""
    source = (origin or referer or "").strip()
    if not source:
        return ""
    try:
        hostname = urlsplit(source).hostname
    except ValueError:
        return ""
    return hostname or ""


def _strip_loopback_port(value: str) -> str:
    for loopback in LOOPBACK_HOSTS:
        if value.startswith(loopback + ":"):
            return loopback
    return value


def normalize_domain(value: str) -> str:
    value = value.strip().lower()
    if "://" in value:
        try:
            return urlsplit(value).hostname or ""
        except ValueError:
            return ""
    return value


def domain_allowed(host: str, allowed: str) -> bool:
    """True if ``host`` equals ``allowed`` or is a strict subdomain of it.

    >>> domain_allowed("www.acme.com", "acme.com")
    True
    >>> domain_allowed("acme.com.evil.com", "acme.com")
    False
    >>> domain_allowed("127.0.0.1:3000", "localhost")
    True
    """
    host = _strip_loopback_port(normalize_domain(host))
    allowed = _strip_loopback_port(normalize_domain(allowed))
    if not host or not allowed:
        return False

    if host in LOOPBACK_HOSTS and allowed in LOOPBACK_HOSTS:
        return True
    if host == allowed:
        return True
    return host.endswith("." + allowed)


@dataclass(frozen=True)
class Admission:
    allowed: bool
    origin: str = ""
    # Known whenever the form and client resolved, even on a mismatch
    allowed_domain: Optional[str] = None

    def cors_headers(self, preflight: bool = False) -> Dict[str, str]:
        headers = {}
        if self.origin:
            headers["Access-Control-Allow-Origin"] = self.origin
            headers["Vary"] = "Origin"
        if preflight:
            headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
            headers["Access-Control-Allow-Headers"] = "Content-Type"
        return headers


class OriginGuard:
    def __init__(self, store: Repository):
        self.store = store

    async def admit(self, form_id: Union[str, int], origin: str = "", referer: str = "") -> Admission:
        host = extract_host(origin, referer)
        if not host:
            logger.debug(f"Origin denied for form {form_id}: no usable host (origin={origin!r} referer={referer!r})")
            return Admission(allowed=False)

        parsed_id = parse_id(form_id)
        if parsed_id is None:
            return Admission(allowed=False)

        # A missing form or client is indistinguishable from a mismatch
        try:
            form = await self.store.get_form(parsed_id)
            client = await self.store.get_client(form.client_id)
        except TicketdError as e:
            if e.kind != ErrorKind.NOT_FOUND:
                raise
            logger.debug(f"Origin denied for form {form_id}: {e}")
            return Admission(allowed=False)

        if not domain_allowed(host, client.allowed_domain):
            logger.debug(
                f"Origin denied for form {parsed_id}: host {host!r} does not match allowed domain {client.allowed_domain!r}"
            )
            return Admission(allowed=False, allowed_domain=client.allowed_domain)

        return Admission(allowed=True, origin=origin, allowed_domain=client.allowed_domain)
