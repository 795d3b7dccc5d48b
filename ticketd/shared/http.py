from typing import Optional, Union

from fastapi import Request

from ticketd.config import settings

# Ids are signed 64-bit integers in every supported database
MAX_ID = 2**63 - 1


def parse_id(value: Union[str, int, None]) -> Optional[int]:
    """Parse a path parameter as a numeric id, or ``None`` if it is not one."""
    if isinstance(value, int):
        return value if 0 <= value <= MAX_ID else None
    if value is None:
        return None
    value = value.strip()
    if not value or not (value.isascii() and value.isdigit()):
        return None
    parsed = int(value)
    return parsed if parsed <= MAX_ID else None


def client_ip(request: Request) -> str:
    """Best-effort caller address, preferring proxy headers like a real-IP middleware."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("X-Real-IP", "").strip()
    if real_ip:
        return real_ip
    if request.client:
        return request.client.host
    return ""


def public_base_url(request: Request) -> str:
    """Configured public URL, or one inferred from the request."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    scheme = request.headers.get("X-Forwarded-Proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"
