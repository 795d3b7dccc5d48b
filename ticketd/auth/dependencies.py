import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ticketd.config import settings

logger = logging.getLogger(__name__)

security = HTTPBasic(realm="TicketD", auto_error=False)


async def get_current_admin(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
) -> str:
    """HTTP Basic auth for the admin API.

    Bypassed entirely when ``TICKETD_DISABLE_AUTH`` is set, for deployments
    behind an external auth proxy. Never expose the service directly with
    auth disabled.
    """
    if settings.DISABLE_AUTH:
        logger.debug(f"Authentication bypassed (external auth mode) path={request.url.path}")
        return ""

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": 'Basic realm="TicketD"'},
    )
    if credentials is None or not settings.ADMIN_USER or not settings.ADMIN_PASS:
        raise unauthorized

    user_ok = secrets.compare_digest(credentials.username.encode("utf-8"), settings.ADMIN_USER.encode("utf-8"))
    pass_ok = secrets.compare_digest(credentials.password.encode("utf-8"), settings.ADMIN_PASS.encode("utf-8"))
    if not (user_ok and pass_ok):
        raise unauthorized
    return credentials.username
