import logging

from fastapi import Request
from pydantic import ValidationError

from ticketd.errors import InvalidInputError
from ticketd.intake.schemas import SubmissionPayload
from ticketd.shared.http import client_ip
from ticketd.submissions.schemas import SubmissionInput

logger = logging.getLogger(__name__)

FIELDS = ("name", "email", "subject", "message", "priority")


async def read_submission(request: Request) -> SubmissionInput:
    """Build a trimmed submission draft from a JSON or form-encoded request.

    The caller's address and user agent come from the connection, never from
    the body.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        body = await request.body()
        try:
            payload = SubmissionPayload.model_validate_json(body)
        except ValidationError:
            raise InvalidInputError("payload", "malformed json", message="invalid json")
        values = payload.model_dump()
    else:
        try:
            form = await request.form()
        except Exception as e:
            # python-multipart raises assorted parser errors for broken bodies
            logger.debug(f"Unreadable form payload ({content_type!r}): {e}")
            raise InvalidInputError("payload", "unreadable form data", message="invalid payload")
        values = {}
        for field in FIELDS:
            value = form.get(field)
            values[field] = value if isinstance(value, str) else ""

    return SubmissionInput(
        **values,
        ip=client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )
