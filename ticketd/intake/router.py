import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from ticketd.errors import ErrorKind, TicketdError, status_code_for
from ticketd.intake.origin import OriginGuard
from ticketd.intake.payload import read_submission
from ticketd.intake.service import SubmissionIntake
from ticketd.store.dependencies import get_store
from ticketd.store.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms", tags=["submit"])

PUBLIC_MESSAGES = {
    ErrorKind.NOT_FOUND: "form not found",
    ErrorKind.INTERNAL: "failed to save",
}


def _error_response(error: TicketdError, headers: dict = None) -> JSONResponse:
    # Internal details stay in the log
    message = PUBLIC_MESSAGES.get(error.kind, str(error))
    return JSONResponse({"error": message}, status_code=status_code_for(error), headers=headers)


@router.options("/{form_id}/submit")
async def submit_preflight(
    form_id: str,
    request: Request,
    store: Repository = Depends(get_store),
):
    """CORS preflight: 204 with the echoed origin, or a bare 403."""
    origin = request.headers.get("origin", "")
    referer = request.headers.get("referer", "")
    logger.debug(f"Preflight form_id={form_id} origin={origin!r} referer={referer!r}")

    try:
        admission = await OriginGuard(store).admit(form_id, origin, referer)
    except TicketdError as e:
        logger.error(f"Preflight for form {form_id} failed: {e!r}")
        return Response(status_code=status_code_for(e))
    if not admission.allowed:
        return Response(status_code=403)
    return Response(status_code=204, headers=admission.cors_headers(preflight=True))


@router.post("/{form_id}/submit")
async def submit(
    form_id: str,
    request: Request,
    store: Repository = Depends(get_store),
):
    origin = request.headers.get("origin", "")
    referer = request.headers.get("referer", "")
    logger.debug(
        f"Submit form_id={form_id} origin={origin!r} referer={referer!r} "
        f"content_type={request.headers.get('content-type', '')!r}"
    )
    intake = SubmissionIntake(store)

    try:
        admission = await intake.check_origin(form_id, origin, referer)
    except TicketdError as e:
        if e.kind != ErrorKind.FORBIDDEN:
            logger.error(f"Origin check for form {form_id} failed: {e!r}")
        return _error_response(e)

    headers = admission.cors_headers()
    try:
        submission = await read_submission(request)
        stored = await intake.submit(form_id, submission)
    except TicketdError as e:
        if e.kind == ErrorKind.INTERNAL:
            logger.error(f"Failed to save submission for form {form_id}: {e!r}")
        return _error_response(e, headers)

    return JSONResponse({"status": "received", "id": stored.id}, headers=headers)
