from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response

from ticketd import validator
from ticketd.shared.http import MAX_ID
from ticketd.shared.pagination import MAX_PAGE, PAGE_SIZE, next_page, page_offset, prev_page, total_pages
from ticketd.store.dependencies import get_store
from ticketd.store.repository import Repository
from ticketd.submissions.schemas import StatusUpdate, SubmissionPage, SubmissionResponse

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("", response_model=SubmissionPage)
async def list_submissions(
    page: int = Query(1, le=MAX_PAGE),
    status: str = "",
    client: Optional[int] = Query(None, ge=0, le=MAX_ID),
    form: Optional[int] = Query(None, ge=0, le=MAX_ID),
    search: str = "",
    store: Repository = Depends(get_store),
):
    """Paginated inbox, newest first. Any filter switches to the filtered query."""
    page = max(page, 1)
    offset = page_offset(page)
    status = status.strip().upper()
    search = search.strip()
    client_id = client or 0
    form_id = form or 0

    if status or client_id > 0 or form_id > 0 or search:
        submissions, total = await store.filter_submissions(
            offset, PAGE_SIZE, status=status, client_id=client_id, form_id=form_id, subject_search=search
        )
    else:
        submissions, total = await store.list_submissions(offset, PAGE_SIZE)

    return SubmissionPage(
        items=submissions,
        total=total,
        page=page,
        total_pages=total_pages(total),
        prev_page=prev_page(page),
        next_page=next_page(page, total),
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    return await store.get_submission(submission_id)


@router.patch("/{submission_id}/status", response_model=SubmissionResponse)
async def update_submission_status(
    update: StatusUpdate,
    submission_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    status = update.status.strip().upper()
    error = validator.validate_status(status)
    if error:
        raise error
    await store.update_submission_status(submission_id, status)
    return await store.get_submission(submission_id)


@router.delete("/{submission_id}", status_code=204)
async def delete_submission(
    submission_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    await store.delete_submission(submission_id)
    return Response(status_code=204)
