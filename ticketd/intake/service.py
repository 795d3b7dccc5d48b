import logging
from typing import Optional, Union

from ticketd.errors import ForbiddenError, InvalidInputError
from ticketd.forms.models import FormType
from ticketd.intake.origin import Admission, OriginGuard
from ticketd.shared.http import parse_id
from ticketd.store.repository import Repository
from ticketd.submissions.schemas import SubmissionInput, SubmissionResponse

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "medium"


def forbidden_message(allowed_domain: Optional[str]) -> str:
    # The allowed domain is public configuration, so it is safe to echo back
    if allowed_domain:
        return (
            "domain not allowed - configure client allowed domain to match your site "
            f"(currently set to: {allowed_domain})"
        )
    return "forbidden domain"


def validate_for_form_type(form_type: FormType, submission: SubmissionInput) -> SubmissionInput:
    """Apply the rules that depend on the form's type.

    Returns the submission with defaults filled in, or raises
    ``InvalidInputError`` with the first failing reason. The store validates
    again on write with its own, looser, type-agnostic rules.
    """
    if not submission.message:
        raise InvalidInputError("message", "is required", message="message is required")

    if form_type == FormType.SUPPORT:
        if not submission.subject:
            raise InvalidInputError("subject", "is required", message="subject is required")
        if not submission.priority:
            submission = submission.model_copy(update={"priority": DEFAULT_PRIORITY})
    elif form_type == FormType.CONTACT:
        if not submission.name or not submission.email:
            field = "name" if not submission.name else "email"
            raise InvalidInputError(field, "is required", message="name and email are required")
    else:
        raise InvalidInputError("form type", f"unsupported form type {form_type!r}", message="invalid form type")

    if submission.email and "@" not in submission.email:
        raise InvalidInputError("email", "must contain @", message="invalid email")
    return submission


class SubmissionIntake:
    """Turns one public submission request into a stored ticket."""

    def __init__(self, store: Repository):
        self.store = store
        self.guard = OriginGuard(store)

    async def check_origin(self, form_id: Union[str, int], origin: str = "", referer: str = "") -> Admission:
        admission = await self.guard.admit(form_id, origin, referer)
        if not admission.allowed:
            raise ForbiddenError(
                forbidden_message(admission.allowed_domain),
                id=form_id,
                allowed_domain=admission.allowed_domain,
            )
        return admission

    async def submit(self, form_id: Union[str, int], submission: SubmissionInput) -> SubmissionResponse:
        """Validate and store a submission for a form whose origin was already admitted."""
        parsed_id = parse_id(form_id)
        if parsed_id is None:
            raise InvalidInputError("form", "must be a numeric id", message="invalid form")
        form = await self.store.get_form(parsed_id)

        # Trimmed on construction; re-validate in case the draft was built without it
        submission = SubmissionInput.model_validate(submission.model_dump())
        logger.debug(
            f"Submission for form {form.id}: name={submission.name!r} email={submission.email!r} "
            f"subject={submission.subject!r} priority={submission.priority!r} message_len={len(submission.message)}"
        )
        submission = validate_for_form_type(form.type, submission)

        stored = await self.store.create_submission(form.id, submission)
        logger.info(f"Stored submission {stored.id} for form {form.id} (client {form.client_id})")
        return stored
