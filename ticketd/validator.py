"""Field-level validation rules.

Every function here is pure: it returns ``None`` when the value is acceptable
and an ``InvalidInputError`` describing the first broken rule otherwise. The
store raises the returned error; nothing in this module raises for bad input.
"""

from typing import Optional
from urllib.parse import urlsplit

from pydantic.networks import validate_email as parse_email_address

from ticketd.errors import InvalidInputError
from ticketd.forms.models import FormType
from ticketd.submissions.models import SubmissionStatus
from ticketd.submissions.schemas import SubmissionInput

# Field length constraints
MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 255
MIN_DOMAIN_LENGTH = 3
MAX_DOMAIN_LENGTH = 255
MIN_EMAIL_LENGTH = 3
MAX_EMAIL_LENGTH = 255
MIN_SUBJECT_LENGTH = 1
MAX_SUBJECT_LENGTH = 500
MIN_MESSAGE_LENGTH = 1
MAX_MESSAGE_LENGTH = 10000
MAX_PRIORITY_LENGTH = 50

ValidationResult = Optional[InvalidInputError]


def validate_form_type(form_type: str) -> ValidationResult:
    if form_type in (FormType.SUPPORT.value, FormType.CONTACT.value):
        return None
    return InvalidInputError("form type", f'must be "{FormType.SUPPORT.value}" or "{FormType.CONTACT.value}"')


def validate_status(status: str) -> ValidationResult:
    if status in (SubmissionStatus.OPEN.value, SubmissionStatus.IN_PROGRESS.value, SubmissionStatus.CLOSED.value):
        return None
    return InvalidInputError(
        "status",
        f'must be "{SubmissionStatus.OPEN.value}", "{SubmissionStatus.IN_PROGRESS.value}", '
        f'or "{SubmissionStatus.CLOSED.value}"',
    )


def validate_email(email: str) -> ValidationResult:
    # Optional in the generic path; form-specific requirements live in intake
    if email == "":
        return None
    if len(email) < MIN_EMAIL_LENGTH:
        return InvalidInputError("email", f"must be at least {MIN_EMAIL_LENGTH} characters")
    if len(email) > MAX_EMAIL_LENGTH:
        return InvalidInputError("email", f"must be at most {MAX_EMAIL_LENGTH} characters")
    try:
        parse_email_address(email)
    except ValueError:
        return InvalidInputError("email", "invalid email format")
    return None


def validate_name(name: str) -> ValidationResult:
    name = name.strip()
    if not name:
        return InvalidInputError("name", "cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        return InvalidInputError("name", f"must be at most {MAX_NAME_LENGTH} characters")
    return None


def validate_domain(domain: str) -> ValidationResult:
    """Accepts both ``acme.com`` and ``https://acme.com``."""
    domain = domain.strip()
    if not domain:
        return InvalidInputError("domain", "cannot be empty")
    if len(domain) < MIN_DOMAIN_LENGTH:
        return InvalidInputError("domain", f"must be at least {MIN_DOMAIN_LENGTH} characters")
    if len(domain) > MAX_DOMAIN_LENGTH:
        return InvalidInputError("domain", f"must be at most {MAX_DOMAIN_LENGTH} characters")

    candidate = domain if "://" in domain else "https://" + domain
    try:
        parsed = urlsplit(candidate)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return InvalidInputError("domain", "invalid domain format")
    if not parsed.hostname or any(ch.isspace() for ch in parsed.netloc):
        return InvalidInputError("domain", "invalid domain format")
    return None


def validate_string(field: str, value: str, min_length: int, max_length: int, required: bool) -> ValidationResult:
    value = value.strip()
    if not value:
        return InvalidInputError(field, "is required") if required else None
    if len(value) < min_length:
        return InvalidInputError(field, f"must be at least {min_length} characters")
    if len(value) > max_length:
        return InvalidInputError(field, f"must be at most {max_length} characters")
    return None


def validate_client(name: str, allowed_domain: str) -> ValidationResult:
    return validate_name(name) or validate_domain(allowed_domain)


def validate_form(name: str, form_type: str) -> ValidationResult:
    return validate_name(name) or validate_form_type(form_type)


def validate_submission(submission: SubmissionInput) -> ValidationResult:
    """Generic checks that hold for every form type.

    Looser than the type-aware checks in ``ticketd.intake.service``; both run.
    """
    return (
        validate_string("name", submission.name, MIN_NAME_LENGTH, MAX_NAME_LENGTH, required=False)
        or validate_email(submission.email)
        or validate_string("subject", submission.subject, MIN_SUBJECT_LENGTH, MAX_SUBJECT_LENGTH, required=False)
        or validate_string("message", submission.message, MIN_MESSAGE_LENGTH, MAX_MESSAGE_LENGTH, required=True)
        or validate_string("priority", submission.priority, 1, MAX_PRIORITY_LENGTH, required=False)
    )
