"""Error taxonomy shared by the store, the validators and the HTTP layer.

Every failure the application raises on purpose is a ``TicketdError``. Callers
branch on ``error.kind`` rather than on the concrete class, and every error
carries the entity and id it concerns so a message can be rendered several
layers away from where it was raised.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class TicketdError(Exception):
    """Base error carrying ``kind``, ``entity``, ``id`` and a human message."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, entity: Optional[str] = None, id: Any = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.id = id

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, entity={self.entity!r}, id={self.id!r}, message={self.message!r})"


class NotFoundError(TicketdError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, id: Any):
        super().__init__(f"{entity} with id {id} not found", entity=entity, id=id)


class InvalidInputError(TicketdError):
    """A caller-supplied field broke a validation rule.

    ``entity`` holds the offending field name and ``reason`` the constraint.
    """

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, reason: str, message: Optional[str] = None):
        super().__init__(message or f"invalid {field}: {reason}", entity=field)
        self.field = field
        self.reason = reason


class ForbiddenError(TicketdError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "forbidden domain", id: Any = None, allowed_domain: Optional[str] = None):
        super().__init__(message, entity="form", id=id)
        self.allowed_domain = allowed_domain


class InternalError(TicketdError):
    kind = ErrorKind.INTERNAL


STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}


def status_code_for(error: TicketdError) -> int:
    return STATUS_CODES[error.kind]
