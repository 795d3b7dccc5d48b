from abc import ABC, abstractmethod
from typing import List, Tuple

from ticketd.clients.schemas import ClientResponse
from ticketd.forms.schemas import FormResponse
from ticketd.submissions.schemas import SubmissionInput, SubmissionResponse


class Repository(ABC):
    """Persistence contract for clients, forms and submissions.

    Writes validate their input before touching storage and raise
    ``InvalidInputError`` on bad input, ``NotFoundError`` when the target row
    does not exist, and ``InternalError`` (chained to the driver error) when
    storage itself fails.

    List operations return ``(rows, total)``. The total and the page are read
    by separate statements, so under concurrent writes they can disagree.
    """

    # Clients

    @abstractmethod
    async def create_client(self, name: str, allowed_domain: str) -> ClientResponse:
        ...

    @abstractmethod
    async def list_clients(self, offset: int, limit: int) -> Tuple[List[ClientResponse], int]:
        """Newest first. ``limit <= 0`` means the default page size."""

    @abstractmethod
    async def get_client(self, client_id: int) -> ClientResponse:
        ...

    @abstractmethod
    async def update_client(self, client_id: int, name: str, allowed_domain: str) -> None:
        ...

    @abstractmethod
    async def delete_client(self, client_id: int) -> None:
        """Delete the client together with its forms and their submissions."""

    # Forms

    @abstractmethod
    async def create_form(self, client_id: int, name: str, form_type: str) -> FormResponse:
        ...

    @abstractmethod
    async def list_forms(self, client_id: int) -> List[FormResponse]:
        ...

    @abstractmethod
    async def get_form(self, form_id: int) -> FormResponse:
        ...

    @abstractmethod
    async def update_form(self, form_id: int, name: str, form_type: str) -> None:
        ...

    @abstractmethod
    async def delete_form(self, form_id: int) -> None:
        """Delete the form together with its submissions."""

    # Submissions

    @abstractmethod
    async def create_submission(self, form_id: int, submission_in: SubmissionInput) -> SubmissionResponse:
        """Store a submission with status OPEN regardless of the input."""

    @abstractmethod
    async def list_submissions(self, offset: int, limit: int) -> Tuple[List[SubmissionResponse], int]:
        ...

    @abstractmethod
    async def filter_submissions(
        self,
        offset: int,
        limit: int,
        status: str = "",
        client_id: int = 0,
        form_id: int = 0,
        subject_search: str = "",
    ) -> Tuple[List[SubmissionResponse], int]:
        """Empty or zero filters are ignored. Subject search is a case-insensitive substring match."""

    @abstractmethod
    async def get_submission(self, submission_id: int) -> SubmissionResponse:
        ...

    @abstractmethod
    async def update_submission_status(self, submission_id: int, status: str) -> None:
        ...

    @abstractmethod
    async def delete_submission(self, submission_id: int) -> None:
        ...
