import logging
from contextlib import asynccontextmanager
from typing import Any, List, Tuple

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketd import validator
from ticketd.clients.models import Client
from ticketd.clients.schemas import ClientResponse
from ticketd.errors import InternalError, InvalidInputError, NotFoundError
from ticketd.forms.models import Form, FormType
from ticketd.forms.schemas import FormResponse
from ticketd.shared.pagination import clamp_limit, clamp_offset
from ticketd.store.repository import Repository
from ticketd.submissions.models import Submission, SubmissionStatus
from ticketd.submissions.schemas import SubmissionInput, SubmissionResponse

logger = logging.getLogger(__name__)


def _form_type(value: str) -> FormType:
    try:
        return FormType(value)
    except ValueError:
        raise InvalidInputError("form type", f"unrecognized stored value {value!r}")


def _status(value: str) -> SubmissionStatus:
    try:
        return SubmissionStatus(value)
    except ValueError:
        raise InvalidInputError("status", f"unrecognized stored value {value!r}")


def _to_form(form: Form) -> FormResponse:
    return FormResponse(
        id=form.id,
        client_id=form.client_id,
        name=form.name,
        type=_form_type(form.type),
        created_at=form.created_at,
    )


def _to_submission(row) -> SubmissionResponse:
    submission = row.Submission
    return SubmissionResponse(
        id=submission.id,
        client_id=submission.client_id,
        client_name=row.client_name,
        form_id=submission.form_id,
        form_name=row.form_name,
        form_type=_form_type(row.form_type),
        status=_status(submission.status),
        name=submission.name or "",
        email=submission.email or "",
        subject=submission.subject or "",
        message=submission.message or "",
        priority=submission.priority or "",
        ip=submission.ip or "",
        user_agent=submission.user_agent or "",
        created_at=submission.created_at,
    )


class SQLRepository(Repository):
    """Repository backed by SQLAlchemy's async ORM (SQLite or PostgreSQL)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _storage(self, operation: str, entity: str, entity_id: Any = None):
        """Roll back and re-raise driver errors as ``InternalError`` with context."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Storage failure during {operation} ({entity} {entity_id}): {e}", exc_info=True)
            raise InternalError(f"failed to {operation}", entity=entity, id=entity_id) from e

    async def _require_rows(self, result, entity: str, entity_id: int) -> None:
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(entity, entity_id)

    # Clients

    async def create_client(self, name: str, allowed_domain: str) -> ClientResponse:
        error = validator.validate_client(name, allowed_domain)
        if error:
            raise error

        client = Client(name=name.strip(), allowed_domain=allowed_domain.strip())
        async with self._storage("create client", "client"):
            self.db.add(client)
            await self.db.commit()
            await self.db.refresh(client)
        return ClientResponse.model_validate(client)

    async def list_clients(self, offset: int, limit: int) -> Tuple[List[ClientResponse], int]:
        offset, limit = clamp_offset(offset), clamp_limit(limit)
        query = (
            select(Client)
            .order_by(desc(Client.created_at), desc(Client.id))
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        async with self._storage("list clients", "client"):
            total = await self.db.scalar(select(func.count()).select_from(Client))
            result = await self.db.execute(query)
            clients = result.scalars().all()
        return [ClientResponse.model_validate(c) for c in clients], total or 0

    async def get_client(self, client_id: int) -> ClientResponse:
        async with self._storage("get client", "client", client_id):
            client = await self.db.get(Client, client_id, populate_existing=True)
        if client is None:
            raise NotFoundError("client", client_id)
        return ClientResponse.model_validate(client)

    async def update_client(self, client_id: int, name: str, allowed_domain: str) -> None:
        error = validator.validate_client(name, allowed_domain)
        if error:
            raise error

        stmt = (
            update(Client)
            .where(Client.id == client_id)
            .values(name=name.strip(), allowed_domain=allowed_domain.strip())
        )
        async with self._storage("update client", "client", client_id):
            result = await self.db.execute(stmt)
            await self._require_rows(result, "client", client_id)
            await self.db.commit()

    async def delete_client(self, client_id: int) -> None:
        # Children first, all in one transaction
        async with self._storage("delete client", "client", client_id):
            await self.db.execute(delete(Submission).where(Submission.client_id == client_id))
            await self.db.execute(delete(Form).where(Form.client_id == client_id))
            result = await self.db.execute(delete(Client).where(Client.id == client_id))
            await self._require_rows(result, "client", client_id)
            await self.db.commit()

    # Forms

    async def create_form(self, client_id: int, name: str, form_type: str) -> FormResponse:
        form_type = form_type.value if isinstance(form_type, FormType) else form_type.strip()
        error = validator.validate_form(name, form_type)
        if error:
            raise error

        await self.get_client(client_id)

        form = Form(client_id=client_id, name=name.strip(), type=form_type)
        async with self._storage("create form", "form"):
            self.db.add(form)
            await self.db.commit()
            await self.db.refresh(form)
        return _to_form(form)

    async def list_forms(self, client_id: int) -> List[FormResponse]:
        query = (
            select(Form)
            .where(Form.client_id == client_id)
            .order_by(desc(Form.created_at), desc(Form.id))
            .execution_options(populate_existing=True)
        )
        async with self._storage("list forms", "form"):
            result = await self.db.execute(query)
            forms = result.scalars().all()
        return [_to_form(f) for f in forms]

    async def get_form(self, form_id: int) -> FormResponse:
        async with self._storage("get form", "form", form_id):
            form = await self.db.get(Form, form_id, populate_existing=True)
        if form is None:
            raise NotFoundError("form", form_id)
        return _to_form(form)

    async def update_form(self, form_id: int, name: str, form_type: str) -> None:
        form_type = form_type.value if isinstance(form_type, FormType) else form_type.strip()
        error = validator.validate_form(name, form_type)
        if error:
            raise error

        stmt = update(Form).where(Form.id == form_id).values(name=name.strip(), type=form_type)
        async with self._storage("update form", "form", form_id):
            result = await self.db.execute(stmt)
            await self._require_rows(result, "form", form_id)
            await self.db.commit()

    async def delete_form(self, form_id: int) -> None:
        async with self._storage("delete form", "form", form_id):
            await self.db.execute(delete(Submission).where(Submission.form_id == form_id))
            result = await self.db.execute(delete(Form).where(Form.id == form_id))
            await self._require_rows(result, "form", form_id)
            await self.db.commit()

    # Submissions

    def _submission_query(self):
        return (
            select(
                Submission,
                Client.name.label("client_name"),
                Form.name.label("form_name"),
                Form.type.label("form_type"),
            )
            .join(Client, Client.id == Submission.client_id)
            .join(Form, Form.id == Submission.form_id)
            .execution_options(populate_existing=True)
        )

    async def _submission_page(self, conditions: list, offset: int, limit: int) -> Tuple[List[SubmissionResponse], int]:
        offset, limit = clamp_offset(offset), clamp_limit(limit)
        count_query = select(func.count()).select_from(Submission).where(*conditions)
        query = (
            self._submission_query()
            .where(*conditions)
            .order_by(desc(Submission.created_at), desc(Submission.id))
            .offset(offset)
            .limit(limit)
        )
        async with self._storage("list submissions", "submission"):
            total = await self.db.scalar(count_query)
            result = await self.db.execute(query)
            rows = result.all()
        return [_to_submission(row) for row in rows], total or 0

    async def create_submission(self, form_id: int, submission_in: SubmissionInput) -> SubmissionResponse:
        # Round-trip through the model so every field is trimmed
        submission_in = SubmissionInput.model_validate(submission_in.model_dump())
        error = validator.validate_submission(submission_in)
        if error:
            raise error

        form = await self.get_form(form_id)

        submission = Submission(
            client_id=form.client_id,
            form_id=form.id,
            status=SubmissionStatus.OPEN.value,
            **submission_in.model_dump(),
        )
        async with self._storage("create submission", "submission"):
            self.db.add(submission)
            await self.db.commit()
        return await self.get_submission(submission.id)

    async def list_submissions(self, offset: int, limit: int) -> Tuple[List[SubmissionResponse], int]:
        return await self._submission_page([], offset, limit)

    async def filter_submissions(
        self,
        offset: int,
        limit: int,
        status: str = "",
        client_id: int = 0,
        form_id: int = 0,
        subject_search: str = "",
    ) -> Tuple[List[SubmissionResponse], int]:
        conditions = []
        if status:
            error = validator.validate_status(status)
            if error:
                raise error
            conditions.append(Submission.status == status)
        if client_id:
            conditions.append(Submission.client_id == client_id)
        if form_id:
            conditions.append(Submission.form_id == form_id)
        if subject_search:
            conditions.append(Submission.subject.icontains(subject_search, autoescape=True))
        return await self._submission_page(conditions, offset, limit)

    async def get_submission(self, submission_id: int) -> SubmissionResponse:
        query = self._submission_query().where(Submission.id == submission_id)
        async with self._storage("get submission", "submission", submission_id):
            result = await self.db.execute(query)
            row = result.first()
        if row is None:
            raise NotFoundError("submission", submission_id)
        return _to_submission(row)

    async def update_submission_status(self, submission_id: int, status: str) -> None:
        status = status.strip()
        error = validator.validate_status(status)
        if error:
            raise error

        stmt = update(Submission).where(Submission.id == submission_id).values(status=status)
        async with self._storage("update submission status", "submission", submission_id):
            result = await self.db.execute(stmt)
            await self._require_rows(result, "submission", submission_id)
            await self.db.commit()

    async def delete_submission(self, submission_id: int) -> None:
        async with self._storage("delete submission", "submission", submission_id):
            result = await self.db.execute(delete(Submission).where(Submission.id == submission_id))
            await self._require_rows(result, "submission", submission_id)
            await self.db.commit()
