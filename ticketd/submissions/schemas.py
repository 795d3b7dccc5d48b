from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict
from ticketd.forms.models import FormType
from ticketd.submissions.models import SubmissionStatus


class SubmissionInput(BaseModel):
    """Fields needed to store a new submission. Strings are trimmed on construction."""
    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""
    priority: str = ""
    ip: str = ""
    user_agent: str = ""

    model_config = ConfigDict(str_strip_whitespace=True)


class SubmissionResponse(BaseModel):
    id: int
    client_id: int
    client_name: str
    form_id: int
    form_name: str
    form_type: FormType
    status: SubmissionStatus
    name: str
    email: str
    subject: str
    message: str
    priority: str
    ip: str
    user_agent: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubmissionPage(BaseModel):
    items: List[SubmissionResponse]
    total: int
    page: int
    total_pages: int
    prev_page: int
    next_page: int


class StatusUpdate(BaseModel):
    status: str
