from datetime import datetime
from pydantic import BaseModel, ConfigDict
from ticketd.forms.models import FormType


class FormBase(BaseModel):
    name: str


class FormCreate(FormBase):
    # Plain string so an unknown type reaches the validator and gets a readable error
    type: str


class FormUpdate(FormCreate):
    pass


class FormResponse(FormBase):
    id: int
    client_id: int
    type: FormType
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
