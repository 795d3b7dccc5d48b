from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict


class ClientBase(BaseModel):
    name: str
    allowed_domain: str


class ClientCreate(ClientBase):
    pass


class ClientUpdate(ClientBase):
    pass


class ClientResponse(ClientBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClientPage(BaseModel):
    items: List[ClientResponse]
    total: int
    page: int
    total_pages: int
    prev_page: int
    next_page: int
