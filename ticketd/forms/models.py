from enum import Enum
from sqlalchemy import Column, String, ForeignKey
from ticketd.database import Base
from ticketd.shared.models import AuditMixin


class FormType(str, Enum):
    SUPPORT = "support"
    CONTACT = "contact"


class Form(Base, AuditMixin):
    __tablename__ = "forms"

    client_id = Column(ForeignKey("clients.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # FormType value
