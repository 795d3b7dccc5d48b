from enum import Enum
from sqlalchemy import Column, String, Text, ForeignKey
from ticketd.database import Base
from ticketd.shared.models import AuditMixin


class SubmissionStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class Submission(Base, AuditMixin):
    __tablename__ = "submissions"

    client_id = Column(ForeignKey("clients.id"), nullable=False, index=True)
    form_id = Column(ForeignKey("forms.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default=SubmissionStatus.OPEN.value, server_default=SubmissionStatus.OPEN.value)

    name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    subject = Column(String, nullable=False, default="")
    message = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="")
    ip = Column(String, nullable=False, default="")
    user_agent = Column(String, nullable=False, default="")
