from sqlalchemy import Column, String
from ticketd.database import Base
from ticketd.shared.models import AuditMixin


class Client(Base, AuditMixin):
    """Tenant that owns forms and the domain they may be embedded on."""
    __tablename__ = "clients"

    name = Column(String, nullable=False)
    allowed_domain = Column(String, nullable=False)
