from sqlalchemy import Column, DateTime, Integer, func


class IntegerIDMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class AuditMixin(IntegerIDMixin, TimestampMixin):
    """Combines integer ids and a server-side creation timestamp."""
    pass
