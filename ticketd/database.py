from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ticketd.config import settings

Base = declarative_base()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ships with foreign key enforcement off; turn it on per connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(settings.SQLALCHEMY_DATABASE_URI, echo=False)
enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create any missing tables. Safe to run against an initialized database."""
    # Import all models to ensure they are registered in Base.metadata
    from ticketd.clients import models as _clients  # noqa: F401
    from ticketd.forms import models as _forms  # noqa: F401
    from ticketd.submissions import models as _submissions  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Dependency
async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
