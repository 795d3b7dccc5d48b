from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ticketd.database import get_db
from ticketd.store.repository import Repository
from ticketd.store.sql import SQLRepository


async def get_store(db: AsyncSession = Depends(get_db)) -> Repository:
    return SQLRepository(db)
