from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.database.engine import async_session
from catalog_service.database.guard import storage_guard


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields a database session.

    Declare it with ``scope="function"`` so the commit runs before the
    response is sent; a failed commit surfaces as ``DatabaseException``.
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        with storage_guard("commit"):
            await session.commit()
