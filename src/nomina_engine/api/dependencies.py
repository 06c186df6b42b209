"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nomina_engine.config import get_settings
from nomina_engine.database import init_db
from nomina_engine.repository import PayrollRepository, SqlAlchemyRepository
from nomina_engine.services.payroll_service import PayrollService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PayrollRepository:
    """Repository over the request's session."""
    return SqlAlchemyRepository(session)


async def get_payroll_service(
    repository: Annotated[PayrollRepository, Depends(get_repository)],
) -> PayrollService:
    return PayrollService(repository, get_settings())


# Type aliases for cleaner dependency injection
Service = Annotated[PayrollService, Depends(get_payroll_service)]
