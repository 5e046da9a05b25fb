from __future__ import annotations

from typing import Any, List

from sqlalchemy import Executable
from sqlalchemy.engine import ScalarResult
from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """
    Shared plumbing for repositories bound to one AsyncSession.

    Repositories never commit; the caller that owns the session decides when a
    unit of work ends.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def scalars(self, statement: Executable) -> ScalarResult:
        result = await self.session.execute(statement)
        return result.scalars()

    async def scalar_list(self, statement: Executable) -> List[Any]:
        """Execute and collect the first column of every row."""
        return list(await self.scalars(statement))

    async def scalar_one_or_none(self, statement: Executable) -> Any:
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    def add(self, entity: Any) -> None:
        self.session.add(entity)

    async def flush(self) -> None:
        """Flush pending rows so database-generated keys are populated."""
        await self.session.flush()
