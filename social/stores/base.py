"""Shared plumbing for the SQL-backed stores."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social.stores.postgres import session_scope

# Default per-call budget (seconds)
QUERY_TIMEOUT_SECONDS = 5.0


class SqlStore:
    """Base for stores that share one session factory (one connection pool)."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        timeout: float = QUERY_TIMEOUT_SECONDS,
    ) -> None:
        self._session_factory = session_factory
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    @asynccontextmanager
    async def _session(self, timeout: float | None = None) -> AsyncGenerator[AsyncSession, None]:
        """Open a unit of work bounded by the call's budget.

        On expiry the transaction is rolled back and TimeoutError is raised.
        """
        budget = self._timeout if timeout is None else timeout
        async with asyncio.timeout(budget):
            async with session_scope(self._session_factory) as session:
                yield session
