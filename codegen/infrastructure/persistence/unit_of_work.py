"""SQL unit of work: one session and one transaction per reservation attempt."""

from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codegen.infrastructure.persistence.repositories.sequence_counter_repo import (
    SequenceCounterRepository,
)


class SqlSequenceUnitOfWork:
    """ISequenceUnitOfWork over an AsyncSession.

    The session begins its transaction on first statement. Leaving the
    context without commit() rolls back (this also covers cancellation),
    releasing any row lock taken by get_for_update.
    """

    counters: SequenceCounterRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._finished = False

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work is not active; use 'async with'")
        return self._session

    async def __aenter__(self) -> "SqlSequenceUnitOfWork":
        self._session = self._session_factory()
        self._finished = False
        self.counters = SequenceCounterRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self.session
        try:
            if not self._finished:
                await session.rollback()
        finally:
            await session.close()
            self._session = None

    async def commit(self) -> None:
        await self.session.commit()
        self._finished = True

    async def rollback(self) -> None:
        await self.session.rollback()
        self._finished = True
