"""Pytest configuration and fixtures for codegen.

Unit tests run the generator against an in-memory counter store that mimics
row locks and conditional updates; repository tests run against SQLite
(aiosqlite, in-memory); HTTP tests use create_app() with the code generation
service overridden.
"""

import asyncio
import itertools
from collections import defaultdict
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from types import TracebackType

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from codegen.api.v1.dependencies import get_code_generation_service
from codegen.application.dtos.sequence_counter import SequenceCounterResult
from codegen.application.services.config_resolver import GenerationConfigResolver
from codegen.application.use_cases.codes import CodeGenerationService
from codegen.core.config import Settings
from codegen.domain.value_objects import CounterKey
from codegen.infrastructure.persistence.database import Base, enable_sqlite_transactions
from codegen.infrastructure.persistence.models import CodeSequence  # noqa: F401
from codegen.infrastructure.services import SettingsPatternStore
from codegen.main import create_app

# Monday 2025-06-09 14:30:05 UTC
FIXED_NOW = datetime(2025, 6, 9, 14, 30, 5, tzinfo=UTC)


class FixedClock:
    """IClock returning a settable instant."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current = self.current + timedelta(**delta)


class CountingEntropy:
    """IEntropySource producing distinct, predictable values."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def random_string(self, length: int) -> str:
        return f"{next(self._counter):0{length}d}"[-length:] if length else ""

    def uuid4(self) -> str:
        return f"00000000-0000-4000-8000-{next(self._counter):012x}"


class InMemoryCounterStore:
    """Committed counter rows plus per-key locks.

    With locking=False reads do not block, so concurrent reservers see the
    same snapshot and only the conditional update keeps values distinct.
    """

    def __init__(self, locking: bool = True) -> None:
        self.locking = locking
        self.rows: dict[CounterKey, SequenceCounterResult] = {}
        self.locks: dict[CounterKey, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.creating: set[CounterKey] = set()
        self.commits = 0
        self.rollbacks = 0
        self._ids = itertools.count(1)

    def unit_of_work(self) -> "InMemoryUnitOfWork":
        return InMemoryUnitOfWork(self)

    def next_id(self) -> str:
        return f"seq{next(self._ids)}"


class InMemoryCounterRepository:
    def __init__(self, uow: "InMemoryUnitOfWork") -> None:
        self.uow = uow
        self.store = uow.store

    async def _interleave(self) -> None:
        if not self.store.locking:
            # Let concurrent reservers run between read and write.
            await asyncio.sleep(0)

    async def _lock(self, key: CounterKey) -> None:
        if not self.store.locking:
            await self._interleave()
            return
        lock = self.store.locks[key]
        if lock not in self.uow.held:
            await lock.acquire()
            self.uow.held.append(lock)

    async def get_for_update(self, key: CounterKey) -> SequenceCounterResult | None:
        await self._lock(key)
        return self.uow.current(key)

    async def create(self, key: CounterKey) -> SequenceCounterResult | None:
        if key in self.store.rows or key in self.store.creating:
            return None
        self.store.creating.add(key)
        self.uow.created.add(key)
        row = SequenceCounterResult(
            id=self.store.next_id(),
            date_key=key.date_key,
            type_code=key.type_code,
            location_code=key.location_code,
            confirmed=0,
            pending=None,
        )
        self.uow.staged[key] = row
        return row

    async def reserve_if_unchanged(
        self, snapshot: SequenceCounterResult, value: int
    ) -> bool:
        await self._interleave()
        current = self.uow.current(snapshot.key)
        if (
            current is None
            or current.confirmed != snapshot.confirmed
            or current.pending != snapshot.pending
        ):
            return False
        self.uow.staged[snapshot.key] = replace(current, pending=value)
        return True

    async def confirm_pending(self, key: CounterKey, value: int) -> bool:
        await self._lock(key)
        current = self.uow.current(key)
        if current is None or current.pending != value:
            return False
        self.uow.staged[key] = replace(current, confirmed=value, pending=None)
        return True


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryCounterStore) -> None:
        self.store = store
        self.staged: dict[CounterKey, SequenceCounterResult] = {}
        self.created: set[CounterKey] = set()
        self.held: list[asyncio.Lock] = []
        self.finished = False
        self.counters = InMemoryCounterRepository(self)

    def current(self, key: CounterKey) -> SequenceCounterResult | None:
        return self.staged.get(key) or self.store.rows.get(key)

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.finished:
            await self.rollback()

    async def commit(self) -> None:
        self.store.rows.update(self.staged)
        self.store.commits += 1
        self._finish()

    async def rollback(self) -> None:
        self.staged.clear()
        self.store.rollbacks += 1
        self._finish()

    def _finish(self) -> None:
        self.store.creating -= self.created
        self.created.clear()
        for lock in self.held:
            lock.release()
        self.held.clear()
        self.finished = True


@pytest.fixture
def settings() -> Settings:
    """Settings with built-in defaults only (no .env, no database)."""
    return Settings(_env_file=None, database_url="")


@pytest.fixture
def resolver(settings: Settings) -> GenerationConfigResolver:
    return GenerationConfigResolver(SettingsPatternStore(settings))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def entropy() -> CountingEntropy:
    return CountingEntropy()


@pytest.fixture
def counter_store() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def unlocked_counter_store() -> InMemoryCounterStore:
    """Counter store whose reads take no lock; only the conditional update protects it."""
    return InMemoryCounterStore(locking=False)


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff delays (seconds) requested by the service under test."""
    return []


@pytest.fixture
def make_service(resolver, clock, entropy, counter_store, sleeps):
    """Factory for CodeGenerationService wired to the in-memory fakes.

    Backoff sleeps are recorded instead of waited on; jitter is zero.
    """

    async def record_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        await asyncio.sleep(0)

    def _make(**kwargs) -> CodeGenerationService:
        options = {
            "resolver": resolver,
            "clock": clock,
            "entropy": entropy,
            "unit_of_work_factory": counter_store.unit_of_work,
            "sleep": record_sleep,
            "jitter": lambda low, high: 0,
        }
        options.update(kwargs)
        return CodeGenerationService(**options)

    return _make


@pytest.fixture
def code_service(make_service) -> CodeGenerationService:
    return make_service()


@pytest.fixture
async def sqlite_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory over a fresh in-memory SQLite database with the schema created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    enable_sqlite_transactions(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
async def client(code_service: CodeGenerationService) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), service backed by fakes."""
    app = create_app()
    app.dependency_overrides[get_code_generation_service] = lambda: code_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
