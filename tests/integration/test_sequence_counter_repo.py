"""Sequence counter repository and unit of work against SQLite (aiosqlite, in-memory)."""

from functools import partial

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codegen.application.use_cases.codes import CodeGenerationService
from codegen.domain.value_objects import CounterKey
from codegen.infrastructure.persistence.models import CodeSequence
from codegen.infrastructure.persistence.unit_of_work import SqlSequenceUnitOfWork

KEY = CounterKey("250609", "ORD", "HQ")


@pytest.fixture
def uow_factory(sqlite_session_factory: async_sessionmaker[AsyncSession]):
    return partial(SqlSequenceUnitOfWork, sqlite_session_factory)


async def test_create_reserve_commit(uow_factory) -> None:
    async with uow_factory() as uow:
        assert await uow.counters.get_for_update(KEY) is None
        snapshot = await uow.counters.create(KEY)
        assert snapshot is not None
        assert (snapshot.confirmed, snapshot.pending) == (0, None)
        assert snapshot.next_value == 1
        assert await uow.counters.reserve_if_unchanged(snapshot, 1) is True
        await uow.commit()

    async with uow_factory() as uow:
        row = await uow.counters.get_for_update(KEY)
        assert row is not None
        assert row.id == snapshot.id
        assert (row.confirmed, row.pending) == (0, 1)
        assert row.next_value == 2


async def test_stale_snapshot_is_rejected(uow_factory) -> None:
    async with uow_factory() as uow:
        snapshot = await uow.counters.create(KEY)
        assert await uow.counters.reserve_if_unchanged(snapshot, 1) is True
        # Same snapshot again: pending is no longer NULL.
        assert await uow.counters.reserve_if_unchanged(snapshot, 1) is False
        fresh = await uow.counters.get_for_update(KEY)
        assert fresh.pending == 1
        assert await uow.counters.reserve_if_unchanged(fresh, 2) is True
        await uow.commit()


async def test_duplicate_create_returns_none_and_keeps_transaction(uow_factory) -> None:
    async with uow_factory() as uow:
        first = await uow.counters.create(KEY)
        assert first is not None
        assert await uow.counters.create(KEY) is None
        assert await uow.counters.reserve_if_unchanged(first, 1) is True
        await uow.commit()

    async with uow_factory() as uow:
        assert (await uow.counters.get_for_update(KEY)).pending == 1


async def test_confirm_pending_only_once(uow_factory) -> None:
    async with uow_factory() as uow:
        snapshot = await uow.counters.create(KEY)
        await uow.counters.reserve_if_unchanged(snapshot, 1)
        await uow.commit()

    async with uow_factory() as uow:
        assert await uow.counters.confirm_pending(KEY, 2) is False
        assert await uow.counters.confirm_pending(KEY, 1) is True
        assert await uow.counters.confirm_pending(KEY, 1) is False
        await uow.commit()

    async with uow_factory() as uow:
        row = await uow.counters.get_for_update(KEY)
        assert (row.confirmed, row.pending) == (1, None)


async def test_leaving_without_commit_rolls_back(uow_factory) -> None:
    async with uow_factory() as uow:
        snapshot = await uow.counters.create(KEY)
        await uow.counters.reserve_if_unchanged(snapshot, 1)

    async with uow_factory() as uow:
        assert await uow.counters.get_for_update(KEY) is None


async def test_exception_inside_unit_of_work_rolls_back(uow_factory) -> None:
    with pytest.raises(RuntimeError):
        async with uow_factory() as uow:
            await uow.counters.create(KEY)
            raise RuntimeError("boom")

    async with uow_factory() as uow:
        assert await uow.counters.get_for_update(KEY) is None


async def test_session_unavailable_outside_context(uow_factory) -> None:
    uow = uow_factory()
    with pytest.raises(RuntimeError):
        _ = uow.session


async def test_create_stores_key_columns_and_timestamps(uow_factory) -> None:
    async with uow_factory() as uow:
        created = await uow.counters.create(KEY)
        row = await uow.session.get(CodeSequence, created.id)
        assert row is not None
        assert (row.date_key, row.type, row.location) == ("250609", "ORD", "HQ")
        assert row.created_at is not None


async def test_generation_end_to_end(make_service, uow_factory) -> None:
    service: CodeGenerationService = make_service(unit_of_work_factory=uow_factory)

    first = await service.generate_for("order")
    second = await service.generate_for("order")
    assert (first, second) == ("ORD-250609-HQ-0001", "ORD-250609-HQ-0002")

    assert await service.confirm_usage(second, "order") is True
    assert await service.confirm_usage(first, "order") is False
    assert await service.generate_for("order") == "ORD-250609-HQ-0003"

    invoice = await service.generate_for("invoice")
    assert invoice == "INV-202506-MUM-00001"
    assert await service.confirm_usage(invoice, "invoice") is True
