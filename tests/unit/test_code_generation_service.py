"""Tests for CodeGenerationService (generate, retry with backoff, confirm)."""

import asyncio
from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from codegen.application.dtos.sequence_counter import ReservationOutcome, SequenceCounterResult
from codegen.application.services.pattern_compiler import compile_pattern
from codegen.application.use_cases.codes import (
    CodeGenerationService,
    derive_date_key,
    finalize_code,
)
from codegen.application.use_cases.codes.code_generation import backoff_delay_ms
from codegen.core.constants import BUILTIN_PATTERNS
from codegen.domain.enums import PlaceholderKind
from codegen.domain.exceptions import (
    AllocationExhaustedException,
    ConfigurationException,
    PatternMismatchException,
    SqlNotConfiguredException,
)
from codegen.domain.value_objects import CounterKey


def _sequence(code: str) -> int:
    return int(code.rsplit("-", 1)[-1])


async def test_generates_consecutive_codes(code_service: CodeGenerationService) -> None:
    assert await code_service.generate_for("order") == "ORD-250609-HQ-0001"
    assert await code_service.generate_for("order") == "ORD-250609-HQ-0002"


async def test_default_pattern_when_selector_is_none(
    code_service: CodeGenerationService, counter_store
) -> None:
    assert await code_service.generate_for(None) == "GEN-250609-0001"
    assert CounterKey("250609", "GEN", "XX") in counter_store.rows


async def test_counter_is_partitioned_by_date_type_and_location(
    code_service: CodeGenerationService, clock
) -> None:
    assert await code_service.generate_for("order") == "ORD-250609-HQ-0001"
    assert await code_service.generate_for("order", {"location": "blr"}) == "ORD-250609-BLR-0001"
    clock.advance(days=1)
    assert await code_service.generate_for("order") == "ORD-250610-HQ-0001"


async def test_non_sequential_pattern_needs_no_counter_store(make_service) -> None:
    service = make_service(unit_of_work_factory=None)
    code = await service.generate_for("tracking_id")
    assert code == "TRK-00000000-0000-4000-8000-000000000001"
    assert len(code) == 40


async def test_sequential_pattern_without_store_is_unavailable(make_service) -> None:
    service = make_service(unit_of_work_factory=None)
    with pytest.raises(SqlNotConfiguredException):
        await service.generate_for("order")


async def test_random_pattern_creates_no_counter_rows(
    code_service: CodeGenerationService, counter_store
) -> None:
    assert await code_service.generate_for("{TYPE}-{RANDOM:6}") == "GEN-000001"
    assert counter_store.rows == {}
    assert counter_store.commits == 0


async def test_unknown_pattern_key(code_service: CodeGenerationService) -> None:
    with pytest.raises(ConfigurationException):
        await code_service.generate_for("unknown")


async def test_code_length_pads_and_truncates(code_service: CodeGenerationService) -> None:
    assert await code_service.generate_for("{TYPE}", {"code_length": 6}) == "GEN000"
    assert await code_service.generate_for("order", {"code_length": 10}) == "ORD-250609"


async def test_concurrent_generation_yields_distinct_sequences(
    code_service: CodeGenerationService, sleeps: list[float]
) -> None:
    codes = await asyncio.gather(*(code_service.generate_for("order") for _ in range(20)))
    assert sorted(_sequence(code) for code in codes) == list(range(1, 21))
    assert sleeps == []


async def test_conditional_update_keeps_values_distinct_without_locks(
    make_service, unlocked_counter_store, sleeps: list[float]
) -> None:
    store = unlocked_counter_store
    service = make_service(unit_of_work_factory=store.unit_of_work)

    codes = await asyncio.gather(
        *(service.generate_for("order", {"max_attempts": 10}) for _ in range(5))
    )

    assert sorted(_sequence(code) for code in codes) == [1, 2, 3, 4, 5]
    assert sleeps
    assert store.rollbacks == len(sleeps)
    assert store.rows[CounterKey("250609", "ORD", "HQ")].pending == 5


async def test_conflicts_retry_with_exponential_backoff(
    make_service, counter_store, sleeps: list[float]
) -> None:
    allocator = AsyncMock()
    allocator.reserve.side_effect = [
        ReservationOutcome.conflict("modified"),
        ReservationOutcome.conflict("modified"),
        ReservationOutcome.reserved(9),
    ]
    service = make_service(allocator=allocator)

    assert await service.generate_for("order") == "ORD-250609-HQ-0009"
    assert sleeps == [0.15, 0.3]
    assert allocator.reserve.await_count == 3
    assert counter_store.rollbacks == 2
    assert counter_store.commits == 1


async def test_exhaustion_reports_last_conflict(
    make_service, counter_store, sleeps: list[float]
) -> None:
    allocator = AsyncMock()
    allocator.reserve.return_value = ReservationOutcome.conflict("created elsewhere")
    service = make_service(allocator=allocator)

    with pytest.raises(AllocationExhaustedException) as exc_info:
        await service.generate_for("order", {"max_attempts": 3})

    assert exc_info.value.details == {"attempts": 3, "last_conflict": "created elsewhere"}
    assert allocator.reserve.await_count == 3
    # No sleep after the final attempt.
    assert sleeps == [0.15, 0.3]
    assert counter_store.commits == 0


def test_backoff_delay_adds_jitter_up_to_half_base() -> None:
    assert backoff_delay_ms(150, 1, lambda low, high: low) == 150
    assert backoff_delay_ms(150, 3, lambda low, high: high) == 675
    assert backoff_delay_ms(0, 4, lambda low, high: high) == 0


@pytest.mark.parametrize(
    ("code", "length", "expected"),
    [
        ("ABC", 6, "ABC000"),
        ("ABCDEF", 4, "ABCD"),
        ("ABCD", 4, "ABCD"),
        ("ABC", None, "ABC"),
        ("ABC", 0, "ABC"),
    ],
)
def test_finalize_code(code: str, length: int | None, expected: str) -> None:
    assert finalize_code(code, length) == expected


def test_derive_date_key_uses_first_date_format(resolver, clock) -> None:
    now = clock.now()
    assert derive_date_key(resolver.resolve("order"), now) == "250609"
    assert derive_date_key(resolver.resolve("invoice"), now) == "202506"
    assert derive_date_key(resolver.resolve("entity_code"), now) == "2025"
    assert derive_date_key(resolver.resolve("X-{SEQUENCE}"), now) == "2025-06-09"


async def test_confirm_usage_only_confirms_pending_value(
    code_service: CodeGenerationService, counter_store
) -> None:
    first = await code_service.generate_for("order")
    second = await code_service.generate_for("order")

    assert await code_service.confirm_usage(second, "order") is True
    assert await code_service.confirm_usage(second, "order") is False
    assert await code_service.confirm_usage(first, "order") is False

    row = counter_store.rows[CounterKey("250609", "ORD", "HQ")]
    assert (row.confirmed, row.pending) == (2, None)
    assert await code_service.generate_for("order") == "ORD-250609-HQ-0003"


async def test_confirm_usage_rejects_foreign_code(code_service: CodeGenerationService) -> None:
    with pytest.raises(PatternMismatchException):
        await code_service.confirm_usage("ORD-2506-HQ-0001", "order")
    with pytest.raises(PatternMismatchException):
        await code_service.confirm_usage("ORD-250609-HQ-0001\n", "order")


async def test_confirm_without_date_placeholder_uses_daily_key(
    code_service: CodeGenerationService, counter_store
) -> None:
    code = await code_service.generate_for("X-{SEQUENCE:3}")
    assert code == "X-001"
    assert CounterKey("2025-06-09", "GEN", "XX") in counter_store.rows
    assert await code_service.confirm_usage(code, "X-{SEQUENCE:3}") is True


async def test_confirm_non_sequential_code_is_always_true(make_service) -> None:
    service = make_service(unit_of_work_factory=None)
    code = await service.generate_for("tracking_id")
    assert await service.confirm_usage(code, "tracking_id") is True


async def test_confirm_forced_sequence_without_placeholder_is_false(
    code_service: CodeGenerationService,
) -> None:
    overrides = {"use_sequence": True}
    code = await code_service.generate_for("T-{UUID}", overrides)
    assert await code_service.confirm_usage(code, "T-{UUID}", overrides) is False


async def test_sequence_grows_past_its_width_without_repeating_codes(
    code_service: CodeGenerationService, counter_store
) -> None:
    key = CounterKey("2025", "TAX", "PNQ")
    counter_store.rows[key] = SequenceCounterResult(
        id="seq-tax",
        date_key=key.date_key,
        type_code=key.type_code,
        location_code=key.location_code,
        confirmed=99,
        pending=None,
    )
    code = await code_service.generate_for("tax_code")
    assert code == "TAX-PNQ-2025-100"
    assert await code_service.confirm_usage(code, "tax_code") is True

    counter_store.rows[key] = replace(counter_store.rows[key], confirmed=999)
    code = await code_service.generate_for("tax_code")
    assert code == "TAX-PNQ-2025-1000"
    assert await code_service.confirm_usage(code, "tax_code") is True


@pytest.mark.parametrize("name", sorted(BUILTIN_PATTERNS))
def test_sequential_builtins_are_not_cut_to_a_fixed_length(name: str) -> None:
    definition = BUILTIN_PATTERNS[name]
    if compile_pattern(definition["pattern"]).has(PlaceholderKind.SEQUENCE):
        assert "code_length" not in definition
