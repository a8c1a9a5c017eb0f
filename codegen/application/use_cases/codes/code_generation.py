"""Code generation use case: resolve config, reserve a sequence, format, normalize.

Also confirms usage of generated codes so their reserved sequence becomes durable.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any

from codegen.application.dtos.generation import GenerationConfig, PatternOverrides
from codegen.application.dtos.sequence_counter import ReservationOutcome
from codegen.application.interfaces.repositories import ISequenceUnitOfWork
from codegen.application.interfaces.services import IClock, IEntropySource
from codegen.application.services.code_formatter import CodeFormatter
from codegen.application.services.code_parser import parse_code
from codegen.application.services.config_resolver import GenerationConfigResolver
from codegen.application.services.date_format import format_datetime
from codegen.application.services.sequence_allocator import SequenceAllocator
from codegen.domain.enums import PlaceholderKind
from codegen.domain.exceptions import (
    AllocationExhaustedException,
    SqlNotConfiguredException,
    ValidationException,
)
from codegen.domain.value_objects import CounterKey
from codegen.shared.telemetry.logging import get_logger
from codegen.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

logger = get_logger(__name__)

# Counter partition used when the pattern has no DATE placeholder (daily reset).
DAILY_DATE_KEY_FORMAT = "Y-m-d"
# Right-padding character for fixed total code length.
CODE_FILL_CHAR = "0"


def derive_date_key(config: GenerationConfig, now: datetime) -> str:
    """Counter partition for now: first DATE placeholder's format, else daily."""
    placeholder = config.compiled.first(PlaceholderKind.DATE)
    if placeholder is None:
        return format_datetime(now, DAILY_DATE_KEY_FORMAT)
    return format_datetime(
        now, config.date_format_for(PlaceholderKind.DATE, placeholder.param)
    )


def finalize_code(code: str, code_length: int | None) -> str:
    """Pad on the right with CODE_FILL_CHAR or truncate to code_length, when set."""
    if not code_length or code_length <= 0:
        return code
    if len(code) < code_length:
        return code.ljust(code_length, CODE_FILL_CHAR)
    return code[:code_length]


def backoff_delay_ms(base_ms: int, attempt: int, jitter: Callable[[int, int], int]) -> int:
    """Exponential backoff with jitter: base * 2^(attempt-1) + jitter(0, base/2)."""
    return base_ms * 2 ** (attempt - 1) + jitter(0, base_ms // 2)


def _counter_key(date_key: str, type_code: str, location_code: str) -> CounterKey:
    try:
        return CounterKey(date_key, type_code, location_code)
    except ValueError as e:
        raise ValidationException(str(e), field="counter_key") from e


class CodeGenerationService:
    """Generates and confirms codes (stateless; safe to share across callers).

    Sequential patterns reserve a counter value inside one unit of work per
    attempt; conflicts roll back and retry with exponential backoff until
    max_attempts. Non-sequential patterns never touch the counter store.
    """

    def __init__(
        self,
        resolver: GenerationConfigResolver,
        clock: IClock,
        entropy: IEntropySource,
        unit_of_work_factory: Callable[[], ISequenceUnitOfWork] | None = None,
        allocator: SequenceAllocator | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        jitter: Callable[[int, int], int] = random.randint,
    ) -> None:
        self.resolver = resolver
        self.clock = clock
        self.formatter = CodeFormatter(entropy)
        self.allocator = allocator or SequenceAllocator()
        self._unit_of_work_factory = unit_of_work_factory
        self._sleep = sleep
        self._jitter = jitter

    def _unit_of_work(self) -> ISequenceUnitOfWork:
        if self._unit_of_work_factory is None:
            raise SqlNotConfiguredException()
        return self._unit_of_work_factory()

    async def generate_for(
        self,
        pattern_key_or_template: str | None,
        overrides: Mapping[str, Any] | PatternOverrides | None = None,
    ) -> str:
        """Generate a code for a configured pattern key or an inline template.

        None selects the default pattern.

        Raises:
            ConfigurationException: Unknown pattern key.
            ValidationException: Invalid overrides.
            AllocationExhaustedException: No sequence reserved within max_attempts.
        """
        config = self.resolver.resolve(pattern_key_or_template, overrides)
        return await self.generate(config)

    @traced("codegen.generate")
    async def generate(self, config: GenerationConfig) -> str:
        """Generate one fully formatted, length-normalized code for config."""
        add_span_attributes(
            **{"codegen.pattern": config.pattern, "codegen.use_sequence": config.use_sequence}
        )
        if not config.use_sequence:
            code = self.formatter.format(config.compiled, config, self.clock.now(), 0)
            return finalize_code(code, config.code_length)

        last_conflict: str | None = None
        for attempt in range(1, config.max_attempts + 1):
            outcome, code = await self._attempt(config)
            if code is not None:
                add_span_attributes(**{"codegen.attempts": attempt})
                return finalize_code(code, config.code_length)
            last_conflict = outcome.detail
            add_span_event(
                "codegen.sequence_conflict",
                {"attempt": attempt, "detail": last_conflict or ""},
            )
            logger.warning(
                "Sequence conflict on attempt %d/%d: %s",
                attempt,
                config.max_attempts,
                last_conflict,
            )
            if attempt < config.max_attempts:
                delay_ms = backoff_delay_ms(config.retry_delay_ms, attempt, self._jitter)
                await self._sleep(delay_ms / 1000)

        logger.error(
            "Sequence allocation exhausted after %d attempts for pattern %s",
            config.max_attempts,
            config.pattern,
        )
        raise AllocationExhaustedException(config.max_attempts, last_conflict)

    async def _attempt(
        self, config: GenerationConfig
    ) -> tuple[ReservationOutcome, str | None]:
        """One reservation + format inside a single transaction."""
        async with self._unit_of_work() as uow:
            now = self.clock.now()
            key = _counter_key(
                derive_date_key(config, now), config.type_code, config.location_code
            )
            outcome = await self.allocator.reserve(uow.counters, key)
            if not outcome.is_reserved or outcome.value is None:
                await uow.rollback()
                return outcome, None
            code = self.formatter.format(config.compiled, config, now, outcome.value)
            await uow.commit()
            return outcome, code

    @traced("codegen.confirm_usage")
    async def confirm_usage(
        self,
        code: str,
        pattern_key_or_template: str | None = None,
        overrides: Mapping[str, Any] | PatternOverrides | None = None,
    ) -> bool:
        """Confirm that code was actually used, making its sequence durable.

        Args:
            code: Previously generated code.
            pattern_key_or_template: Pattern the code was generated with
                (default pattern when None).
            overrides: Overrides used at generation time.

        Returns:
            True on success (always for non-sequential patterns); False when the
            sequence is no longer the pending reservation.

        Raises:
            PatternMismatchException: If code does not match the pattern.
        """
        config = self.resolver.resolve(pattern_key_or_template, overrides)
        components = parse_code(config.compiled, code, config)
        if not config.use_sequence:
            return True

        sequence = components.get(PlaceholderKind.SEQUENCE)
        if sequence is None:
            logger.warning(
                "Cannot confirm %s: pattern %s has no SEQUENCE placeholder",
                code,
                config.pattern,
            )
            return False

        # The first DATE component is rendered with the date key's own format.
        date_key = components.get(PlaceholderKind.DATE) or derive_date_key(
            config, self.clock.now()
        )
        key = _counter_key(
            date_key,
            components[PlaceholderKind.TYPE],
            components[PlaceholderKind.LOCATION],
        )
        async with self._unit_of_work() as uow:
            confirmed = await self.allocator.confirm(uow.counters, key, int(sequence))
            await uow.commit()
        return confirmed
