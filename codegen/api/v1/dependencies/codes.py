"""Code generation dependencies (composition root)."""

from __future__ import annotations

from functools import partial

from codegen.application.services.config_resolver import GenerationConfigResolver
from codegen.application.use_cases.codes import CodeGenerationService
from codegen.core.config import Settings, get_settings
from codegen.infrastructure.persistence.database import get_session_factory
from codegen.infrastructure.persistence.unit_of_work import SqlSequenceUnitOfWork
from codegen.infrastructure.services import (
    SecureEntropySource,
    SettingsPatternStore,
    SystemClock,
)


def build_code_generation_service(settings: Settings) -> CodeGenerationService:
    """Wire CodeGenerationService from settings.

    Without a configured database the service still generates
    non-sequential codes; sequential ones raise SqlNotConfiguredException.
    """
    session_factory = get_session_factory()
    unit_of_work_factory = (
        partial(SqlSequenceUnitOfWork, session_factory)
        if session_factory is not None
        else None
    )
    return CodeGenerationService(
        resolver=GenerationConfigResolver(SettingsPatternStore(settings)),
        clock=SystemClock(settings.codegen_timezone),
        entropy=SecureEntropySource(),
        unit_of_work_factory=unit_of_work_factory,
    )


async def get_code_generation_service() -> CodeGenerationService:
    """CodeGenerationService for the current request (stateless, cheap to build)."""
    return build_code_generation_service(get_settings())
