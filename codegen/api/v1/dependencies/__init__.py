"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, never on infrastructure directly.
"""

from codegen.api.v1.dependencies.codes import (
    build_code_generation_service,
    get_code_generation_service,
)

__all__ = ["build_code_generation_service", "get_code_generation_service"]
