"""Code generation and confirmation use cases."""

from codegen.application.use_cases.codes.code_generation import (
    CodeGenerationService,
    derive_date_key,
    finalize_code,
)

__all__ = ["CodeGenerationService", "derive_date_key", "finalize_code"]
