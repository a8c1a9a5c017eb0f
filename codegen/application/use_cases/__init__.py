"""Application use cases: one entry point per workflow."""

from codegen.application.use_cases.codes import CodeGenerationService

__all__ = ["CodeGenerationService"]
