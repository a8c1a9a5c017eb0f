"""Pydantic request/response schemas for the API."""

from codegen.schemas.code import (
    ConfirmCodeRequest,
    ConfirmCodeResponse,
    GenerateCodeRequest,
    GenerateCodeResponse,
    PatternListResponse,
    PatternResponse,
)
from codegen.schemas.health import HealthResponse, ReadinessResponse

__all__ = [
    "ConfirmCodeRequest",
    "ConfirmCodeResponse",
    "GenerateCodeRequest",
    "GenerateCodeResponse",
    "HealthResponse",
    "PatternListResponse",
    "PatternResponse",
    "ReadinessResponse",
]
