"""Code generation API schemas."""

from typing import Any

from pydantic import BaseModel, Field


class GenerateCodeRequest(BaseModel):
    """Request body for generating a code.

    pattern is a configured pattern key or an inline template; omitted means
    the default pattern. overrides accepts the pattern definition keys
    (unknown keys are rejected with VALIDATION_ERROR).
    """

    pattern: str | None = Field(default=None, min_length=1, max_length=500)
    overrides: dict[str, Any] | None = None


class GenerateCodeResponse(BaseModel):
    """Generated code."""

    code: str
    pattern: str | None = None


class ConfirmCodeRequest(BaseModel):
    """Request body for confirming that a generated code was used.

    pattern and overrides must match those used at generation time.
    """

    code: str = Field(..., min_length=1, max_length=500)
    pattern: str | None = Field(default=None, min_length=1, max_length=500)
    overrides: dict[str, Any] | None = None


class ConfirmCodeResponse(BaseModel):
    """Confirmation result; confirmed is False when the sequence was not pending."""

    code: str
    confirmed: bool


class PatternResponse(BaseModel):
    """One configured named pattern."""

    key: str
    pattern: str


class PatternListResponse(BaseModel):
    """Configured named patterns plus the default template."""

    default_pattern: str
    patterns: list[PatternResponse]
