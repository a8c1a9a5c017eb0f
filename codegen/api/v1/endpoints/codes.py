"""Code generation API: thin routes delegating to CodeGenerationService."""

from typing import Annotated

from fastapi import APIRouter, Depends

from codegen.api.v1.dependencies import get_code_generation_service
from codegen.application.use_cases.codes import CodeGenerationService
from codegen.schemas.code import (
    ConfirmCodeRequest,
    ConfirmCodeResponse,
    GenerateCodeRequest,
    GenerateCodeResponse,
    PatternListResponse,
    PatternResponse,
)

router = APIRouter()

ServiceDep = Annotated[CodeGenerationService, Depends(get_code_generation_service)]


@router.post("", response_model=GenerateCodeResponse, status_code=201)
async def generate_code(body: GenerateCodeRequest, service: ServiceDep):
    """Generate a code for a named pattern, an inline template, or the default pattern.

    Sequential codes are reserved, not yet used: call POST /codes/confirm once
    the code has actually been assigned.
    """
    code = await service.generate_for(body.pattern, body.overrides)
    return GenerateCodeResponse(code=code, pattern=body.pattern)


@router.post("/confirm", response_model=ConfirmCodeResponse)
async def confirm_code(body: ConfirmCodeRequest, service: ServiceDep):
    """Confirm a generated code; confirmed is False if its sequence is no longer pending."""
    confirmed = await service.confirm_usage(body.code, body.pattern, body.overrides)
    return ConfirmCodeResponse(code=body.code, confirmed=confirmed)


@router.get("/patterns", response_model=PatternListResponse)
async def list_patterns(service: ServiceDep):
    """List configured named patterns and their templates."""
    resolver = service.resolver
    return PatternListResponse(
        default_pattern=resolver.store.defaults().pattern,
        patterns=[
            PatternResponse(key=key, pattern=template)
            for key, template in resolver.named_patterns().items()
        ],
    )
