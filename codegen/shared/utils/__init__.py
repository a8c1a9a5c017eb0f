"""Shared utilities: datetime, generators."""

from codegen.shared.utils.datetime import now_in
from codegen.shared.utils.generators import (
    ALPHANUMERIC,
    generate_cuid,
    generate_uuid4,
    random_alphanumeric,
)

__all__ = [
    "ALPHANUMERIC",
    "generate_cuid",
    "generate_uuid4",
    "random_alphanumeric",
    "now_in",
]
