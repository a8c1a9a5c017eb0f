"""Infrastructure implementations of application service interfaces."""

from codegen.infrastructure.services.pattern_store import SettingsPatternStore
from codegen.infrastructure.services.runtime import SecureEntropySource, SystemClock

__all__ = [
    "SecureEntropySource",
    "SettingsPatternStore",
    "SystemClock",
]
