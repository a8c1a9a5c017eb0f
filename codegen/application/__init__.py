"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (counter store, config store, clock).
"""

from codegen.application.interfaces import (
    IClock,
    IEntropySource,
    IPatternConfigStore,
    ISequenceCounterRepository,
    ISequenceUnitOfWork,
)

__all__ = [
    "IClock",
    "IEntropySource",
    "IPatternConfigStore",
    "ISequenceCounterRepository",
    "ISequenceUnitOfWork",
]
