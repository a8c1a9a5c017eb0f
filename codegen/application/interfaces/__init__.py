"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from codegen.infrastructure or codegen.api.
"""

from codegen.application.interfaces.repositories import (
    ISequenceCounterRepository,
    ISequenceUnitOfWork,
)
from codegen.application.interfaces.services import (
    IClock,
    IEntropySource,
    IPatternConfigStore,
)

__all__ = [
    "IClock",
    "IEntropySource",
    "IPatternConfigStore",
    "ISequenceCounterRepository",
    "ISequenceUnitOfWork",
]
