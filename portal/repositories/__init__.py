"""Storage backends behind narrow repository interfaces."""
from portal.repositories.base import CandidateRepository, LockRepository, SessionRepository
from portal.repositories.memory import (
    InMemoryCandidateRepository,
    InMemoryLockRepository,
    InMemorySessionRepository,
)
from portal.repositories.mongo import (
    MongoCandidateRepository,
    MongoLockRepository,
    MongoSessionRepository,
)

__all__ = [
    "CandidateRepository",
    "LockRepository",
    "SessionRepository",
    "InMemoryCandidateRepository",
    "InMemoryLockRepository",
    "InMemorySessionRepository",
    "MongoCandidateRepository",
    "MongoLockRepository",
    "MongoSessionRepository",
]
