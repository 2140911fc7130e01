"""Process-local repositories for development and tests."""
import copy
from typing import Dict, List, Optional

from portal.models.candidate import AccessLock, CandidateIdentity
from portal.models.session import AssessmentSession
from portal.repositories.base import CandidateRepository, LockRepository, SessionRepository


class InMemorySessionRepository(SessionRepository):
    def __init__(self):
        self._docs: Dict[str, dict] = {}

    async def get(self, session_id: str) -> Optional[AssessmentSession]:
        doc = self._docs.get(session_id)
        if doc is None:
            return None
        return AssessmentSession.model_validate(copy.deepcopy(doc))

    async def put(self, session: AssessmentSession) -> None:
        self._docs[session.id] = copy.deepcopy(session.model_dump(by_alias=True, mode="json"))

    async def list_all(self) -> List[AssessmentSession]:
        return [AssessmentSession.model_validate(copy.deepcopy(doc)) for doc in self._docs.values()]


class InMemoryCandidateRepository(CandidateRepository):
    def __init__(self):
        self._docs: Dict[str, dict] = {}

    async def get(self, email: str) -> Optional[CandidateIdentity]:
        doc = self._docs.get(email)
        return CandidateIdentity(**doc) if doc else None

    async def put(self, candidate: CandidateIdentity) -> None:
        self._docs[candidate.email] = candidate.model_dump(mode="json")

    async def list_all(self) -> List[CandidateIdentity]:
        return [CandidateIdentity(**doc) for doc in self._docs.values()]


class InMemoryLockRepository(LockRepository):
    def __init__(self):
        self._docs: Dict[str, dict] = {}

    async def get(self, email: str) -> Optional[AccessLock]:
        doc = self._docs.get(email)
        return AccessLock(**doc) if doc else None

    async def put(self, lock: AccessLock) -> None:
        self._docs[lock.email] = lock.model_dump(mode="json")

    async def delete(self, email: str) -> bool:
        return self._docs.pop(email, None) is not None

    async def list_all(self) -> List[AccessLock]:
        return [AccessLock(**doc) for doc in self._docs.values()]
