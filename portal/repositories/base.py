"""Repository interfaces.

Each repository stores whole records: ``put`` replaces the full document, so a
reader sees either the previous snapshot or the new one, never a mix.
"""
from typing import List, Optional

from portal.models.candidate import AccessLock, CandidateIdentity
from portal.models.session import AssessmentSession


class SessionRepository:
    async def get(self, session_id: str) -> Optional[AssessmentSession]:
        raise NotImplementedError

    async def put(self, session: AssessmentSession) -> None:
        raise NotImplementedError

    async def list_all(self) -> List[AssessmentSession]:
        raise NotImplementedError


class CandidateRepository:
    async def get(self, email: str) -> Optional[CandidateIdentity]:
        raise NotImplementedError

    async def put(self, candidate: CandidateIdentity) -> None:
        raise NotImplementedError

    async def list_all(self) -> List[CandidateIdentity]:
        raise NotImplementedError


class LockRepository:
    async def get(self, email: str) -> Optional[AccessLock]:
        raise NotImplementedError

    async def put(self, lock: AccessLock) -> None:
        raise NotImplementedError

    async def delete(self, email: str) -> bool:
        """Remove the lock; returns whether one existed."""
        raise NotImplementedError

    async def list_all(self) -> List[AccessLock]:
        raise NotImplementedError
