"""MongoDB repositories (motor)."""
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional

from portal.models.candidate import AccessLock, CandidateIdentity
from portal.models.session import AssessmentSession
from portal.repositories.base import CandidateRepository, LockRepository, SessionRepository


class MongoSessionRepository(SessionRepository):
    """One document per session, keyed by the session id."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.sessions

    async def get(self, session_id: str) -> Optional[AssessmentSession]:
        doc = await self.collection.find_one({"_id": session_id})
        return AssessmentSession.model_validate(doc) if doc else None

    async def put(self, session: AssessmentSession) -> None:
        doc = session.model_dump(by_alias=True, mode="json")
        await self.collection.replace_one({"_id": session.id}, doc, upsert=True)

    async def list_all(self) -> List[AssessmentSession]:
        docs = await self.collection.find({}).to_list(length=None)
        return [AssessmentSession.model_validate(doc) for doc in docs]


class MongoCandidateRepository(CandidateRepository):
    """Candidate directory keyed by normalized email."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.candidates

    async def get(self, email: str) -> Optional[CandidateIdentity]:
        doc = await self.collection.find_one({"_id": email})
        return CandidateIdentity(**doc) if doc else None

    async def put(self, candidate: CandidateIdentity) -> None:
        doc = {"_id": candidate.email, **candidate.model_dump(mode="json")}
        await self.collection.replace_one({"_id": candidate.email}, doc, upsert=True)

    async def list_all(self) -> List[CandidateIdentity]:
        docs = await self.collection.find({}).to_list(length=None)
        return [CandidateIdentity(**doc) for doc in docs]


class MongoLockRepository(LockRepository):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.access_locks

    async def get(self, email: str) -> Optional[AccessLock]:
        doc = await self.collection.find_one({"_id": email})
        return AccessLock(**doc) if doc else None

    async def put(self, lock: AccessLock) -> None:
        doc = {"_id": lock.email, **lock.model_dump(mode="json")}
        await self.collection.replace_one({"_id": lock.email}, doc, upsert=True)

    async def delete(self, email: str) -> bool:
        result = await self.collection.delete_one({"_id": email})
        return result.deleted_count > 0

    async def list_all(self) -> List[AccessLock]:
        docs = await self.collection.find({}).to_list(length=None)
        return [AccessLock(**doc) for doc in docs]
