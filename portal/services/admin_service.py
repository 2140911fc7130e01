"""Admin console operations."""
import logging
from typing import Dict, List, Tuple

from portal.models.candidate import CandidateIdentity
from portal.models.session import AssessmentSession
from portal.services.access_control import AccessControlLedger
from portal.services.session_store import SessionStore
from portal.utils.security import secrets_match

logger = logging.getLogger(__name__)

REACTIVATED = "reactivated"
NOT_LOCKED = "not_locked"


class AdminService:
    def __init__(self, store: SessionStore, ledger: AccessControlLedger, admin_directory: Dict[str, str]):
        self.store = store
        self.ledger = ledger
        self.admin_directory = dict(admin_directory)

    def authenticate(self, username: str, password: str) -> bool:
        expected = self.admin_directory.get(username or "")
        if expected is None:
            return False
        return secrets_match(password or "", expected)

    async def list_sessions(self) -> List[AssessmentSession]:
        sessions = await self.store.list_all()
        return sorted(sessions, key=lambda s: s.start_time, reverse=True)

    async def session_evidence(self, session_id: str) -> AssessmentSession:
        return await self.store.get(session_id)

    async def create_candidate(self, email: str, access_code: str) -> Tuple[CandidateIdentity, bool]:
        identity = await self.ledger.register_candidate(email, access_code)
        logger.info("Candidate %s provisioned", identity.email)
        return identity, await self.ledger.is_locked(identity.email)

    async def list_candidates(self) -> List[Tuple[CandidateIdentity, bool]]:
        return await self.ledger.list_candidates()

    async def reactivate(self, email: str) -> str:
        return REACTIVATED if await self.ledger.unlock(email) else NOT_LOCKED
