"""One-attempt-per-candidate access ledger."""
import logging
from typing import Dict, List, Optional, Tuple

from portal.errors import AuthorizationError, ValidationError
from portal.models.candidate import AccessLock, CandidateIdentity
from portal.repositories.base import CandidateRepository, LockRepository
from portal.utils.security import secrets_match

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AccessControlLedger:
    """Candidate directory plus the lock map that gates session creation."""

    def __init__(self, candidates: CandidateRepository, locks: LockRepository):
        self.candidates = candidates
        self.locks = locks

    async def is_authorized(self, email: str, code: str) -> bool:
        identity = await self.candidates.get(normalize_email(email))
        if identity is None:
            return False
        return secrets_match(code or "", identity.access_code)

    async def authorize_attempt(self, email: str, code: str) -> None:
        """Reject unknown, mismatched or already-used credentials."""
        identity = await self.candidates.get(normalize_email(email))
        if identity is None:
            raise AuthorizationError("Email not authorized for this assessment.")
        if not secrets_match(code or "", identity.access_code):
            raise AuthorizationError("Invalid Access Code.")
        if await self.is_locked(email):
            raise AuthorizationError("Assessment already completed for this candidate.")

    async def is_locked(self, email: str) -> bool:
        return await self.locks.get(normalize_email(email)) is not None

    async def lock(self, email: str, reason: str = "submitted", session_id: Optional[str] = None) -> AccessLock:
        email = normalize_email(email)
        existing = await self.locks.get(email)
        if existing is not None:
            return existing
        lock = AccessLock(email=email, reason=reason, session_id=session_id)
        await self.locks.put(lock)
        logger.info("Locked candidate %s (%s)", email, reason)
        return lock

    async def unlock(self, email: str) -> bool:
        removed = await self.locks.delete(normalize_email(email))
        if removed:
            logger.info("Reactivated candidate %s", normalize_email(email))
        return removed

    async def register_candidate(self, email: str, access_code: str) -> CandidateIdentity:
        email = normalize_email(email)
        access_code = (access_code or "").strip()
        if not email or not access_code:
            raise ValidationError("Email and access code are required")
        identity = CandidateIdentity(email=email, access_code=access_code)
        existing = await self.candidates.get(email)
        if existing is not None:
            identity.created_at = existing.created_at
        await self.candidates.put(identity)
        return identity

    async def seed_directory(self, directory: Dict[str, str]) -> int:
        """Insert configured candidates that are not in the directory yet."""
        added = 0
        for email, code in directory.items():
            if await self.candidates.get(normalize_email(email)) is None:
                await self.register_candidate(email, code)
                added += 1
        return added

    async def list_candidates(self) -> List[Tuple[CandidateIdentity, bool]]:
        locked = {lock.email for lock in await self.locks.list_all()}
        candidates = sorted(await self.candidates.list_all(), key=lambda c: c.email)
        return [(candidate, candidate.email in locked) for candidate in candidates]
