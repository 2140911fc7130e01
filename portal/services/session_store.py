"""Authoritative record of every assessment session."""
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from portal.errors import SessionNotFoundError
from portal.models.question import Question, Section, SectionId
from portal.models.session import (
    AssessmentSession,
    CandidateSnapshot,
    EvidenceItem,
    Feedback,
    LogEntry,
    SectionScores,
    SessionStatus,
    utcnow,
)
from portal.repositories.base import SessionRepository
from portal.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)


class SessionStore:
    """Owns session state; every mutation is a read-modify-replace of the
    whole record, serialized per session and persisted before returning."""

    def __init__(self, repository: SessionRepository):
        self.repository = repository
        self._locks = KeyedLocks()

    async def create(
        self,
        candidate: CandidateSnapshot,
        job_description: str,
        sections: List[Section],
    ) -> AssessmentSession:
        session = AssessmentSession(
            id=uuid.uuid4().hex,
            candidate=candidate,
            job_description=job_description,
            sections=sections,
        )
        await self.repository.put(session)
        logger.info("Created session %s for %s", session.id, candidate.email)
        return session

    async def get(self, session_id: str) -> AssessmentSession:
        session = await self.repository.get(session_id)
        if session is None:
            raise SessionNotFoundError("Session not found")
        return session

    async def list_all(self) -> List[AssessmentSession]:
        return await self.repository.list_all()

    async def _mutate(self, session_id: str, change: Callable[[AssessmentSession], Any]) -> AssessmentSession:
        async with self._locks.hold(session_id):
            session = await self.get(session_id)
            if change(session) is False:
                return session
            await self.repository.put(session)
            return session

    async def set_section_questions(
        self,
        session_id: str,
        section_id: SectionId,
        questions: List[Question],
    ) -> Section:
        """Populate a pending section; keeps existing questions if already set."""
        def change(session: AssessmentSession):
            section = session.section(section_id)
            if section.is_populated:
                return False
            section.questions = list(questions)
            section.is_pending = False

        session = await self._mutate(session_id, change)
        return session.section(section_id)

    async def record_answer_set(self, session_id: str, answers: Dict[str, Any]) -> AssessmentSession:
        def change(session: AssessmentSession):
            session.answers = {str(key): value for key, value in answers.items()}

        return await self._mutate(session_id, change)

    async def record_evidence(self, session_id: str, evidence_type: str, image: str) -> AssessmentSession:
        def change(session: AssessmentSession):
            session.evidence.append(EvidenceItem(type=evidence_type, image=image))

        return await self._mutate(session_id, change)

    async def append_log(
        self,
        session_id: str,
        action: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> AssessmentSession:
        def change(session: AssessmentSession):
            session.logs.append(LogEntry(action=action, details=details or {}))

        return await self._mutate(session_id, change)

    async def finalize(
        self,
        session_id: str,
        score: int,
        max_score: int,
        section_scores: SectionScores,
        feedback: Feedback,
        graded_details: Optional[Dict[str, int]] = None,
    ) -> AssessmentSession:
        """Store the graded result. A terminated session keeps its status."""
        def change(session: AssessmentSession):
            if session.status == SessionStatus.ACTIVE:
                session.status = SessionStatus.COMPLETED
            session.final_score = score
            session.max_score = max_score
            session.section_scores = section_scores
            session.feedback = feedback
            session.graded_details = dict(graded_details or {})
            session.end_time = session.end_time or utcnow()

        return await self._mutate(session_id, change)

    async def terminate(self, session_id: str, reason: str) -> AssessmentSession:
        """Move an active session to TERMINATED; no-op for any other status."""
        def change(session: AssessmentSession):
            if session.status != SessionStatus.ACTIVE:
                return False
            session.status = SessionStatus.TERMINATED
            session.termination_reason = reason
            session.end_time = utcnow()
            session.logs.append(LogEntry(action="SESSION_TERMINATED", details={"reason": reason}))

        return await self._mutate(session_id, change)
