"""Append-only proctoring event log.

Entries are never evicted; a long exam with a chatty client grows its session
record without bound.
"""
import logging
from typing import Any, Dict, Optional

from portal.models.session import AssessmentSession
from portal.services.session_store import SessionStore

logger = logging.getLogger(__name__)

SESSION_STARTED = "SESSION_STARTED"
SECTION_GENERATED = "SECTION_GENERATED"
VIOLATION_DETECTED = "VIOLATION_DETECTED"
SESSION_TERMINATED = "SESSION_TERMINATED"
SUBMITTED = "SUBMITTED"
GRADING_ERROR = "GRADING_ERROR"
FEEDBACK_FALLBACK = "FEEDBACK_FALLBACK"


class ProctoringLog:
    def __init__(self, store: SessionStore):
        self.store = store

    async def log_event(
        self,
        session_id: str,
        action: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> AssessmentSession:
        return await self.store.append_log(session_id, action, details)

    async def record_evidence(self, session_id: str, violation_type: str, image: str) -> AssessmentSession:
        return await self.store.record_evidence(session_id, violation_type, image)

    async def report_violation(
        self,
        session_id: str,
        violation_type: str,
        image: Optional[str] = None,
    ) -> AssessmentSession:
        """Log a violation; attach evidence only when the heartbeat carried an image."""
        logger.warning("[PROCTOR] Violation %s for session %s", violation_type, session_id)
        session = await self.log_event(
            session_id,
            VIOLATION_DETECTED,
            {"type": violation_type, "has_snapshot": bool(image)},
        )
        if image:
            session = await self.record_evidence(session_id, violation_type, image)
        return session

    @staticmethod
    def violation_count(session: AssessmentSession) -> int:
        return sum(1 for entry in session.logs if entry.action == VIOLATION_DETECTED)
