"""Candidate-facing assessment lifecycle."""
import logging
from typing import Any, Dict, Optional, Tuple

from portal.errors import AuthorizationError, ProviderError, ValidationError
from portal.models.question import Question, QuestionType, Section
from portal.models.session import AssessmentSession, CandidateSnapshot, SessionStatus
from portal.services.access_control import AccessControlLedger, normalize_email
from portal.services.fallback import fallback_feedback, fallback_run_output
from portal.services.grading import GradingEngine, GradingOutcome
from portal.services.proctoring import (
    FEEDBACK_FALLBACK,
    GRADING_ERROR,
    SECTION_GENERATED,
    SESSION_STARTED,
    SUBMITTED,
    ProctoringLog,
)
from portal.services.prompts import run_code_prompt
from portal.services.provider import ContentProvider
from portal.services.section_generator import SectionGenerator
from portal.services.session_store import SessionStore
from portal.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)

TERMINATION_REASON = "Assessment Terminated: Focus Loss (Alt-Tab/Minimize)"


class AssessmentService:
    def __init__(
        self,
        store: SessionStore,
        ledger: AccessControlLedger,
        generator: SectionGenerator,
        grading: GradingEngine,
        proctoring: ProctoringLog,
        provider: ContentProvider,
        violation_threshold: int = 2,
    ):
        self.store = store
        self.ledger = ledger
        self.generator = generator
        self.grading = grading
        self.proctoring = proctoring
        self.provider = provider
        self.violation_threshold = violation_threshold
        self._submissions = KeyedLocks()

    async def start_assessment(
        self,
        name: str,
        email: str,
        access_code: str,
        job_description: str,
    ) -> AssessmentSession:
        """Authorize the candidate and open a session with section 1 ready."""
        name = (name or "").strip()
        job_description = (job_description or "").strip()
        if not name or not job_description:
            raise ValidationError("Candidate name and job description are required")

        await self.ledger.authorize_attempt(email, access_code)

        sections, source = await self.generator.build_initial_sections(job_description)
        session = await self.store.create(
            CandidateSnapshot(name=name, email=normalize_email(email)),
            job_description,
            sections,
        )
        await self.proctoring.log_event(session.id, SESSION_STARTED, {"email": session.candidate.email})
        session = await self.proctoring.log_event(
            session.id,
            SECTION_GENERATED,
            {"section_id": sections[0].id.value, "source": source, "count": len(sections[0].questions)},
        )
        return session

    async def generate_section(self, session_id: str, section_id: str) -> Section:
        return await self.generator.generate_section(session_id, section_id)

    async def session_status(self, session_id: str) -> AssessmentSession:
        return await self.store.get(session_id)

    async def heartbeat(
        self,
        session_id: str,
        violation: Optional[str] = None,
        snapshot: Optional[str] = None,
    ) -> AssessmentSession:
        """Record a violation if reported; terminate once the threshold is reached."""
        session = await self.store.get(session_id)
        if not violation:
            return session

        session = await self.proctoring.report_violation(session_id, violation, snapshot)
        if (
            session.status == SessionStatus.ACTIVE
            and self.proctoring.violation_count(session) >= self.violation_threshold
        ):
            session = await self.terminate(session_id, TERMINATION_REASON)
        return session

    async def terminate(self, session_id: str, reason: str) -> AssessmentSession:
        session = await self.store.terminate(session_id, reason)
        if session.status == SessionStatus.TERMINATED:
            await self.ledger.lock(session.candidate.email, reason="terminated", session_id=session_id)
            logger.warning("Session %s terminated: %s", session_id, reason)
        return session

    async def submit(self, session_id: str, answers: Dict[str, Any]) -> AssessmentSession:
        """Grade once. Repeat submissions get the stored result back."""
        async with self._submissions.hold(session_id):
            session = await self.store.get(session_id)
            if session.is_finalized:
                logger.info("Session %s already finalized; returning stored result", session_id)
                return session

            # The attempt is consumed even if grading crashes below
            lock = await self.ledger.lock(session.candidate.email, reason="submitted", session_id=session_id)
            if lock.session_id != session_id:
                logger.warning(
                    "Rejected submit for session %s: attempt already consumed by session %s",
                    session_id, lock.session_id,
                )
                raise AuthorizationError("Assessment already completed for this candidate.")
            await self.proctoring.log_event(session_id, SUBMITTED, {"answer_count": len(answers)})
            session = await self.store.record_answer_set(session_id, answers)

            outcome = GradingOutcome()
            try:
                await self.grading.grade(session.sections, session.answers, outcome)
                outcome.feedback = await self.grading.build_feedback(session.job_description, outcome)
            finally:
                if outcome.feedback is None:
                    outcome.feedback = fallback_feedback(outcome.score, outcome.max_score)
                    outcome.feedback_fallback = True
                for failure in outcome.failures:
                    await self.proctoring.log_event(
                        session_id,
                        GRADING_ERROR,
                        {"question_id": failure.question_id, "error": failure.error},
                    )
                if outcome.feedback_fallback:
                    await self.proctoring.log_event(session_id, FEEDBACK_FALLBACK)
                session = await self.store.finalize(
                    session_id,
                    score=outcome.score,
                    max_score=outcome.max_score,
                    section_scores=outcome.section_scores,
                    feedback=outcome.feedback,
                    graded_details=outcome.graded_details,
                )

            logger.info("Session %s completed. Score: %s/%s", session_id, outcome.score, outcome.max_score)
            return session

    def _coding_question(self, session: AssessmentSession, question_id: int) -> Question:
        for section in session.sections:
            for question in section.questions:
                if question.id == question_id and question.type == QuestionType.CODING:
                    return question
        raise ValidationError("Unknown coding question")

    async def run_code(
        self,
        session_id: str,
        question_id: int,
        language: str,
        code: str,
        custom_input: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """LLM dry-run of candidate code; nothing is executed."""
        session = await self.store.get(session_id)
        if session.status != SessionStatus.ACTIVE:
            raise AuthorizationError("Session is no longer active")
        question = self._coding_question(session, question_id)

        prompt = run_code_prompt(language, question.text, code, question.examples or [], custom_input)
        try:
            return True, await self.provider.generate(prompt)
        except ProviderError as e:
            logger.error("Judge call failed for session %s: %s", session_id, e)
            return False, fallback_run_output(language)
