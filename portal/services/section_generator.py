"""Exactly-once generation of assessment sections."""
import logging
from typing import List, Tuple

from portal.errors import AuthorizationError, GenerationError, ProviderError, ValidationError
from portal.models.question import Question, Section, SectionId, SECTION_LAYOUT, empty_section
from portal.models.session import SessionStatus
from portal.services.fallback import fallback_questions
from portal.services.normalizer import normalize_coding, normalize_fitb, normalize_mcq
from portal.services.parsing import parse_payload
from portal.services.proctoring import SECTION_GENERATED, ProctoringLog
from portal.services.prompts import SECTION_PROMPTS
from portal.services.provider import ContentProvider
from portal.services.session_store import SessionStore
from portal.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)

NORMALIZERS = {
    SectionId.MCQ: normalize_mcq,
    SectionId.FITB: normalize_fitb,
    SectionId.CODING: normalize_coding,
}

SOURCE_PROVIDER = "provider"
SOURCE_FALLBACK = "fallback"


def parse_section_id(raw: str) -> SectionId:
    try:
        return SectionId(raw)
    except ValueError:
        raise ValidationError("Invalid Section")


class SectionGenerator:
    """Drives each (session, section) through PENDING -> GENERATING -> POPULATED.

    The per-pair lock is held across the provider call and the store write, so
    a duplicate request waits and then reads the first result.
    """

    def __init__(self, store: SessionStore, provider: ContentProvider, proctoring: ProctoringLog):
        self.store = store
        self.provider = provider
        self.proctoring = proctoring
        self._locks = KeyedLocks()

    async def produce(self, section_id: SectionId, job_description: str) -> Tuple[List[Question], str]:
        """Provider content when it validates, fallback content otherwise."""
        try:
            raw = await self.provider.generate(SECTION_PROMPTS[section_id](job_description), expect_json=True)
            return self._normalize(section_id, raw), SOURCE_PROVIDER
        except (ProviderError, GenerationError) as e:
            logger.warning("Generation for %s failed, using fallback: %s", section_id.value, e)
            return fallback_questions(section_id), SOURCE_FALLBACK

    @staticmethod
    def _normalize(section_id: SectionId, raw: str) -> List[Question]:
        try:
            return NORMALIZERS[section_id](parse_payload(raw))
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Malformed {section_id.value} payload: {e!r}") from e

    async def build_initial_sections(self, job_description: str) -> Tuple[List[Section], str]:
        """Section 1 generated now; sections 2 and 3 left pending."""
        questions, source = await self.produce(SectionId.MCQ, job_description)
        title, duration, question_type = SECTION_LAYOUT[SectionId.MCQ]
        first = Section(
            id=SectionId.MCQ,
            title=title,
            duration_minutes=duration,
            type=question_type,
            questions=questions,
            is_pending=False,
        )
        return [first, empty_section(SectionId.FITB), empty_section(SectionId.CODING)], source

    async def generate_section(self, session_id: str, section_id: str) -> Section:
        section_id = parse_section_id(section_id)

        session = await self.store.get(session_id)
        if session.section(section_id).is_populated:
            return session.section(section_id)

        async with self._locks.hold((session_id, section_id)):
            session = await self.store.get(session_id)
            section = session.section(section_id)
            if section.is_populated:
                return section
            if session.status != SessionStatus.ACTIVE:
                raise AuthorizationError("Session is no longer active")

            logger.info("Generating %s for session %s", section_id.value, session_id)
            questions, source = await self.produce(section_id, session.job_description)
            section = await self.store.set_section_questions(session_id, section_id, questions)
            await self.proctoring.log_event(
                session_id,
                SECTION_GENERATED,
                {"section_id": section_id.value, "source": source, "count": len(section.questions)},
            )
            return section
