"""Scoring of submitted answers."""
import asyncio
import logging
import re
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from portal.errors import GradingError
from portal.models.question import Question, QuestionType, Section, SECTION_SCORE_KEYS
from portal.models.session import Feedback, SectionScores
from portal.services.fallback import fallback_feedback
from portal.services.parsing import parse_object
from portal.services.prompts import feedback_prompt, grading_prompt
from portal.services.provider import ContentProvider

logger = logging.getLogger(__name__)

MIN_CODE_LENGTH = 20
FEEDBACK_LIST_LENGTH = 3

# Share of a coding question's marks for the base, general and edge cases
RUBRIC_WEIGHTS = (0.2, 0.32, 0.48)

_INTEGER_RE = re.compile(r"(?<![\d.])\d+(?!\.?\d)")


class GradingFailure(BaseModel):
    question_id: int
    error: str


class GradingOutcome(BaseModel):
    """Accumulates results in place so partial credit survives a later failure."""
    score: int = 0
    max_score: int = 0
    section_scores: SectionScores = Field(default_factory=SectionScores)
    graded_details: Dict[str, int] = Field(default_factory=dict)
    failures: List[GradingFailure] = Field(default_factory=list)
    feedback: Optional[Feedback] = None
    feedback_fallback: bool = False


def coding_rubric(marks: int) -> Tuple[int, int, int]:
    base = round(marks * RUBRIC_WEIGHTS[0])
    general = round(marks * RUBRIC_WEIGHTS[1])
    return base, general, marks - base - general


def allowed_scores(marks: int) -> List[int]:
    """Every sum of a subset of the rubric parts: 0, 5, 8, 12, 13, 17, 20, 25 for 25 marks."""
    parts = coding_rubric(marks)
    sums = {0}
    for size in range(1, len(parts) + 1):
        for combo in combinations(parts, size):
            sums.add(sum(combo))
    return sorted(sums)


def extract_score(text: Optional[str], allowed: Sequence[int]) -> Optional[int]:
    """First integer token in ``text`` that is one of the allowed scores."""
    if not text:
        return None
    for token in _INTEGER_RE.findall(text):
        value = int(token)
        if value in allowed:
            return value
    return None


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def grade_mcq(question: Question, answer: Any) -> int:
    given = _as_number(answer)
    expected = _as_number(question.correct_answer)
    if given is None or expected is None:
        return 0
    return question.marks if given == expected else 0


def grade_fitb(question: Question, answer: Any) -> int:
    if question.correct_answer is None or answer is None:
        return 0
    given = str(answer).strip()
    expected = str(question.correct_answer).strip()
    if not question.case_sensitive:
        given, expected = given.lower(), expected.lower()
    return question.marks if given == expected else 0


class GradingEngine:
    def __init__(self, provider: ContentProvider):
        self.provider = provider

    async def grade_coding(self, question: Question, answer: Any) -> Tuple[int, Optional[str]]:
        """Returns (awarded, error). Never raises."""
        if not isinstance(answer, str) or len(answer.strip()) < MIN_CODE_LENGTH:
            return 0, None

        allowed = allowed_scores(question.marks)
        prompt = grading_prompt(
            question.text,
            answer,
            question.examples or [],
            coding_rubric(question.marks),
            allowed,
        )
        try:
            raw = await self.provider.generate(prompt)
        except Exception as e:
            logger.error("Grading call failed for question %s: %s", question.id, e)
            return 0, str(e)

        score = extract_score(raw, allowed)
        if score is None:
            logger.error("No valid score for question %s in: %r", question.id, (raw or "")[:200])
            return 0, "No valid score in grader response"
        return min(score, question.marks), None

    async def grade(self, sections: List[Section], answers: Dict[str, Any], outcome: GradingOutcome) -> GradingOutcome:
        for section in sections:
            for question in section.questions:
                outcome.max_score += question.marks

        coding = []
        for section in sections:
            for question in section.questions:
                answer = answers.get(str(question.id))
                if question.type == QuestionType.MCQ:
                    self._award(outcome, section, question, grade_mcq(question, answer))
                elif question.type == QuestionType.FITB:
                    self._award(outcome, section, question, grade_fitb(question, answer))
                else:
                    coding.append((section, question, answer))

        results = await asyncio.gather(
            *(self.grade_coding(question, answer) for _, question, answer in coding)
        )
        for (section, question, _), (awarded, error) in zip(coding, results):
            self._award(outcome, section, question, awarded)
            if error:
                outcome.failures.append(GradingFailure(question_id=question.id, error=error))
        return outcome

    @staticmethod
    def _award(outcome: GradingOutcome, section: Section, question: Question, awarded: int) -> None:
        key = SECTION_SCORE_KEYS[section.id]
        outcome.score += awarded
        setattr(outcome.section_scores, key, getattr(outcome.section_scores, key) + awarded)
        outcome.graded_details[str(question.id)] = awarded

    async def build_feedback(self, job_description: str, outcome: GradingOutcome) -> Feedback:
        """Narrative report; falls back to a deterministic one on any failure."""
        prompt = feedback_prompt(
            job_description,
            outcome.score,
            outcome.max_score,
            outcome.section_scores.model_dump(),
        )
        try:
            raw = await self.provider.generate(prompt, expect_json=True)
            data = parse_object(raw)
            if data is None:
                raise GradingError("Feedback response is not a JSON object")
            feedback = Feedback.model_validate(data)
            if not feedback.summary.strip():
                raise GradingError("Feedback summary is empty")
        except Exception as e:
            logger.warning("Feedback generation failed, using fallback: %s", e)
            outcome.feedback_fallback = True
            return fallback_feedback(outcome.score, outcome.max_score)

        return Feedback(
            summary=feedback.summary.strip(),
            strengths=feedback.strengths[:FEEDBACK_LIST_LENGTH],
            weaknesses=feedback.weaknesses[:FEEDBACK_LIST_LENGTH],
            roadmap=feedback.roadmap[:FEEDBACK_LIST_LENGTH],
        )
