"""Candidate-facing request/response schemas."""
from pydantic import BaseModel, EmailStr, Field
from typing import Any, Dict, List, Optional

from portal.models.question import CodingExample, Question, QuestionType, Section
from portal.models.session import AssessmentSession, Feedback, SectionScores


class PublicQuestion(BaseModel):
    """Question as shown to a candidate; has no answer key field at all."""
    id: int
    type: QuestionType
    text: str
    marks: int
    options: Optional[List[str]] = None
    examples: Optional[List[CodingExample]] = None
    case_sensitive: bool = False

    @classmethod
    def from_question(cls, question: Question) -> "PublicQuestion":
        return cls(**question.to_public())


class PublicSection(BaseModel):
    id: str
    title: str
    duration_minutes: int
    type: QuestionType
    questions: List[PublicQuestion]
    is_pending: bool

    @classmethod
    def from_section(cls, section: Section) -> "PublicSection":
        return cls(
            id=section.id.value,
            title=section.title,
            duration_minutes=section.duration_minutes,
            type=section.type,
            questions=[PublicQuestion.from_question(q) for q in section.questions],
            is_pending=section.is_pending,
        )


class StartAssessmentRequest(BaseModel):
    """Candidate login plus the role the assessment is generated for."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    access_code: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)


class StartAssessmentResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    session_id: str
    sections: List[PublicSection]


class GenerateSectionRequest(BaseModel):
    section_id: str


class SectionQuestionsResponse(BaseModel):
    section_id: str
    questions: List[PublicQuestion]


class HeartbeatRequest(BaseModel):
    violation: Optional[str] = None
    snapshot: Optional[str] = None  # base64 image


class SessionStatusResponse(BaseModel):
    status: str
    reason: Optional[str] = None


class SubmitRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


class SubmissionResult(BaseModel):
    success: bool = True
    score: int
    max_score: int
    section_scores: SectionScores
    feedback: Feedback

    @classmethod
    def from_session(cls, session: AssessmentSession) -> "SubmissionResult":
        return cls(
            score=session.final_score or 0,
            max_score=session.max_score or 0,
            section_scores=session.section_scores or SectionScores(),
            feedback=session.feedback,
        )


class RunCodeRequest(BaseModel):
    question_id: int
    language: str = Field(..., min_length=1)
    code: str
    custom_input: Optional[str] = None


class RunCodeResponse(BaseModel):
    success: bool
    output: str
