"""Question and section models."""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union


class QuestionType(str, Enum):
    MCQ = "MCQ"
    FITB = "FITB"
    CODING = "CODING"


class SectionId(str, Enum):
    """The three fixed phases of an assessment, in exam order."""
    MCQ = "s1-mcq"
    FITB = "s2-fitb"
    CODING = "s3-coding"


class CodingExample(BaseModel):
    """Sample test case shown with a coding problem."""
    input: str = "(See Problem Description)"
    output: str = "(See Problem Description)"


class Question(BaseModel):
    """Question as held server-side, including the answer key."""
    id: int
    type: QuestionType
    text: str
    marks: int = Field(1, ge=0)
    correct_answer: Optional[Union[int, str]] = None
    options: Optional[List[str]] = None
    examples: Optional[List[CodingExample]] = None
    case_sensitive: bool = False

    def to_public(self) -> Dict[str, Any]:
        """Client-safe projection; never carries the answer key."""
        return self.model_dump(mode="json", exclude={"correct_answer"}, exclude_none=True)


class Section(BaseModel):
    """One exam phase. Questions stay empty while the section is pending."""
    id: SectionId
    title: str
    duration_minutes: int
    type: QuestionType
    questions: List[Question] = Field(default_factory=list)
    is_pending: bool = False

    @property
    def is_populated(self) -> bool:
        return bool(self.questions)


# id -> (title, duration in minutes, question type)
SECTION_LAYOUT = {
    SectionId.MCQ: ("Section 1: CS Fundamentals & Domain (30 Mins)", 30, QuestionType.MCQ),
    SectionId.FITB: ("Section 2: Technical Core (5 Mins)", 5, QuestionType.FITB),
    SectionId.CODING: ("Section 3: Advanced Coding (40 Mins)", 40, QuestionType.CODING),
}

# Section id -> key in the per-section score breakdown
SECTION_SCORE_KEYS = {
    SectionId.MCQ: "s1",
    SectionId.FITB: "s2",
    SectionId.CODING: "s3",
}


def empty_section(section_id: SectionId) -> Section:
    """Pending section with no questions yet."""
    title, duration, question_type = SECTION_LAYOUT[section_id]
    return Section(
        id=section_id,
        title=title,
        duration_minutes=duration,
        type=question_type,
        questions=[],
        is_pending=True,
    )
