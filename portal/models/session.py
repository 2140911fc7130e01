"""Assessment session models."""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from portal.models.question import Section, SectionId


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    TERMINATED = "TERMINATED"


class CandidateSnapshot(BaseModel):
    """Candidate details copied at session creation."""
    name: str
    email: str


class EvidenceItem(BaseModel):
    """Webcam capture attached to a proctoring violation."""
    type: str
    time: datetime = Field(default_factory=utcnow)
    image: str


class LogEntry(BaseModel):
    """Lifecycle or audit event."""
    timestamp: datetime = Field(default_factory=utcnow)
    action: str
    details: Dict[str, Any] = Field(default_factory=dict)


class SectionScores(BaseModel):
    s1: int = 0
    s2: int = 0
    s3: int = 0


class Feedback(BaseModel):
    """Narrative report produced after grading."""
    summary: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    roadmap: List[str] = Field(default_factory=list)


class AssessmentSession(BaseModel):
    """One candidate attempt, from creation to final score."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    id: str = Field(..., alias="_id")
    candidate: CandidateSnapshot
    job_description: str
    sections: List[Section]
    status: SessionStatus = SessionStatus.ACTIVE
    
    answers: Dict[str, Any] = Field(default_factory=dict)
    evidence: List[EvidenceItem] = Field(default_factory=list)
    logs: List[LogEntry] = Field(default_factory=list)
    
    # Populated once, at submission
    final_score: Optional[int] = None
    max_score: Optional[int] = None
    section_scores: Optional[SectionScores] = None
    feedback: Optional[Feedback] = None
    graded_details: Dict[str, int] = Field(default_factory=dict)
    
    termination_reason: Optional[str] = None
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_finalized(self) -> bool:
        return self.final_score is not None

    def section(self, section_id: SectionId) -> Section:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise KeyError(section_id)
