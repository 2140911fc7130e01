"""Admin console schemas."""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from portal.models.session import EvidenceItem, Feedback, LogEntry, SectionScores


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class AdminTokenResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"


class SessionSummary(BaseModel):
    session_id: str
    candidate_name: str
    email: str
    score: int
    max_score: int
    status: str
    section_scores: Optional[SectionScores] = None
    evidence_count: int
    violation_count: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    feedback: Optional[Feedback] = None


class SessionListResponse(BaseModel):
    sessions: List[SessionSummary]


class EvidenceResponse(BaseModel):
    session_id: str
    candidate_name: str
    status: str
    evidence: List[EvidenceItem]
    logs: List[LogEntry]


class CreateCandidateRequest(BaseModel):
    """Fields are validated by the ledger so blank values get a 400."""
    email: str = ""
    access_code: str = ""


class CandidateResponse(BaseModel):
    email: str
    access_code: str
    is_locked: bool
    created_at: datetime


class CandidateListResponse(BaseModel):
    candidates: List[CandidateResponse]


class ReactivateRequest(BaseModel):
    email: str


class ReactivateResponse(BaseModel):
    email: str
    status: str  # "reactivated" or "not_locked"
