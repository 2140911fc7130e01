"""Candidate directory and access lock models."""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from portal.models.session import utcnow


class CandidateIdentity(BaseModel):
    """Directory entry allowing one email to sit the assessment."""
    email: str
    access_code: str
    created_at: datetime = Field(default_factory=utcnow)


class AccessLock(BaseModel):
    """Present once the candidate has consumed their single attempt."""
    email: str
    reason: str = "submitted"
    session_id: Optional[str] = None
    locked_at: datetime = Field(default_factory=utcnow)
