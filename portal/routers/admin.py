"""Admin console router."""
from fastapi import APIRouter, Depends, HTTPException, status

from portal.models.session import AssessmentSession
from portal.schemas.admin import (
    AdminLoginRequest,
    AdminTokenResponse,
    CandidateListResponse,
    CandidateResponse,
    CreateCandidateRequest,
    EvidenceResponse,
    ReactivateRequest,
    ReactivateResponse,
    SessionListResponse,
    SessionSummary,
)
from portal.services.admin_service import AdminService
from portal.services.proctoring import ProctoringLog
from portal.utils.dependencies import get_admin_service, get_current_admin
from portal.utils.security import create_admin_token

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


def _summary(session: AssessmentSession) -> SessionSummary:
    return SessionSummary(
        session_id=session.id,
        candidate_name=session.candidate.name,
        email=session.candidate.email,
        score=session.final_score or 0,
        max_score=session.max_score or 0,
        status=session.status.value,
        section_scores=session.section_scores,
        evidence_count=len(session.evidence),
        violation_count=ProctoringLog.violation_count(session),
        started_at=session.start_time,
        ended_at=session.end_time,
        feedback=session.feedback
    )


@router.post("/login", response_model=AdminTokenResponse)
async def login(
    request: AdminLoginRequest,
    service: AdminService = Depends(get_admin_service)
):
    """Login against the static admin directory."""
    if not service.authenticate(request.username, request.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password"
        )
    return AdminTokenResponse(token=create_admin_token(request.username))


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    admin: str = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service)
):
    """All sessions, newest first."""
    sessions = await service.list_sessions()
    return SessionListResponse(sessions=[_summary(s) for s in sessions])


@router.get("/sessions/{session_id}/evidence", response_model=EvidenceResponse)
async def session_evidence(
    session_id: str,
    admin: str = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Proctoring evidence and event log for one session."""
    session = await service.session_evidence(session_id)
    return EvidenceResponse(
        session_id=session.id,
        candidate_name=session.candidate.name,
        status=session.status.value,
        evidence=session.evidence,
        logs=session.logs
    )


@router.get("/candidates", response_model=CandidateListResponse)
async def list_candidates(
    admin: str = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service)
):
    entries = await service.list_candidates()
    return CandidateListResponse(candidates=[
        CandidateResponse(
            email=identity.email,
            access_code=identity.access_code,
            is_locked=locked,
            created_at=identity.created_at
        )
        for identity, locked in entries
    ])


@router.post("/candidates", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    request: CreateCandidateRequest,
    admin: str = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Add a candidate or replace their access code."""
    identity, locked = await service.create_candidate(request.email, request.access_code)
    return CandidateResponse(
        email=identity.email,
        access_code=identity.access_code,
        is_locked=locked,
        created_at=identity.created_at
    )


@router.post("/candidates/reactivate", response_model=ReactivateResponse)
async def reactivate_candidate(
    request: ReactivateRequest,
    admin: str = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Remove the access lock so the candidate can sit the assessment again."""
    result = await service.reactivate(request.email)
    return ReactivateResponse(email=request.email, status=result)
