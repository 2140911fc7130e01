"""Assessment router (candidate side)."""
from fastapi import APIRouter, Depends

from portal.schemas.assessment import (
    GenerateSectionRequest,
    HeartbeatRequest,
    PublicQuestion,
    PublicSection,
    RunCodeRequest,
    RunCodeResponse,
    SectionQuestionsResponse,
    SessionStatusResponse,
    StartAssessmentRequest,
    StartAssessmentResponse,
    SubmissionResult,
    SubmitRequest,
)
from portal.services.assessment_service import AssessmentService
from portal.utils.dependencies import get_assessment_service, get_current_session_id
from portal.utils.security import create_session_token

router = APIRouter(prefix="/api/v1/assessment", tags=["Assessment"])


@router.post("/start", response_model=StartAssessmentResponse)
async def start_assessment(
    request: StartAssessmentRequest,
    service: AssessmentService = Depends(get_assessment_service)
):
    """Authenticate the candidate and open a session."""
    session = await service.start_assessment(
        name=request.name,
        email=request.email,
        access_code=request.access_code,
        job_description=request.job_description
    )
    return StartAssessmentResponse(
        token=create_session_token(session.id),
        session_id=session.id,
        sections=[PublicSection.from_section(s) for s in session.sections]
    )


@router.post("/sections/generate", response_model=SectionQuestionsResponse)
async def generate_section(
    request: GenerateSectionRequest,
    session_id: str = Depends(get_current_session_id),
    service: AssessmentService = Depends(get_assessment_service)
):
    """Populate a pending section, or return it if already generated."""
    section = await service.generate_section(session_id, request.section_id)
    return SectionQuestionsResponse(
        section_id=section.id.value,
        questions=[PublicQuestion.from_question(q) for q in section.questions]
    )


@router.post("/heartbeat", response_model=SessionStatusResponse)
async def heartbeat(
    request: HeartbeatRequest,
    session_id: str = Depends(get_current_session_id),
    service: AssessmentService = Depends(get_assessment_service)
):
    """Keep-alive carrying optional proctoring violations."""
    session = await service.heartbeat(session_id, request.violation, request.snapshot)
    return SessionStatusResponse(status=session.status.value, reason=session.termination_reason)


@router.get("/status", response_model=SessionStatusResponse)
async def session_status(
    session_id: str = Depends(get_current_session_id),
    service: AssessmentService = Depends(get_assessment_service)
):
    session = await service.session_status(session_id)
    return SessionStatusResponse(status=session.status.value, reason=session.termination_reason)


@router.post("/submit", response_model=SubmissionResult)
async def submit(
    request: SubmitRequest,
    session_id: str = Depends(get_current_session_id),
    service: AssessmentService = Depends(get_assessment_service)
):
    """Grade the attempt and lock the candidate."""
    session = await service.submit(session_id, request.answers)
    return SubmissionResult.from_session(session)


@router.post("/run-code", response_model=RunCodeResponse)
async def run_code(
    request: RunCodeRequest,
    session_id: str = Depends(get_current_session_id),
    service: AssessmentService = Depends(get_assessment_service)
):
    """Judge a coding answer without executing it."""
    success, output = await service.run_code(
        session_id,
        request.question_id,
        request.language,
        request.code,
        request.custom_input
    )
    return RunCodeResponse(success=success, output=output)
