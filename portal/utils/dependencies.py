"""Request dependencies: services and bearer credentials."""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from portal.services.admin_service import AdminService
from portal.services.assessment_service import AssessmentService
from portal.services.container import PortalServices
from portal.utils.security import ADMIN_ROLE, CANDIDATE_ROLE, decode_token


security = HTTPBearer()


def get_services(request: Request) -> PortalServices:
    return request.app.state.services


def get_assessment_service(services: PortalServices = Depends(get_services)) -> AssessmentService:
    return services.assessment


def get_admin_service(services: PortalServices = Depends(get_services)) -> AdminService:
    return services.admin


def _decode(credentials: HTTPAuthorizationCredentials) -> dict:
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def get_current_session_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Session id carried by a candidate credential."""
    payload = _decode(credentials)
    session_id = payload.get("session_id")
    if payload.get("role") != CANDIDATE_ROLE or not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session_id


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    payload = _decode(credentials)
    if payload.get("role") != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin Only",
        )
    return payload.get("sub")
