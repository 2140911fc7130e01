"""Wiring of repositories and services, built once at startup."""
from dataclasses import dataclass
from typing import Dict

from portal.repositories.base import CandidateRepository, LockRepository, SessionRepository
from portal.services.access_control import AccessControlLedger
from portal.services.admin_service import AdminService
from portal.services.assessment_service import AssessmentService
from portal.services.grading import GradingEngine
from portal.services.proctoring import ProctoringLog
from portal.services.provider import ContentProvider
from portal.services.section_generator import SectionGenerator
from portal.services.session_store import SessionStore


@dataclass
class PortalServices:
    store: SessionStore
    ledger: AccessControlLedger
    proctoring: ProctoringLog
    generator: SectionGenerator
    grading: GradingEngine
    assessment: AssessmentService
    admin: AdminService
    provider: ContentProvider


def build_services(
    provider: ContentProvider,
    sessions: SessionRepository,
    candidates: CandidateRepository,
    locks: LockRepository,
    admin_directory: Dict[str, str],
    violation_threshold: int = 2,
) -> PortalServices:
    store = SessionStore(sessions)
    ledger = AccessControlLedger(candidates, locks)
    proctoring = ProctoringLog(store)
    generator = SectionGenerator(store, provider, proctoring)
    grading = GradingEngine(provider)
    assessment = AssessmentService(
        store, ledger, generator, grading, proctoring, provider,
        violation_threshold=violation_threshold,
    )
    admin = AdminService(store, ledger, admin_directory)
    return PortalServices(
        store=store,
        ledger=ledger,
        proctoring=proctoring,
        generator=generator,
        grading=grading,
        assessment=assessment,
        admin=admin,
        provider=provider,
    )
