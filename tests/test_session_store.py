import pytest

from portal.errors import SessionNotFoundError
from portal.models.question import SectionId
from portal.models.session import CandidateSnapshot, Feedback, SectionScores, SessionStatus
from portal.services.fallback import fallback_questions
from tests.conftest import JOB_DESCRIPTION


@pytest.fixture
def store(services):
    return services.store


async def _create(services):
    sections, _ = await services.generator.build_initial_sections(JOB_DESCRIPTION)
    return await services.store.create(
        CandidateSnapshot(name="Test User", email="test@user.com"), JOB_DESCRIPTION, sections
    )


def _feedback():
    return Feedback(summary="Solid attempt.", strengths=["a"], weaknesses=["b"], roadmap=["c"])


async def test_create_persists_session(services, store):
    created = await _create(services)
    assert len(created.id) == 32
    loaded = await store.get(created.id)
    assert loaded.status == SessionStatus.ACTIVE
    assert loaded.candidate.email == "test@user.com"
    assert [s.id for s in loaded.sections] == list(SectionId)
    assert loaded.section(SectionId.FITB).is_pending


async def test_session_ids_are_unique(services):
    first = await _create(services)
    second = await _create(services)
    assert first.id != second.id


async def test_unknown_session(store):
    with pytest.raises(SessionNotFoundError):
        await store.get("missing")
    with pytest.raises(SessionNotFoundError):
        await store.append_log("missing", "ANY")
    with pytest.raises(SessionNotFoundError):
        await store.terminate("missing", "reason")


async def test_set_section_questions_is_write_once(services, store):
    session = await _create(services)
    questions = fallback_questions(SectionId.FITB)
    section = await store.set_section_questions(session.id, SectionId.FITB, questions)
    assert not section.is_pending
    assert len(section.questions) == 10

    again = await store.set_section_questions(session.id, SectionId.FITB, questions[:5])
    assert [q.id for q in again.questions] == [q.id for q in questions]


async def test_append_log_preserves_order(services, store):
    session = await _create(services)
    for action in ("A", "B", "C"):
        await store.append_log(session.id, action, {"step": action})
    loaded = await store.get(session.id)
    assert [entry.action for entry in loaded.logs] == ["A", "B", "C"]
    assert loaded.logs[1].details == {"step": "B"}


async def test_record_answer_set_stringifies_keys(services, store):
    session = await _create(services)
    updated = await store.record_answer_set(session.id, {1: 2, "8001": "log n"})
    assert updated.answers == {"1": 2, "8001": "log n"}


async def test_finalize_completes_active_session(services, store):
    session = await _create(services)
    final = await store.finalize(
        session.id, score=10, max_score=100,
        section_scores=SectionScores(s1=10), feedback=_feedback(),
        graded_details={"1": 1},
    )
    assert final.status == SessionStatus.COMPLETED
    assert final.final_score == 10
    assert final.end_time is not None
    assert final.is_finalized


async def test_finalize_keeps_terminated_status(services, store):
    session = await _create(services)
    await store.terminate(session.id, "Focus loss")
    final = await store.finalize(
        session.id, score=3, max_score=100,
        section_scores=SectionScores(s1=3), feedback=_feedback(),
    )
    assert final.status == SessionStatus.TERMINATED
    assert final.termination_reason == "Focus loss"
    assert final.final_score == 3


async def test_terminate_only_from_active(services, store):
    session = await _create(services)
    await store.finalize(
        session.id, score=0, max_score=100,
        section_scores=SectionScores(), feedback=_feedback(),
    )
    result = await store.terminate(session.id, "late")
    assert result.status == SessionStatus.COMPLETED
    assert result.termination_reason is None
    assert all(entry.action != "SESSION_TERMINATED" for entry in result.logs)


async def test_stored_snapshots_are_independent(services, store):
    session = await _create(services)
    loaded = await store.get(session.id)
    loaded.logs.clear()
    loaded.status = SessionStatus.TERMINATED
    fresh = await store.get(session.id)
    assert fresh.status == SessionStatus.ACTIVE
