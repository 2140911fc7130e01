import pytest

from portal.errors import AuthorizationError, ValidationError
from tests.conftest import CANDIDATE_CODE, CANDIDATE_EMAIL


async def test_is_authorized(seeded):
    ledger = seeded.ledger
    assert await ledger.is_authorized(CANDIDATE_EMAIL, CANDIDATE_CODE)
    assert await ledger.is_authorized("  Test@User.com ", CANDIDATE_CODE)
    assert not await ledger.is_authorized(CANDIDATE_EMAIL, "WRONG")
    assert not await ledger.is_authorized("nobody@company.io", CANDIDATE_CODE)


async def test_authorize_attempt_messages(seeded):
    ledger = seeded.ledger
    with pytest.raises(AuthorizationError, match="Email not authorized"):
        await ledger.authorize_attempt("nobody@company.io", CANDIDATE_CODE)
    with pytest.raises(AuthorizationError, match="Invalid Access Code"):
        await ledger.authorize_attempt(CANDIDATE_EMAIL, "test1234")

    await ledger.lock(CANDIDATE_EMAIL)
    with pytest.raises(AuthorizationError, match="already completed"):
        await ledger.authorize_attempt(CANDIDATE_EMAIL, CANDIDATE_CODE)


async def test_lock_is_idempotent(seeded):
    ledger = seeded.ledger
    first = await ledger.lock(CANDIDATE_EMAIL, reason="terminated", session_id="abc")
    second = await ledger.lock(CANDIDATE_EMAIL.upper(), reason="submitted", session_id="def")
    assert second.reason == "terminated"
    assert second.session_id == "abc"
    assert second.locked_at == first.locked_at
    assert len(await ledger.locks.list_all()) == 1


async def test_unlock_restores_access(seeded):
    ledger = seeded.ledger
    await ledger.lock(CANDIDATE_EMAIL)
    assert await ledger.unlock(CANDIDATE_EMAIL) is True
    assert await ledger.unlock(CANDIDATE_EMAIL) is False
    assert not await ledger.is_locked(CANDIDATE_EMAIL)
    await ledger.authorize_attempt(CANDIDATE_EMAIL, CANDIDATE_CODE)


async def test_register_candidate_replaces_code(seeded):
    ledger = seeded.ledger
    original = await ledger.candidates.get(CANDIDATE_EMAIL)
    updated = await ledger.register_candidate(CANDIDATE_EMAIL, "NEWCODE")
    assert updated.created_at == original.created_at
    assert await ledger.is_authorized(CANDIDATE_EMAIL, "NEWCODE")
    assert not await ledger.is_authorized(CANDIDATE_EMAIL, CANDIDATE_CODE)


async def test_register_candidate_rejects_blank_fields(services):
    with pytest.raises(ValidationError):
        await services.ledger.register_candidate("", "CODE")
    with pytest.raises(ValidationError):
        await services.ledger.register_candidate("someone@company.io", "   ")


async def test_seed_directory_keeps_existing_codes(seeded):
    added = await seeded.ledger.seed_directory({
        CANDIDATE_EMAIL: "OVERRIDE",
        "candidate@company.io": "EVAL2025",
    })
    assert added == 1
    assert await seeded.ledger.is_authorized(CANDIDATE_EMAIL, CANDIDATE_CODE)
    assert await seeded.ledger.is_authorized("candidate@company.io", "EVAL2025")


async def test_list_candidates_reports_locks(seeded):
    await seeded.ledger.register_candidate("alice@company.io", "A1")
    await seeded.ledger.lock("alice@company.io")
    entries = await seeded.ledger.list_candidates()
    assert [(identity.email, locked) for identity, locked in entries] == [
        ("alice@company.io", True),
        (CANDIDATE_EMAIL, False),
    ]
