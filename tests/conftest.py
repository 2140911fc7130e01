import asyncio
import json
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio

from portal.errors import ProviderError
from portal.repositories import (
    InMemoryCandidateRepository,
    InMemoryLockRepository,
    InMemorySessionRepository,
)
from portal.services.container import build_services
from portal.services.provider import ContentProvider

CANDIDATE_EMAIL = "test@user.com"
CANDIDATE_CODE = "TEST1234"
JOB_DESCRIPTION = "Backend engineer working on Python services, PostgreSQL and Kubernetes."

# Substrings identifying each prompt template
MCQ = "multiple choice questions"
FITB = "fill-in-the-blank questions"
CODING = "coding problems"
GRADE = "strict code grader"
FEEDBACK = "feedback report"
JUDGE = "compiler and judge"
_ROUTE_ORDER = [GRADE, FEEDBACK, JUDGE, CODING, FITB, MCQ]


class ScriptedProvider(ContentProvider):
    """Answers prompts by template; anything unscripted fails like an outage."""

    def __init__(self, routes=None, delay=0.0):
        self.routes = dict(routes or {})
        self.delay = delay
        self.calls = []

    def calls_for(self, route):
        return [prompt for prompt in self.calls if route in prompt]

    async def generate(self, prompt, expect_json=False):
        self.calls.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        for route in _ROUTE_ORDER:
            if route in prompt:
                response = self.routes.get(route)
                break
        else:
            response = None
        if response is None:
            raise ProviderError("provider unreachable")
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response


def mcq_payload(count=30):
    return json.dumps([
        {"q": f"Question {i}?", "o": ["A", "B", "C", "D"], "a": i % 4, "m": 1}
        for i in range(count)
    ])


def fitb_payload(texts=None):
    texts = texts or [f"Blank number {i} is ___." for i in range(10)]
    return json.dumps({"questions": [
        {"text": text, "correctAnswer": f"answer{i}", "marks": 2}
        for i, text in enumerate(texts)
    ]})


def coding_payload():
    return json.dumps([
        {
            "type": "CODING",
            "text": "Given a weighted graph, compute the shortest path between two nodes.",
            "examples": [{"input": "n=3, edges=[[0,1,4],[1,2,1]], src=0, dst=2", "output": "5"}],
            "marks": 25,
        },
        {
            "type": "CODING",
            "text": "Design a rate limiter for an HTTP API that allows N requests per minute.",
            "marks": 25,
        },
    ])


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def services(provider):
    return build_services(
        provider=provider,
        sessions=InMemorySessionRepository(),
        candidates=InMemoryCandidateRepository(),
        locks=InMemoryLockRepository(),
        admin_directory={"admin": "admin"},
        violation_threshold=2,
    )


@pytest_asyncio.fixture
async def seeded(services):
    await services.ledger.register_candidate(CANDIDATE_EMAIL, CANDIDATE_CODE)
    return services


@pytest_asyncio.fixture
async def session(seeded):
    return await seeded.assessment.start_assessment(
        "Test User", CANDIDATE_EMAIL, CANDIDATE_CODE, JOB_DESCRIPTION
    )
