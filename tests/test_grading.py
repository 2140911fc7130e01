import json

import pytest

from portal.errors import ProviderError
from portal.models.question import Question, QuestionType, SectionId
from portal.services.fallback import fallback_questions
from portal.services.grading import (
    GradingEngine,
    GradingOutcome,
    allowed_scores,
    coding_rubric,
    extract_score,
    grade_fitb,
    grade_mcq,
)
from portal.services.section_generator import SectionGenerator
from tests.conftest import FEEDBACK, GRADE, ScriptedProvider

LONG_CODE = "def solve(nums):\n    return sorted(nums)\n"


def _mcq(correct=2, marks=1):
    return Question(id=1, type=QuestionType.MCQ, text="Pick", options=["a", "b", "c", "d"],
                    correct_answer=correct, marks=marks)


def _fitb(answer="log n", case_sensitive=False):
    return Question(id=8001, type=QuestionType.FITB, text="O(___)", correct_answer=answer,
                    marks=2, case_sensitive=case_sensitive)


async def _sections():
    generator = SectionGenerator(store=None, provider=ScriptedProvider(), proctoring=None)
    sections, _ = await generator.build_initial_sections("Backend")
    sections[1].questions = fallback_questions(SectionId.FITB)
    sections[2].questions = fallback_questions(SectionId.CODING)
    return sections


def test_coding_rubric_for_25_marks():
    assert coding_rubric(25) == (5, 8, 12)
    assert sum(coding_rubric(10)) == 10


def test_allowed_scores():
    assert allowed_scores(25) == [0, 5, 8, 12, 13, 17, 20, 25]


@pytest.mark.parametrize("text,expected", [
    ("17", 17),
    ("Score: 13.", 13),
    ("I would award 20 out of 25 marks.", 20),
    ("The answer handles 3 cases, so 12", 12),
    ("Score: 7", None),
    ("12.5", None),
    ("", None),
    (None, None),
])
def test_extract_score(text, expected):
    assert extract_score(text, allowed_scores(25)) == expected


def test_grade_mcq():
    question = _mcq(correct=2)
    assert grade_mcq(question, 2) == 1
    assert grade_mcq(question, "2") == 1
    assert grade_mcq(question, 2.0) == 1
    assert grade_mcq(question, 1) == 0
    assert grade_mcq(question, "c") == 0
    assert grade_mcq(question, None) == 0
    assert grade_mcq(question, True) == 0


def test_grade_fitb():
    question = _fitb()
    assert grade_fitb(question, "  LOG N ") == 2
    assert grade_fitb(question, "log(n)") == 0
    assert grade_fitb(question, None) == 0
    strict = _fitb(answer="TABLE", case_sensitive=True)
    assert grade_fitb(strict, "TABLE") == 2
    assert grade_fitb(strict, "table") == 0


async def test_short_code_is_not_sent_to_provider():
    provider = ScriptedProvider({GRADE: "25"})
    engine = GradingEngine(provider)
    question = fallback_questions(SectionId.CODING)[0]
    assert await engine.grade_coding(question, "return x") == (0, None)
    assert await engine.grade_coding(question, None) == (0, None)
    assert provider.calls == []


async def test_coding_score_from_provider():
    provider = ScriptedProvider({GRADE: "Analysis done. Final score: 17"})
    engine = GradingEngine(provider)
    question = fallback_questions(SectionId.CODING)[0]
    assert await engine.grade_coding(question, LONG_CODE) == (17, None)
    prompt = provider.calls_for(GRADE)[0]
    assert "+5" in prompt and "+8" in prompt and "+12" in prompt


async def test_coding_failure_scores_zero():
    engine = GradingEngine(ScriptedProvider({GRADE: ProviderError("Provider call timed out")}))
    question = fallback_questions(SectionId.CODING)[0]
    awarded, error = await engine.grade_coding(question, LONG_CODE)
    assert awarded == 0
    assert "timed out" in error


async def test_coding_without_valid_score_scores_zero():
    engine = GradingEngine(ScriptedProvider({GRADE: "Looks fine, 9 out of 10"}))
    question = fallback_questions(SectionId.CODING)[0]
    awarded, error = await engine.grade_coding(question, LONG_CODE)
    assert awarded == 0
    assert error


async def test_grade_aggregates_sections():
    sections = await _sections()
    answers = {str(q.id): q.correct_answer for q in sections[0].questions[:10]}
    answers["8001"] = "LOG N"
    answers["8002"] = "wrong"
    answers["9001"] = LONG_CODE
    answers["9002"] = "pass"

    engine = GradingEngine(ScriptedProvider({GRADE: "20"}))
    outcome = await engine.grade(sections, answers, GradingOutcome())

    assert outcome.max_score == 30 + 20 + 50
    assert outcome.section_scores.s1 == 10
    assert outcome.section_scores.s2 == 2
    assert outcome.section_scores.s3 == 20
    assert outcome.score == 32
    assert outcome.score == sum(outcome.graded_details.values())
    assert outcome.graded_details["9002"] == 0
    assert len(outcome.graded_details) == 30 + 10 + 2
    assert outcome.failures == []


async def test_grade_skips_unpopulated_sections():
    sections = await _sections()
    sections[2].questions = []
    outcome = await GradingEngine(ScriptedProvider()).grade(sections, {}, GradingOutcome())
    assert outcome.max_score == 50
    assert outcome.score == 0


async def test_feedback_from_provider_is_trimmed_to_three():
    report = {
        "summary": "Strong fundamentals.",
        "strengths": ["a", "b", "c", "d"],
        "weaknesses": ["e"],
        "roadmap": ["f", "g", "h", "i", "j"],
    }
    engine = GradingEngine(ScriptedProvider({FEEDBACK: "```json\n" + json.dumps(report) + "\n```"}))
    outcome = GradingOutcome(score=40, max_score=100)
    feedback = await engine.build_feedback("Backend", outcome)
    assert feedback.summary == "Strong fundamentals."
    assert feedback.strengths == ["a", "b", "c"]
    assert feedback.weaknesses == ["e"]
    assert feedback.roadmap == ["f", "g", "h"]
    assert not outcome.feedback_fallback


@pytest.mark.parametrize("response", [
    ProviderError("down"),
    "no json here",
    json.dumps({"summary": "   "}),
    json.dumps({"strengths": ["x"]}),
])
async def test_feedback_falls_back(response):
    engine = GradingEngine(ScriptedProvider({FEEDBACK: response}))
    outcome = GradingOutcome(score=12, max_score=100)
    feedback = await engine.build_feedback("Backend", outcome)
    assert "12/100" in feedback.summary
    assert outcome.feedback_fallback
