"""Prompt templates sent to the content provider."""
import json
from typing import List, Optional

from portal.models.question import CodingExample, SectionId

JD_EXCERPT_LENGTH = 300


def _excerpt(job_description: str) -> str:
    return job_description[:JD_EXCERPT_LENGTH]


def mcq_prompt(job_description: str) -> str:
    return f"""
Generate exactly 30 hard multiple choice questions for a technical assessment.
DISTRIBUTION:
- 10 questions on core CS fundamentals: DSA, SQL, DBMS, operating systems, networks, software engineering.
- 20 questions on this job description: "{_excerpt(job_description)}".

Rules: plain text only, no markdown or asterisks.

Return a JSON object {{"questions": [...]}} where each item uses compact keys:
"q": question text, "o": array of 4 options, "a": correct option index (0-3), "m": marks (1).
"""


def fitb_prompt(job_description: str) -> str:
    return f"""
Generate 10 distinct technical fill-in-the-blank questions.
DISTRIBUTION:
- 5 questions on core CS fundamentals (DSA, DBMS, OS, networks).
- 5 questions on: "{_excerpt(job_description)}".

Rules: every question unique, plain text only, use '___' for the blank.

Return a JSON object {{"questions": [...]}} where each item has keys:
"text", "correctAnswer", "marks" (2), "caseSensitive" (false).
"""


def coding_prompt(job_description: str) -> str:
    return f"""
Generate exactly 2 distinct medium/hard coding problems.
- Problem 1: pure data structures and algorithms (graph, tree, DP, trie).
- Problem 2: a scenario specific to: "{_excerpt(job_description)}".

Rules: split each statement into 2-3 paragraphs, plain text only, and if the
problem needs SQL include the table schema in the text.

Return a JSON object {{"questions": [...]}} where each item has keys:
"text" (full problem statement), "examples" (array of 2 objects with "input" and "output"), "marks" (25).
"""


SECTION_PROMPTS = {
    SectionId.MCQ: mcq_prompt,
    SectionId.FITB: fitb_prompt,
    SectionId.CODING: coding_prompt,
}


def grading_prompt(problem: str, code: str, examples: List[CodingExample], rubric, allowed_scores) -> str:
    base, general, edge = rubric
    total = base + general + edge
    examples_json = json.dumps([example.model_dump() for example in examples])
    allowed = ", ".join(str(score) for score in allowed_scores)
    return f"""
Act as a strict code grader.
Problem: "{problem}"
Sample test cases: {examples_json}
Student code:
{code}

Marking scheme (max {total}):
- Base case correct: +{base}
- General case correct: +{general}
- Edge cases correct (empty, null, large inputs): +{edge}

Analyze the logic against each case. Return ONLY the integer score, one of: {allowed}.
"""


def feedback_prompt(job_description: str, score: int, max_score: int, section_scores: dict) -> str:
    return f"""
Generate a technical feedback report for a candidate applying for: "{_excerpt(job_description)}".
Score achieved: {score} / {max_score}.
Section scores: MCQ {section_scores.get("s1", 0)}, fill-in-the-blank {section_scores.get("s2", 0)}, coding {section_scores.get("s3", 0)}.

Write a 3-4 line professional summary, 3 strengths, 3 weaknesses and a 3-step roadmap.
Return a JSON object:
{{"summary": "...", "strengths": ["...", "...", "..."], "weaknesses": ["...", "...", "..."], "roadmap": ["...", "...", "..."]}}
"""


def run_code_prompt(
    language: str,
    problem: str,
    code: str,
    examples: List[CodingExample],
    custom_input: Optional[str] = None,
) -> str:
    custom = f'\nCustom input supplied by the candidate: "{custom_input}"\n' if custom_input else ""
    examples_json = json.dumps([example.model_dump() for example in examples])
    return f"""
Act as a strict compiler and judge. Do not execute anything; reason about the code.
Language: {language}
Problem: "{problem}"
Sample test cases: {examples_json}
Student code:
{code}
{custom}
Output a terminal-style log: a syntax check line, one line per test case
(base, general, edge) ending in PASS or FAIL, then a final verdict.
If there is a syntax error output only the error and line number.
Never print a corrected solution.
"""
