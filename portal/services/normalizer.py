"""Map raw provider output onto the canonical question schema."""
import json
from typing import Any, Dict, List, Optional

from portal.errors import GenerationError
from portal.models.question import CodingExample, Question, QuestionType
from portal.services.parsing import ParsedPayload, PayloadShape

MCQ_QUESTION_COUNT = 30
MIN_FITB_QUESTIONS = 5
MIN_CODING_QUESTIONS = 2
MIN_PROBLEM_TEXT_LENGTH = 20

FITB_ID_OFFSET = 8000
CODING_ID_OFFSET = 9000

DEFAULT_MCQ_MARKS = 1
DEFAULT_FITB_MARKS = 2
DEFAULT_CODING_MARKS = 25


def _resolve(payload: ParsedPayload, allow_single: bool = False) -> List[Dict[str, Any]]:
    """Pick the raw item list in a fixed order: array, wrapped, single object."""
    if payload.shape in (PayloadShape.ARRAY, PayloadShape.WRAPPED):
        items = payload.items
    elif payload.shape == PayloadShape.SINGLE_OBJECT and allow_single:
        items = payload.items
    else:
        raise GenerationError(f"Unusable provider payload: {payload.shape.value}")
    return [item for item in items if isinstance(item, dict)]


def _first(item: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_marks(value: Any, default: int) -> int:
    try:
        marks = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return marks if marks > 0 else default


def _as_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_flag(value: Any) -> bool:
    """Only a real boolean or the string "true" switches a flag on."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def normalize_mcq(payload: ParsedPayload) -> List[Question]:
    """Expand compact MCQ keys (q, o, a, m) and keep the first 30 valid items."""
    questions = []
    for item in _resolve(payload):
        text = _as_text(_first(item, "q", "text", "question"))
        options = _first(item, "o", "options")
        answer = _as_index(_first(item, "a", "correctAnswer", "correct_answer"))
        if not text or not isinstance(options, list) or len(options) < 2:
            continue
        if answer is None or not 0 <= answer < len(options):
            continue
        questions.append(Question(
            id=len(questions) + 1,
            type=QuestionType.MCQ,
            text=text,
            options=[_as_text(option) for option in options],
            correct_answer=answer,
            marks=_as_marks(_first(item, "m", "marks"), DEFAULT_MCQ_MARKS),
        ))
        if len(questions) == MCQ_QUESTION_COUNT:
            return questions
    raise GenerationError(
        f"Expected {MCQ_QUESTION_COUNT} valid MCQs, got {len(questions)}"
    )


def normalize_fitb(payload: ParsedPayload) -> List[Question]:
    """De-duplicate by text (first seen wins) and require at least five items."""
    seen = set()
    unique = []
    for item in _resolve(payload):
        text = _as_text(item.get("text"))
        answer = _as_text(_first(item, "correctAnswer", "correct_answer", "answer"))
        if not text or not answer or text in seen:
            continue
        seen.add(text)
        unique.append((text, answer, item))

    if len(unique) < MIN_FITB_QUESTIONS:
        raise GenerationError(
            f"Insufficient FITB questions: {len(unique)} < {MIN_FITB_QUESTIONS}"
        )

    return [
        Question(
            id=FITB_ID_OFFSET + index,
            type=QuestionType.FITB,
            text=text,
            correct_answer=answer,
            marks=_as_marks(item.get("marks"), DEFAULT_FITB_MARKS),
            case_sensitive=_as_flag(_first(item, "caseSensitive", "case_sensitive")),
        )
        for index, (text, answer, item) in enumerate(unique)
    ]


def _example_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return _as_text(value)


def _normalize_examples(raw: Any) -> List[CodingExample]:
    examples = []
    if isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, dict):
                examples.append(CodingExample(
                    input=_example_value(entry.get("input")),
                    output=_example_value(entry.get("output")),
                ))
    return examples or [CodingExample()]


def render_problem_text(text: str, examples: List[CodingExample]) -> str:
    """Append the sample test cases to a problem statement."""
    blocks = [text, "", "Sample Test Cases:"]
    for index, example in enumerate(examples, start=1):
        blocks.append("")
        blocks.append(f"Example {index}:")
        blocks.append(f"Input: {example.input}")
        blocks.append(f"Output: {example.output}")
    return "\n".join(blocks)


def normalize_coding(payload: ParsedPayload) -> List[Question]:
    items = _resolve(payload, allow_single=True)
    if len(items) < MIN_CODING_QUESTIONS:
        raise GenerationError(
            f"Expected at least {MIN_CODING_QUESTIONS} coding problems, got {len(items)}"
        )

    questions = []
    for index, item in enumerate(items):
        text = _as_text(item.get("text"))
        if len(text) <= MIN_PROBLEM_TEXT_LENGTH:
            raise GenerationError(f"Coding problem {index} has empty or trivial text")
        examples = _normalize_examples(item.get("examples"))
        questions.append(Question(
            id=CODING_ID_OFFSET + index,
            type=QuestionType.CODING,
            text=render_problem_text(text, examples),
            examples=examples,
            marks=_as_marks(item.get("marks"), DEFAULT_CODING_MARKS),
        ))
    return questions
