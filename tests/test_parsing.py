from portal.services.parsing import (
    PayloadShape,
    extract_json_span,
    parse_object,
    parse_payload,
)


def test_extract_strips_code_fences():
    text = "```json\n[{\"q\": \"x\"}]\n```"
    assert extract_json_span(text) == '[{"q": "x"}]'


def test_extract_ignores_brackets_inside_strings():
    text = 'Sure, here it is: {"text": "use } and ] freely", "n": [1, 2]} Hope that helps!'
    assert extract_json_span(text) == '{"text": "use } and ] freely", "n": [1, 2]}'


def test_extract_handles_escaped_quotes():
    text = '{"text": "say \\"hi\\" }"} trailing'
    assert extract_json_span(text) == '{"text": "say \\"hi\\" }"}'


def test_extract_returns_none_without_balanced_span():
    assert extract_json_span(None) is None
    assert extract_json_span("") is None
    assert extract_json_span("no json here") is None
    assert extract_json_span('{"a": [1, 2}') is None
    assert extract_json_span('[{"a": 1}') is None


def test_parse_payload_array():
    parsed = parse_payload('Here you go: [{"a": 1}, {"a": 2}]')
    assert parsed.shape == PayloadShape.ARRAY
    assert parsed.items == [{"a": 1}, {"a": 2}]


def test_parse_payload_wrapped_in_questions():
    parsed = parse_payload('{"questions": [{"a": 1}]}')
    assert parsed.shape == PayloadShape.WRAPPED
    assert parsed.items == [{"a": 1}]


def test_parse_payload_single_object():
    parsed = parse_payload('{"text": "only one"}')
    assert parsed.shape == PayloadShape.SINGLE_OBJECT
    assert parsed.items == [{"text": "only one"}]


def test_parse_payload_questions_field_not_a_list_is_single_object():
    parsed = parse_payload('{"questions": "none"}')
    assert parsed.shape == PayloadShape.SINGLE_OBJECT


def test_parse_payload_unparseable():
    assert parse_payload("I cannot help with that").shape == PayloadShape.UNPARSEABLE
    assert parse_payload("{'single': 'quotes'}").shape == PayloadShape.UNPARSEABLE
    assert parse_payload(None).shape == PayloadShape.UNPARSEABLE


def test_parse_object():
    assert parse_object('Report: {"summary": "ok"}') == {"summary": "ok"}
    assert parse_object("[1, 2]") is None
    assert parse_object("nothing") is None
