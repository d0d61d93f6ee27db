import json

from trip_concierge.utils.json_extraction import extract_first_json, safe_json_parse

PLAN = {"title": "Plan", "days": [{"dayNumber": 1, "items": []}], "alternatives": []}
PLAN_TEXT = json.dumps(PLAN)


def test_empty_text_is_not_found():
    assert extract_first_json("") is None
    assert extract_first_json("   \n\t") is None
    assert extract_first_json(None) is None


def test_plain_json_returned_trimmed():
    assert extract_first_json(f"  {PLAN_TEXT}\n") == PLAN_TEXT
    assert extract_first_json("[1, 2]") == "[1, 2]"


def test_json_inside_prose():
    text = f"Sure! Here is your itinerary: {PLAN_TEXT} Have a great trip."
    extracted = extract_first_json(text)
    assert extracted == PLAN_TEXT
    assert json.loads(extracted) == PLAN


def test_json_inside_tagged_fence():
    text = f"Here you go:\n```json\n{PLAN_TEXT}\n```\nEnjoy!"
    assert json.loads(extract_first_json(text)) == PLAN


def test_json_inside_untagged_fence():
    text = f"Result:\n```\n{PLAN_TEXT}\n```"
    assert extract_first_json(text) == PLAN_TEXT


def test_fence_tag_is_case_insensitive():
    text = f"Result:\n```JSON\n{PLAN_TEXT}\n```"
    assert extract_first_json(text) == PLAN_TEXT


def test_fence_without_json_falls_back_to_scan():
    text = "```\nnot json\n``` but later {\"a\": 1} ok"
    assert extract_first_json(text) == '{"a": 1}'


def test_earliest_opening_bracket_wins():
    text = 'list [1, 2] then {"a": 1}'
    assert extract_first_json(text) == '[1, 2] then {"a": 1}'


def test_no_brackets_is_not_found():
    assert extract_first_json("I cannot help with that.") is None


def test_opening_without_closing_is_not_found():
    assert extract_first_json("Answer: { \"title\": \"oops\"") is None


def test_safe_json_parse_ok():
    result = safe_json_parse(PLAN_TEXT)
    assert result.ok
    assert result.data == PLAN


def test_safe_json_parse_reports_parser_message():
    result = safe_json_parse('{"title": }')
    assert not result.ok
    assert result.data is None
    assert "Expecting value" in result.error


def test_safe_json_parse_rejects_nan():
    assert not safe_json_parse('{"durationMin": NaN}').ok
