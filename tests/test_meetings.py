from types import SimpleNamespace

import anthropic
import httpx
import pytest

from pm_app.core.errors import ErrorResponse, ParseError, UpstreamError
from pm_app.core.llm_client import CompletionClient
from pm_app.core.settings import LLMSettings, Settings
from pm_app.features.meetings import (
    build_wbr,
    collect_input_text,
    extract_json_value,
    parse_action_items,
    process_transcript,
    wbr_to_markdown,
)

SETTINGS = Settings(llm=LLMSettings(api_key="sk-test"))


class DummyCompletion(CompletionClient):
    def __init__(self, reply):
        self.model = "test-model"
        self.reply = reply
        self.prompts = []

    def complete(self, prompt, *, max_tokens):
        self.prompts.append((prompt, max_tokens))
        return self.reply


class FakeMessages:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.exc:
            raise self.exc
        return self.response


WBR_REPLY = """Here you go:
```json
{"title": "Weekly Review NTRVSTA/ARC Week 3 - Jan 15-19",
 "overview": "Shipped search.",
 "projectUpdates": [{"projectName": "NTRVSTA", "subsections": [{"title": "Search", "bullets": ["Indexed docs", 42]}]}],
 "upcomingPriorities": [{"projectName": "ARC", "items": ["Billing"]}]}
```"""


def test_extract_json_skips_prose_and_stray_brackets():
    text = 'Notes [see below] then: [{"task": "a"}] trailing {"x": 1}'
    assert extract_json_value(text, list) == [{"task": "a"}]
    assert extract_json_value(text, dict) == {"task": "a"}


def test_extract_json_fails_closed():
    with pytest.raises(ParseError):
        extract_json_value("no json here", list)
    with pytest.raises(ParseError):
        extract_json_value("", dict)
    with pytest.raises(ParseError):
        extract_json_value("[1, 2", list)
    with pytest.raises(ValueError):
        extract_json_value("[]", str)


def test_parse_action_items_normalizes():
    reply = """[
      {"task": " Write the release notes ", "assignee": "Dana", "priority": "HIGH"},
      {"task": "", "assignee": "Nobody"},
      {"task": "Book the room", "priority": "urgent"},
      "junk"
    ]"""
    items = parse_action_items(reply)
    assert [i.to_dict() for i in items] == [
        {"id": "1", "task": "Write the release notes", "assignee": "Dana", "priority": "high", "selected": True},
        {"id": "2", "task": "Book the room", "assignee": "Unassigned", "priority": "medium", "selected": True},
    ]


def test_parse_action_items_error_message():
    with pytest.raises(ParseError) as exc:
        parse_action_items("I could not find any.")
    assert exc.value.message == "Failed to parse action items"


def test_process_transcript_flow():
    client = DummyCompletion('[{"task": "Ship it", "assignee": "Lee", "priority": "low"}]')
    items = process_transcript(SETTINGS, "Lee: I'll ship it.", client=client)
    assert [i.task for i in items] == ["Ship it"]
    prompt, max_tokens = client.prompts[0]
    assert prompt.endswith("Lee: I'll ship it.")
    assert max_tokens == 1024


def test_process_transcript_errors():
    assert process_transcript(Settings(), "  ") == ErrorResponse(400, "Transcript is required")
    assert process_transcript(Settings(), "hello") == ErrorResponse(500, "Anthropic API key not configured")
    bad = process_transcript(SETTINGS, "hello", client=DummyCompletion("sorry"))
    assert bad == ErrorResponse(500, "Failed to parse action items")


def test_collect_input_text():
    assert collect_input_text("pasted", []) == "pasted"
    merged = collect_input_text("ignored", [("a.txt", b"one"), ("b.md", "dos ñ".encode())])
    assert merged == "--- a.txt ---\none\n\n--- b.md ---\ndos ñ"


def test_build_wbr_rejects_bad_uploads():
    assert build_wbr(SETTINGS, files=[("notes.docx", b"PK")]).http_status == 400
    assert build_wbr(SETTINGS, files=[("notes.txt", b"\xff\xfe\xfa")]).http_status == 400
    assert build_wbr(SETTINGS, text="   ") == ErrorResponse(400, "No input text provided")


def test_build_wbr_and_markdown():
    client = DummyCompletion(WBR_REPLY)
    wbr = build_wbr(SETTINGS, text="status notes", client=client)
    assert wbr["projectUpdates"][0]["subsections"][0]["bullets"] == ["Indexed docs", "42"]
    assert "NTRVSTA or ARC" in client.prompts[0][0]
    assert client.prompts[0][1] == 4096

    md = wbr_to_markdown(wbr, {"NTRVSTA": {"ticketsCreated": 5, "ticketsCompleted": 4, "completionRate": 80}})
    assert md.startswith("# Weekly Review NTRVSTA/ARC Week 3 - Jan 15-19\n")
    assert "#### Search\n- Indexed docs\n- 42\n" in md
    assert "### ARC\n- Billing\n" in md
    assert "| NTRVSTA | 5 | 4 | 80% | 0d | 0/wk |" in md
    assert "## Metrics" not in wbr_to_markdown(wbr)


def test_build_wbr_parse_failure():
    result = build_wbr(SETTINGS, text="notes", client=DummyCompletion("{not json"))
    assert result == ErrorResponse(500, "Failed to parse WBR output")


def test_completion_client_returns_first_text_block():
    response = SimpleNamespace(
        stop_reason="end_turn",
        content=[SimpleNamespace(type="tool_use"), SimpleNamespace(type="text", text="hello")],
    )
    messages = FakeMessages(response)
    client = CompletionClient("sk-test", "test-model", client=SimpleNamespace(messages=messages))
    assert client.complete("hi", max_tokens=10) == "hello"
    assert messages.kwargs["model"] == "test-model"
    assert messages.kwargs["messages"] == [{"role": "user", "content": "hi"}]


def test_completion_client_maps_api_errors():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    exc = anthropic.APIConnectionError(request=request)
    client = CompletionClient("sk-test", "m", client=SimpleNamespace(messages=FakeMessages(exc=exc)))
    with pytest.raises(UpstreamError) as info:
        client.complete("hi", max_tokens=10)
    assert info.value.http_status == 500
    assert info.value.message == "Completion service error"
