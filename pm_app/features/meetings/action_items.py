"""Extract action items from a meeting transcript via the completion service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pm_app.core.config import UNASSIGNED_LABEL
from pm_app.core.errors import ParseError, ValidationError
from pm_app.core.llm_client import CompletionClient

from .json_extract import extract_json_value

logger = logging.getLogger(__name__)

PRIORITIES = ("high", "medium", "low")
DEFAULT_PRIORITY = "medium"

PROMPT_TEMPLATE = """Analyze this meeting transcript and extract action items. For each action item, identify:
1. The task to be done (be specific and actionable)
2. Who should do it (assignee) - use the person's name if mentioned, otherwise "Unassigned"
3. Priority (high, medium, or low) - use "high" only for urgent or blocking items

Return ONLY a valid JSON array with this exact format, no other text or explanation:
[
  {{
    "task": "description of the task",
    "assignee": "person name or Unassigned",
    "priority": "high"
  }}
]

If there are no clear action items, return an empty array: []

Here is the transcript:
{transcript}"""


@dataclass(slots=True)
class ActionItem:
    id: str
    task: str
    assignee: str
    priority: str
    selected: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task": self.task,
            "assignee": self.assignee,
            "priority": self.priority,
            "selected": self.selected,
        }


def build_prompt(transcript: str) -> str:
    return PROMPT_TEMPLATE.format(transcript=transcript)


def _priority(value: Any) -> str:
    text = str(value or "").strip().lower()
    return text if text in PRIORITIES else DEFAULT_PRIORITY


def normalize_action_items(raw_items: list[Any]) -> list[ActionItem]:
    """Drop entries without a usable task; number the rest from 1."""
    kept = [
        item
        for item in raw_items
        if isinstance(item, dict) and isinstance(item.get("task"), str) and item["task"].strip()
    ]
    items = []
    for index, item in enumerate(kept, start=1):
        assignee = item.get("assignee")
        assignee = assignee.strip() if isinstance(assignee, str) and assignee.strip() else UNASSIGNED_LABEL
        items.append(
            ActionItem(
                id=str(index),
                task=item["task"].strip(),
                assignee=assignee,
                priority=_priority(item.get("priority")),
            )
        )
    return items


def parse_action_items(completion: str) -> list[ActionItem]:
    try:
        raw = extract_json_value(completion, list)
    except ParseError:
        logger.error("Failed to parse action items from completion: %s", completion[:200])
        raise ParseError("Failed to parse action items") from None
    return normalize_action_items(raw)


def extract_action_items(client: CompletionClient, transcript: str, *, max_tokens: int) -> list[ActionItem]:
    if not isinstance(transcript, str) or not transcript.strip():
        raise ValidationError("Transcript is required")
    completion = client.complete(build_prompt(transcript), max_tokens=max_tokens)
    items = parse_action_items(completion)
    logger.info("Extracted %d action items from transcript (%d chars)", len(items), len(transcript))
    return items
