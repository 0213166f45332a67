"""Weekly business review (WBR) generation from notes and transcripts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import PurePath
from typing import Any

from pm_app.core.config import WBR_PROJECTS, WBR_TEXT_EXTENSIONS
from pm_app.core.errors import ParseError, ValidationError
from pm_app.core.llm_client import CompletionClient

from .json_extract import extract_json_value

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are a PM assistant that generates Weekly Business Review (WBR) documents.

Analyze the following input (which may be meeting notes, transcripts, status updates, or raw notes) and produce a structured WBR document.

The WBR must follow this exact JSON structure:

{{
  "title": "Weekly Review {project_title} Week [N] - [date range]",
  "overview": "Executive summary paragraph covering the highlights of the week across all projects",
  "projectUpdates": [
{project_updates}
  ],
  "upcomingPriorities": [
{project_priorities}
  ]
}}

Rules:
- Group updates under the correct project ({project_list})
- If the input does not clearly separate projects, make your best inference
- Create meaningful subsection groupings (e.g., by feature area, tech domain)
- The overview should be 2-4 sentences summarizing the week's key achievements and focus areas
- Infer the week number and date range from the input if possible, otherwise use placeholder text
- Be detailed and specific in bullet points - include technical details, names, and metrics mentioned
- Return ONLY valid JSON, no additional text

Input:
{input_text}"""

_UPDATE_BLOCK = """    {{
      "projectName": "{name}",
      "subsections": [
        {{
          "title": "Category name",
          "bullets": ["Specific update 1", "Specific update 2"]
        }}
      ]
    }}"""

_PRIORITY_BLOCK = """    {{
      "projectName": "{name}",
      "items": ["Priority 1", "Priority 2"]
    }}"""


def build_prompt(input_text: str, projects: Sequence[str] = WBR_PROJECTS) -> str:
    return PROMPT_TEMPLATE.format(
        project_title="/".join(projects),
        project_list=" or ".join(projects),
        project_updates=",\n".join(_UPDATE_BLOCK.format(name=p) for p in projects),
        project_priorities=",\n".join(_PRIORITY_BLOCK.format(name=p) for p in projects),
        input_text=input_text,
    )


def collect_input_text(text: str | None = None, files: Iterable[tuple[str, bytes]] = ()) -> str:
    """Uploaded files win over pasted text; each file gets a ``--- name ---`` header."""
    parts: list[str] = []
    for name, payload in files:
        suffix = PurePath(name).suffix.lower()
        if suffix not in WBR_TEXT_EXTENSIONS:
            raise ValidationError(f"Unsupported file type: {name} (upload plain text)")
        try:
            content = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError(f"File is not UTF-8 text: {name}") from exc
        parts.append(f"--- {name} ---\n{content}")
    if parts:
        return "\n\n".join(parts)
    return text or ""


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if isinstance(v, (str, int, float))]


def normalize_wbr(raw: Mapping[str, Any]) -> dict[str, Any]:
    updates = []
    for project in raw.get("projectUpdates") or []:
        if not isinstance(project, Mapping):
            continue
        subsections = [
            {"title": str(sub.get("title") or ""), "bullets": _string_list(sub.get("bullets"))}
            for sub in project.get("subsections") or []
            if isinstance(sub, Mapping)
        ]
        updates.append({"projectName": str(project.get("projectName") or ""), "subsections": subsections})
    priorities = [
        {"projectName": str(p.get("projectName") or ""), "items": _string_list(p.get("items"))}
        for p in raw.get("upcomingPriorities") or []
        if isinstance(p, Mapping)
    ]
    return {
        "title": str(raw.get("title") or ""),
        "overview": str(raw.get("overview") or ""),
        "projectUpdates": updates,
        "upcomingPriorities": priorities,
    }


def parse_wbr(completion: str) -> dict[str, Any]:
    try:
        raw = extract_json_value(completion, dict)
    except ParseError:
        logger.error("Failed to parse WBR from completion: %s", completion[:200])
        raise ParseError("Failed to parse WBR output") from None
    return normalize_wbr(raw)


def generate_wbr(
    client: CompletionClient,
    input_text: str,
    *,
    max_tokens: int,
    projects: Sequence[str] = WBR_PROJECTS,
) -> dict[str, Any]:
    if not input_text or not input_text.strip():
        raise ValidationError("No input text provided")
    completion = client.complete(build_prompt(input_text, projects), max_tokens=max_tokens)
    return parse_wbr(completion)


def wbr_to_markdown(wbr: Mapping[str, Any], metrics: Mapping[str, Mapping[str, Any]] | None = None) -> str:
    """Render a WBR as Markdown; ``metrics`` maps project key -> report dict."""
    lines = [f"# {wbr.get('title', '')}", "", "## Overview", str(wbr.get("overview", "")), ""]
    lines += ["## Detailed Updates per Project", ""]
    for project in wbr.get("projectUpdates", []):
        lines += [f"### {project['projectName']}", ""]
        for sub in project["subsections"]:
            lines.append(f"#### {sub['title']}")
            lines += [f"- {bullet}" for bullet in sub["bullets"]]
            lines.append("")
    lines += ["## Upcoming Priorities", ""]
    for priority in wbr.get("upcomingPriorities", []):
        lines.append(f"### {priority['projectName']}")
        lines += [f"- {item}" for item in priority["items"]]
        lines.append("")
    if metrics:
        lines += [
            "## Metrics",
            "",
            "| Project | Created | Completed | Completion Rate | Avg Time Open | Velocity |",
            "|---------|---------|-----------|-----------------|---------------|----------|",
        ]
        for project, m in metrics.items():
            lines.append(
                f"| {project} | {m.get('ticketsCreated', 0)} | {m.get('ticketsCompleted', 0)} "
                f"| {m.get('completionRate', 0)}% | {m.get('avgTimeOpen', 0)}d | {m.get('avgVelocity', 0)}/wk |"
            )
    return "\n".join(lines) + "\n"
