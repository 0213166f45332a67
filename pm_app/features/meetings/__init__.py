"""Meeting notes feature: transcript action items and weekly business reviews."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pm_app.core.errors import DashboardError, ErrorResponse
from pm_app.core.llm_client import CompletionClient
from pm_app.core.settings import Settings
from pm_app.features.meetings.action_items import ActionItem, extract_action_items, parse_action_items
from pm_app.features.meetings.json_extract import extract_json_value
from pm_app.features.meetings.wbr import collect_input_text, generate_wbr, parse_wbr, wbr_to_markdown

logger = logging.getLogger(__name__)


def process_transcript(
    settings: Settings,
    transcript: str,
    *,
    client: CompletionClient | None = None,
) -> list[ActionItem] | ErrorResponse:
    try:
        if client is None:
            # validate the input before complaining about credentials
            if not isinstance(transcript, str) or not transcript.strip():
                return ErrorResponse(400, "Transcript is required")
            client = CompletionClient.from_settings(settings.llm)
        return extract_action_items(client, transcript, max_tokens=settings.llm.transcript_max_tokens)
    except DashboardError as exc:
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error processing transcript")
        return ErrorResponse(500, "Internal server error")


def build_wbr(
    settings: Settings,
    *,
    text: str | None = None,
    files: Iterable[tuple[str, bytes]] = (),
    client: CompletionClient | None = None,
) -> dict[str, Any] | ErrorResponse:
    try:
        input_text = collect_input_text(text, files)
        if not input_text.strip():
            return ErrorResponse(400, "No input text provided")
        client = client or CompletionClient.from_settings(settings.llm)
        return generate_wbr(client, input_text, max_tokens=settings.llm.wbr_max_tokens)
    except DashboardError as exc:
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error generating WBR")
        return ErrorResponse(500, "Internal server error")


__all__ = [
    "ActionItem",
    "build_wbr",
    "collect_input_text",
    "extract_action_items",
    "extract_json_value",
    "parse_action_items",
    "parse_wbr",
    "process_transcript",
    "wbr_to_markdown",
]
