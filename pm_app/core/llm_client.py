"""Anthropic Messages API wrapper returning plain completion text."""

from __future__ import annotations

import logging

import anthropic
from anthropic import Anthropic

from .errors import UpstreamError
from .settings import LLMSettings

logger = logging.getLogger(__name__)


class CompletionClient:
    def __init__(self, api_key: str, model: str, *, client: Anthropic | None = None):
        self.model = model
        self.client = client or Anthropic(api_key=api_key, max_retries=0)

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> CompletionClient:
        settings.require()
        return cls(settings.api_key, settings.model)

    def complete(self, prompt: str, *, max_tokens: int) -> str:
        """Send a single user turn and return the first text block ("" if none)."""
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as exc:
            logger.error("Anthropic API error %s: %s", exc.status_code, str(exc.message)[:200])
            raise UpstreamError(500, "Completion service error") from exc
        except anthropic.APIError as exc:
            logger.error("Anthropic request failed: %s", exc)
            raise UpstreamError(500, "Completion service error") from exc

        stop_reason = getattr(response, "stop_reason", None)
        if stop_reason == "max_tokens":
            logger.warning("Completion truncated at max_tokens=%d", max_tokens)
        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", None) == "text":
                return block.text or ""
        return ""
