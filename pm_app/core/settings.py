"""Service credentials and tunables, loaded once and injected into services.

Lookup order for each key: a section in Streamlit secrets (``[jira]``,
``[slack]``, ``[anthropic]``), then a top-level secrets key, then the process
environment. Nothing below this module reads the environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import (
    DEFAULT_PROJECT_KEY,
    DEFAULT_STALE_DAYS,
    LLM_MODEL,
    SLACK_API_BASE,
    TIMEZONE,
    TRANSCRIPT_MAX_TOKENS,
    WBR_MAX_TOKENS,
)
from .errors import ConfigurationError


@dataclass(slots=True, frozen=True)
class JiraSettings:
    server: str = ""
    email: str = ""
    token: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.server and self.email and self.token)

    def require(self) -> JiraSettings:
        if not self.is_complete:
            raise ConfigurationError("Jira credentials not configured")
        return self


@dataclass(slots=True, frozen=True)
class SlackSettings:
    bot_token: str = ""
    api_base: str = SLACK_API_BASE
    # Jira display name -> Slack user id, used for reminder DMs
    user_ids: Mapping[str, str] = field(default_factory=dict)

    def require(self) -> SlackSettings:
        if not self.bot_token:
            raise ConfigurationError("Slack token not configured")
        return self


@dataclass(slots=True, frozen=True)
class LLMSettings:
    api_key: str = ""
    model: str = LLM_MODEL
    transcript_max_tokens: int = TRANSCRIPT_MAX_TOKENS
    wbr_max_tokens: int = WBR_MAX_TOKENS

    def require(self) -> LLMSettings:
        if not self.api_key:
            raise ConfigurationError("Anthropic API key not configured")
        return self


@dataclass(slots=True, frozen=True)
class AnalyticsSettings:
    timezone: str = TIMEZONE
    # When True, average time open divides by completed issues that carry a
    # resolution date instead of by every completed issue.
    avg_open_dated_only: bool = False
    stale_days: int = DEFAULT_STALE_DAYS


@dataclass(slots=True, frozen=True)
class Settings:
    jira: JiraSettings = field(default_factory=JiraSettings)
    slack: SlackSettings = field(default_factory=SlackSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    analytics: AnalyticsSettings = field(default_factory=AnalyticsSettings)
    default_project: str = DEFAULT_PROJECT_KEY


def _lookup(
    secrets: Mapping[str, Any],
    environ: Mapping[str, str],
    section: str,
    *names: str,
) -> str:
    block = secrets.get(section) or {}
    for name in names:
        value = block.get(name) if isinstance(block, Mapping) else None
        if value:
            return str(value)
    for name in names:
        value = secrets.get(name)
        if value and not isinstance(value, Mapping):
            return str(value)
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return ""


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def load_settings(
    secrets: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build a ``Settings`` snapshot from Streamlit secrets and the environment."""
    secrets = secrets or {}
    environ = os.environ if environ is None else environ

    jira = JiraSettings(
        server=_lookup(secrets, environ, "jira", "JIRA_SERVER", "JIRA_BASE_URL").rstrip("/"),
        email=_lookup(secrets, environ, "jira", "JIRA_EMAIL"),
        token=_lookup(secrets, environ, "jira", "JIRA_API_TOKEN", "JIRA_TOKEN"),
    )

    slack_block = secrets.get("slack") or {}
    user_ids = slack_block.get("user_ids") if isinstance(slack_block, Mapping) else None
    slack = SlackSettings(
        bot_token=_lookup(secrets, environ, "slack", "SLACK_BOT_TOKEN"),
        api_base=_lookup(secrets, environ, "slack", "SLACK_API_BASE") or SLACK_API_BASE,
        user_ids={str(k): str(v) for k, v in dict(user_ids or {}).items()},
    )

    llm = LLMSettings(
        api_key=_lookup(secrets, environ, "anthropic", "ANTHROPIC_API_KEY"),
        model=_lookup(secrets, environ, "anthropic", "ANTHROPIC_MODEL") or LLM_MODEL,
    )

    stale_raw = _lookup(secrets, environ, "analytics", "STALE_DAYS")
    analytics = AnalyticsSettings(
        timezone=_lookup(secrets, environ, "analytics", "DASHBOARD_TIMEZONE") or TIMEZONE,
        avg_open_dated_only=_as_bool(_lookup(secrets, environ, "analytics", "AVG_OPEN_DATED_ONLY")),
        stale_days=int(stale_raw) if stale_raw.isdigit() else DEFAULT_STALE_DAYS,
    )

    return Settings(
        jira=jira,
        slack=slack,
        llm=llm,
        analytics=analytics,
        default_project=_lookup(secrets, environ, "jira", "JIRA_PROJECT") or DEFAULT_PROJECT_KEY,
    )
