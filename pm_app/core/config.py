"""Central configuration, constants, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence

# =============================================================================
# Jira Connection Settings
# =============================================================================
DEFAULT_PROJECT_KEY = "NTRVSTA"
TIMEZONE = "UTC"
JIRA_REQUEST_TIMEOUT = 30  # seconds, per outbound call

# Hard cap on every search; one page only.
SEARCH_RESULT_CAP = 200
BOARD_RESULT_CAP = 50

# =============================================================================
# Workflow Status Configuration
# =============================================================================
DONE_STATUS = "Done"

# Statuses excluded from the work-in-progress breakdown
WIP_EXCLUDED_STATUSES: Sequence[str] = (
    "Done",
    "Backlog",
    "To Do",
    "Cancelled",
    "Canceled",
)

# Statuses shown on the active board
BOARD_STATUSES: Sequence[str] = ("In Progress", "Testing")

UNASSIGNED_LABEL = "Unassigned"
UNKNOWN_STATUS = "Unknown"

# =============================================================================
# Analytics
# =============================================================================
RANGE_KEYWORDS: dict[str, str] = {
    "7d": "Last 7 days",
    "14d": "Last 14 days",
    "30d": "Last 30 days",
    "90d": "Last 90 days",
    "month": "This month",
    "quarter": "This quarter",
}
DEFAULT_RANGE_KEYWORD = "30d"

# =============================================================================
# Stale tickets
# =============================================================================
DEFAULT_STALE_DAYS: int = 4  # board tickets idle for longer than this are stale

# =============================================================================
# Jira fetch field lists
# =============================================================================
CREATED_FIELDS = ["summary", "status", "assignee", "creator", "created", "labels"]
COMPLETED_FIELDS = ["summary", "status", "assignee", "creator", "created", "resolutiondate", "labels"]
WIP_FIELDS = ["summary", "status"]
BOARD_FIELDS = ["summary", "status", "assignee", "updated"]

# =============================================================================
# Slack
# =============================================================================
SLACK_API_BASE = "https://slack.com/api"
SLACK_LIST_LIMIT = 500
SLACK_SEARCH_MAX_PER_KIND = 15
SLACK_REQUEST_TIMEOUT = 15

# =============================================================================
# LLM completion service
# =============================================================================
LLM_MODEL = "claude-sonnet-4-20250514"
TRANSCRIPT_MAX_TOKENS = 1024
WBR_MAX_TOKENS = 4096
WBR_PROJECTS: Sequence[str] = ("NTRVSTA", "ARC")
WBR_TEXT_EXTENSIONS: frozenset[str] = frozenset({".txt", ".md", ".text", ".vtt", ".srt"})

# =============================================================================
# Table columns
# =============================================================================
DISPLAY_ORDER_BOARD: Sequence[str] = (
    "Ticket",
    "summary",
    "status",
    "assignee",
    "updated",
)

DISPLAY_ORDER_STALE: Sequence[str] = (
    "Ticket",
    "summary",
    "status",
    "assignee",
    "days_stale",
    "updated",
)
