"""Error taxonomy shared by the Jira, Slack, and LLM integrations.

Internal code raises; the boundary functions (``compute_metrics``,
``board_tickets``, ``send_message``...) convert to ``ErrorResponse`` so that
callers receive a status-coded value instead of an exception.
"""

from __future__ import annotations

from dataclasses import dataclass


class DashboardError(Exception):
    """Base class for failures that map onto an HTTP-style status."""

    http_status: int = 500

    def __init__(self, message: str, *, http_status: int | None = None):
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status


class ConfigurationError(DashboardError):
    """A required credential is missing. Always fatal for the request."""

    http_status = 500


class ValidationError(DashboardError):
    http_status = 400


class UpstreamError(DashboardError):
    """Non-success response from an external service; keeps its status code."""

    def __init__(self, status: int, message: str | None = None):
        super().__init__(message or f"Upstream error: {status}", http_status=status)
        self.status = status


class ResponseFormatError(DashboardError):
    """Upstream answered, but the payload could not be understood."""

    http_status = 500


class ParseError(DashboardError):
    """LLM output did not contain the structured value we asked for."""

    http_status = 500


@dataclass(slots=True, frozen=True)
class ErrorResponse:
    http_status: int
    message: str

    @classmethod
    def from_exception(cls, exc: DashboardError) -> ErrorResponse:
        return cls(exc.http_status, exc.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}
