"""
Error taxonomy for tool calls.

Every failure that leaves the dispatcher is a ToolError with one of the
ToolErrorKind values below. Raw upstream failures (status code + body) are
classified into that taxonomy at the boundary, so callers never see httpx
exceptions or bare HTTP status codes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ToolErrorKind(str, Enum):
    """
    Caller-facing error kinds.

    - UNKNOWN_TOOL: No tool with the requested name
    - MISSING_PARAMETER: A required argument is absent or blank
    - INVALID_PARAMETER: An argument has the wrong type or value
    - UPSTREAM_RATE_LIMITED: Semantic Scholar answered 429 (retry with backoff)
    - UPSTREAM_NOT_FOUND: Unknown paper or author id (do not retry)
    - UPSTREAM_CONTRACT: Unexpected response shape
    - TIMEOUT: The upstream call did not finish in time
    - TRANSPORT_FAILURE: Network or connection-level failure
    - UNAVAILABLE: Missing/rejected credential or upstream service down
    """

    UNKNOWN_TOOL = "unknown_tool"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_PARAMETER = "invalid_parameter"
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    UPSTREAM_NOT_FOUND = "upstream_not_found"
    UPSTREAM_CONTRACT = "upstream_contract"
    TIMEOUT = "timeout"
    TRANSPORT_FAILURE = "transport_failure"
    UNAVAILABLE = "unavailable"


RETRYABLE_KINDS = frozenset(
    {
        ToolErrorKind.UPSTREAM_RATE_LIMITED,
        ToolErrorKind.TIMEOUT,
        ToolErrorKind.TRANSPORT_FAILURE,
        ToolErrorKind.UNAVAILABLE,
    }
)


class ToolError(Exception):
    """A classified tool-call failure."""

    def __init__(
        self,
        kind: ToolErrorKind,
        tool: str,
        reason: str,
        parameter: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(reason)
        self.kind = kind
        self.tool = tool
        self.reason = reason
        self.parameter = parameter
        self.details = details or {}

    @property
    def retryable(self) -> bool:
        """Whether a calling agent may retry the same call later."""
        return self.kind in RETRYABLE_KINDS

    def to_dict(self) -> dict[str, Any]:
        """Render the error for the caller."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "tool": self.tool,
            "reason": self.reason,
            "retryable": self.retryable,
        }
        if self.parameter is not None:
            data["parameter"] = self.parameter
        if self.details:
            data["details"] = self.details
        return data

    def __repr__(self) -> str:
        return f"ToolError({self.kind.value!r}, tool={self.tool!r}, reason={self.reason!r})"


@dataclass(frozen=True)
class UpstreamError:
    """A non-success answer from the Semantic Scholar API."""

    status_code: int
    body: str = ""
    retry_after: Optional[str] = None

    @property
    def message(self) -> str:
        """Best-effort human readable message extracted from the body."""
        try:
            data = json.loads(self.body)
        except ValueError:
            return self.body.strip()[:500]
        if isinstance(data, dict):
            for key in ("error", "message"):
                value = data.get(key)
                if isinstance(value, str):
                    return value
                if isinstance(value, dict) and isinstance(value.get("message"), str):
                    return value["message"]
        return self.body.strip()[:500]


def classify_upstream_error(error: UpstreamError, tool: str) -> ToolError:
    """
    Map an upstream failure onto exactly one ToolError kind.

    Args:
        error: The raw status/body from the upstream API.
        tool: Name of the tool that issued the request.

    Returns:
        The classified ToolError (not raised).
    """
    status = error.status_code
    message = error.message
    details: dict[str, Any] = {"status_code": status}

    if status == 429:
        if error.retry_after is not None:
            details["retry_after"] = error.retry_after
        return ToolError(
            ToolErrorKind.UPSTREAM_RATE_LIMITED,
            tool,
            "Rate limit exceeded. Consider using an API key for higher limits.",
            details=details,
        )
    if status == 404:
        return ToolError(
            ToolErrorKind.UPSTREAM_NOT_FOUND,
            tool,
            f"Resource not found: {message}" if message else "Resource not found",
            details=details,
        )
    if status in (400, 422):
        return ToolError(
            ToolErrorKind.INVALID_PARAMETER,
            tool,
            f"Upstream rejected the request: {message}" if message else "Upstream rejected the request",
            details=details,
        )
    if status in (401, 403):
        return ToolError(
            ToolErrorKind.UNAVAILABLE,
            tool,
            "Upstream rejected the API credential",
            details=details,
        )
    if status in (408, 504):
        return ToolError(
            ToolErrorKind.TIMEOUT,
            tool,
            f"Upstream timed out (HTTP {status})",
            details=details,
        )
    if 500 <= status < 600:
        return ToolError(
            ToolErrorKind.UNAVAILABLE,
            tool,
            f"Upstream service unavailable (HTTP {status})",
            details=details,
        )
    return ToolError(
        ToolErrorKind.UPSTREAM_CONTRACT,
        tool,
        f"Unexpected upstream status {status}: {message}",
        details=details,
    )
