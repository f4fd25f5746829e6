from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureReason(str, Enum):
    """Why a completion produced no usable reply."""

    NETWORK = "network"
    UPSTREAM_STATUS = "upstream_status"
    PARSE = "parse"


@dataclass(frozen=True)
class CompletionSuccess:
    content: str


@dataclass(frozen=True)
class CompletionFailure:
    reason: FailureReason
    detail: str
    status_code: int | None = None
    body: object = None


CompletionResult = CompletionSuccess | CompletionFailure


def describe_error(error: Exception) -> str:
    """
    Map raw exceptions into short, human-readable messages for logs.
    """
    s, t = str(error), type(error).__name__
    status = getattr(error, "status_code", None)
    if status == 429 or t == "RateLimitError":
        return "Rate Limited: API provider is temporarily rate-limited."
    if status == 401 or t == "AuthenticationError":
        return "Authentication Error: Invalid API key or credentials."
    if status == 404 or t == "NotFoundError":
        return "Not Found: The requested model or endpoint was not found."
    if status == 403 or t == "PermissionDeniedError":
        return "Forbidden: No permission to use this model or resource."
    if "Timeout" in t:
        return "Timeout: The API provider did not answer in time."
    if "Connect" in t or "ECONNREFUSED" in s or "ETIMEDOUT" in s:
        return "Connection Error: Unable to connect to the API provider."
    return f"{t}: {s.split(chr(10))[0][:100]}"
