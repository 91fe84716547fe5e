"""Error types and LLM-friendly error formatting.

Failures are classified by type, or else by matching their message against
known substrings, and turned into actionable text with a recovery hint. Messages
that already carry context (e.g. resolver not-found errors listing valid
names) are kept verbatim inside the formatted text.
"""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

logger = logging.getLogger("linear-mcp.errors")


class LinearMCPError(Exception):
    """Base class for errors raised by this server."""


class NotFoundError(LinearMCPError):
    """Raised when a name or identifier does not resolve to a Linear entity."""


class InvalidInputError(LinearMCPError):
    """Raised when tool arguments are missing or conflicting."""


class MutationFailedError(LinearMCPError):
    """Raised when Linear reports an unsuccessful write."""


class ConfirmationFailedError(LinearMCPError):
    """Raised when a write succeeded but the resulting entity could not be read back."""


class LinearAPIError(LinearMCPError):
    """Raised by the GraphQL client for error responses."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[list[dict]] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


def format_error(error: BaseException) -> str:
    """Format an exception into an LLM-friendly message with a recovery hint.

    Errors raised by this server are classified by type first, so that an
    identifier inside the message (e.g. "ENG-401") cannot be mistaken for a
    status code. Anything else falls back to matching the message text.
    """
    if isinstance(error, (MutationFailedError, ConfirmationFailedError)):
        return f"Error: {error}"

    if isinstance(error, httpx.RequestError):
        return f"Error: Connection failed - {error}"

    msg = str(error)
    if not msg:
        return f"Error: An unexpected error occurred: {type(error).__name__}"

    if isinstance(error, NotFoundError):
        return _not_found(msg)
    if isinstance(error, (InvalidInputError, ValidationError)):
        return f"Error: Invalid input. {msg}"

    lowered = msg.lower()

    if "authentication" in lowered or "unauthorized" in lowered or "401" in lowered:
        return ("Error: Authentication failed. Verify your LINEAR_API_KEY is valid and not expired. "
                "Generate a new key at: Linear Settings > Account > API > Personal API Keys.")
    if "not found" in lowered or "404" in lowered:
        return _not_found(msg)
    if "rate limit" in lowered or "ratelimited" in lowered or "429" in lowered:
        return "Error: Rate limit exceeded. Linear allows 5000 requests/hour. Wait a moment and retry."
    if "forbidden" in lowered or "403" in lowered:
        return "Error: Permission denied. Your API key may not have access to this resource."
    if "validation" in lowered or "invalid" in lowered:
        return f"Error: Invalid input. {msg}"

    return f"Error: {msg}"


def _not_found(msg: str) -> str:
    return (f'Error: Resource not found. Verify the identifier format (e.g., "GEN-123" for issues, '
            f"or a valid UUID for IDs). {msg}")
