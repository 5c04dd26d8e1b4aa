"""Custom exceptions for AI services."""

import json
import re

import httpx

from config import ERROR_BODY_LIMIT

_TAG_RE = re.compile(r"<[^>]+>")


class AIServiceException(Exception):
    """Base exception for AI service errors."""
    pass


class AIServiceUnavailable(AIServiceException):
    """Raised when AI service is unavailable."""
    pass


class AIRateLimitExceeded(AIServiceException):
    """Raised when rate limit is exceeded."""
    pass


class AIInvalidResponse(AIServiceException):
    """Raised when response is invalid or malformed."""
    pass


class AIAuthenticationError(AIServiceException):
    """Raised when a provider API key is not configured or rejected."""
    pass


class UpstreamProviderError(AIServiceException):
    """Raised when a provider answers with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_response(cls, response: httpx.Response, label: str) -> "UpstreamProviderError":
        """
        Build an error from a failed provider response.

        JSON bodies contribute their ``error.message`` (or the whole document);
        anything else is treated as text, HTML tags are stripped and the
        result is truncated.
        """
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if payload is not None:
                return cls(_json_error_message(payload), response.status_code)

        text = strip_html(response.text)[:ERROR_BODY_LIMIT]
        return cls(f"{label}: {text}", response.status_code)


def strip_html(text: str) -> str:
    return _TAG_RE.sub("", text or "")


def _json_error_message(payload) -> str:
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return json.dumps(payload)
