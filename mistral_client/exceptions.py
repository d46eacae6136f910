"""Exceptions for the Mistral client."""

from __future__ import annotations

import json
from typing import Any, Optional


class MistralError(Exception):
    """Base exception for the Mistral client."""


class StreamDecodeError(MistralError, json.JSONDecodeError):
    """Raised when a streamed ``data:`` payload is not valid JSON."""


class APIError(MistralError):
    """Raised on any HTTP error response."""

    def __init__(self, message: str, status_code: int, body: str = "", detail: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.detail = detail


class AuthenticationError(APIError):
    """Raised on 401 responses."""


class NotFoundError(APIError):
    """Raised on 404 responses."""


class ValidationError(APIError):
    """Raised on 422 responses."""


class RateLimitError(APIError):
    """Raised on 429 responses."""
