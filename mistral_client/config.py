"""Client settings and environment resolution."""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://api.mistral.ai/v1"
DEFAULT_TIMEOUT = 60.0

ENV_API_KEY = "MISTRAL_API_KEY"
ENV_BASE_URL = "MISTRAL_BASE_URL"
ENV_TIMEOUT = "MISTRAL_TIMEOUT"


class Settings(BaseModel):
    """Connection settings shared by the sync and async clients.

    A ``timeout`` of ``0`` disables the timeout entirely.
    """

    api_key: str = Field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, v: str) -> str:
        if not v:
            raise ValueError("api_key is required")
        return v

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("base_url is required")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def _non_negative_timeout(cls, v: float) -> float:
        if v < 0:
            raise ValueError("timeout must be >= 0")
        return v

    @property
    def httpx_timeout(self) -> Optional[float]:
        return self.timeout or None

    @classmethod
    def from_env(
        cls,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Settings:
        """Build settings from ``MISTRAL_*`` variables; explicit arguments win."""
        if timeout is None:
            raw = os.getenv(ENV_TIMEOUT)
            timeout = float(raw) if raw else DEFAULT_TIMEOUT
        return cls(
            api_key=api_key or os.getenv(ENV_API_KEY, ""),
            base_url=base_url or os.getenv(ENV_BASE_URL) or DEFAULT_BASE_URL,
            timeout=timeout,
        )
