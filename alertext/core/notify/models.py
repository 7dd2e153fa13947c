"""Pydantic schemas for notification channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class HTTPClientConfig(BaseModel):
    """Transport settings for outbound HTTP requests."""

    timeout_seconds: float = Field(10.0, gt=0)
    verify_ssl: bool = True
    ca_bundle: Optional[str] = None
    proxy_url: Optional[str] = None


class TelephoneConfig(BaseModel):
    """Settings of a voice-call notification channel."""

    app_key: str
    app_secret: str = ""
    username: str = ""
    authorization: str = ""
    base_url: str = ""
    display_number: str = ""
    template_id: str = ""
    operators: Tuple[str, ...] = ()
    country_code: str = "+86"
    refresh_after_hours: int = Field(47, gt=0)
    validate_delivery_response: bool = False
    http: HTTPClientConfig = Field(default_factory=HTTPClientConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("operators", mode="before")
    @classmethod
    def drop_blank_operators(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        return tuple(str(op).strip() for op in v if str(op).strip())


class TokenResult(BaseModel):
    """Body of the token acquisition and refresh endpoints."""

    resultcode: Optional[str] = None
    resultdesc: Optional[str] = None
    access_token: str = ""
    refresh_token: str = ""
    expires_in: str = "0"

    @field_validator("expires_in", mode="before")
    @classmethod
    def coerce_expires_in(cls, v) -> str:
        return "" if v is None else str(v)


@dataclass
class NotifyResult:
    """Outcome of one notification event.

    ``retryable`` and ``error`` describe the event as a whole. Per-destination
    failures are best-effort and only show up in ``failed``.
    """

    retryable: bool = False
    error: Optional[Exception] = None
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)
