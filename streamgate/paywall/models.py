"""
Paywall DTOs: AccessOutcome / AccessDecision (output of decide_access) and
ContentView (what delivery hands to the HTTP layer).
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class AccessOutcome(str, Enum):
    ALLOW = "allow"
    REQUIRE_LOGIN = "require_login"
    REQUIRE_SUBSCRIPTION = "require_subscription"
    NOT_FOUND = "not_found"


# ----- Access decision (pure logic, no I/O) -----


class AccessDecision(BaseModel):
    """Result of decide_access."""

    outcome: AccessOutcome
    account_id: str | None = Field(None, description="Viewer id, None for anonymous")
    subscription_id: str | None = Field(
        None,
        description="Authoritative record consulted (None if the viewer has none or was not checked)",
    )

    model_config = {"frozen": True}

    @property
    def allowed(self) -> bool:
        return self.outcome is AccessOutcome.ALLOW


# ----- Delivery result -----


class ContentView(BaseModel):
    """Content as exposed to a viewer. embed_payload is present only for ALLOW."""

    id: str
    title: str
    description: str = ""
    poster_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    embed_payload: str | None = None

    model_config = {"frozen": True}
