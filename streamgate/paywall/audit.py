"""
Access audit: record_access is called by the view routes once per decision.
Log-only, no DB writes on the viewing path.
"""
from __future__ import annotations

import logging

from streamgate.paywall.models import AccessDecision
from streamgate.utils.metrics import access_decisions_total

logger = logging.getLogger(__name__)


def record_access(decision: AccessDecision, content_id: str | None, *, path: str | None = None) -> None:
    access_decisions_total.labels(outcome=decision.outcome.value).inc()
    logger.info(
        "paywall_access",
        extra={
            "outcome": decision.outcome.value,
            "account_id": decision.account_id,
            "subscription_id": decision.subscription_id,
            "content_id": content_id,
            "path": path,
        },
    )
