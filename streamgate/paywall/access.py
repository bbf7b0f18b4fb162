"""
Decision only: decide_access(viewer, content_id, subscription) -> AccessDecision.
Pure function, no I/O. The caller fetches the viewer's authoritative
subscription record beforehand.
"""
from __future__ import annotations

import logging
from datetime import datetime

from streamgate.models.account import Account
from streamgate.models.subscription import SubscriptionRecord
from streamgate.paywall.models import AccessDecision, AccessOutcome
from streamgate.services.subscriptions.lifecycle import is_usable

logger = logging.getLogger(__name__)


def decide_access(
    viewer: Account | None,
    content_id: str | None,
    subscription: SubscriptionRecord | None,
    now: datetime | None = None,
) -> AccessDecision:
    """
    Order matters:
    - unknown content -> NOT_FOUND (checked first, so nothing else leaks)
    - anonymous -> REQUIRE_LOGIN (existence is not revealed further)
    - usable authoritative record -> ALLOW
    - anything else (none, pending, cancelled, lapsed) -> REQUIRE_SUBSCRIPTION
    """
    if content_id is None:
        return AccessDecision(outcome=AccessOutcome.NOT_FOUND)

    if viewer is None:
        return AccessDecision(outcome=AccessOutcome.REQUIRE_LOGIN)

    subscription_id = subscription.id if subscription is not None else None
    if is_usable(subscription, now):
        return AccessDecision(
            outcome=AccessOutcome.ALLOW,
            account_id=viewer.id,
            subscription_id=subscription_id,
        )

    return AccessDecision(
        outcome=AccessOutcome.REQUIRE_SUBSCRIPTION,
        account_id=viewer.id,
        subscription_id=subscription_id,
    )
