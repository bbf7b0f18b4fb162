"""
Execution: prepare_view(decision, item) -> ContentView | None.
Only ALLOW carries the embed payload; refusals never expose content fields.
"""
from __future__ import annotations

import logging

from streamgate.models.content_item import ContentItem
from streamgate.paywall.models import AccessDecision, AccessOutcome, ContentView

logger = logging.getLogger(__name__)


def prepare_view(decision: AccessDecision, item: ContentItem | None) -> ContentView | None:
    if decision.outcome is not AccessOutcome.ALLOW:
        return None
    if item is None:
        raise ValueError("ALLOW decision without a resolved content item")
    return ContentView(
        id=item.id,
        title=item.title,
        description=item.description or "",
        poster_url=item.poster_url,
        tags=list(item.tags or []),
        created_at=item.created_at,
        embed_payload=item.embed_payload,
    )
