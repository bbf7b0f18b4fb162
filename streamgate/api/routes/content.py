"""
Public content routes: /v/{token} and /dorama/{token} (same gate), plus the
listing of content cards. Malformed and unknown tokens share one 404 body.
"""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from streamgate.db.session import get_db
from streamgate.links.codec import encode
from streamgate.models.account import Account
from streamgate.paywall import AccessOutcome, decide_access, prepare_view, record_access
from streamgate.paywall.models import ContentView
from streamgate.schemas.content import ContentCard
from streamgate.services.auth.jwt import get_current_account
from streamgate.services.content.resolver import ContentResolver
from streamgate.services.content.service import ContentService
from streamgate.services.subscriptions.service import SubscriptionService

router = APIRouter(tags=["content"])

REFUSAL_STATUS = {
    AccessOutcome.REQUIRE_LOGIN: 401,
    AccessOutcome.REQUIRE_SUBSCRIPTION: 402,
    AccessOutcome.NOT_FOUND: 404,
}
REFUSAL_DETAIL = {
    AccessOutcome.REQUIRE_LOGIN: "Login required",
    AccessOutcome.REQUIRE_SUBSCRIPTION: "Active subscription required",
    AccessOutcome.NOT_FOUND: "Content not found",
}


def view_content(token: str, viewer: Account | None, db: Session, path: str | None = None):
    resolver = ContentResolver(ContentService(db))
    item = None
    subscription = None
    if viewer is None:
        # anonymous: shape check only, existence is not disclosed
        content_id = resolver.resolve_id(token)
    else:
        item = resolver.resolve(token)
        content_id = item.id if item is not None else None
        if item is not None:
            subscription = SubscriptionService(db).authoritative_for(viewer.id)

    decision = decide_access(viewer, content_id, subscription)
    record_access(decision, content_id, path=path)

    view = prepare_view(decision, item)
    if view is not None:
        return view
    return JSONResponse(
        status_code=REFUSAL_STATUS[decision.outcome],
        content={"outcome": decision.outcome.value, "detail": REFUSAL_DETAIL[decision.outcome]},
    )


@router.get("/v/{token}", response_model=ContentView)
def view_video(
    token: str,
    request: Request,
    viewer: Account | None = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    return view_content(token, viewer, db, path=request.url.path)


@router.get("/dorama/{token}", response_model=ContentView)
def view_dorama(
    token: str,
    request: Request,
    viewer: Account | None = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    return view_content(token, viewer, db, path=request.url.path)


@router.get("/content", response_model=list[ContentCard])
def list_content(
    db: Session = Depends(get_db),
    tag: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
) -> list[ContentCard]:
    items = ContentService(db).list_recent(tag=tag, limit=page_size, offset=(page - 1) * page_size)
    return [
        ContentCard(
            token=encode(item.id),
            title=item.title,
            poster_url=item.poster_url,
            tags=list(item.tags or []),
            created_at=item.created_at,
        )
        for item in items
    ]
