from datetime import datetime

from pydantic import BaseModel, Field


class ContentIn(BaseModel):
    """Full replacement payload: omitted optional fields are reset."""

    title: str = Field(..., min_length=1)
    description: str = ""
    poster_url: str | None = None
    embed_payload: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)


class ContentCard(BaseModel):
    """Listing entry: public token, never the embed payload or raw id."""

    token: str
    title: str
    poster_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime


class ContentAdminOut(BaseModel):
    id: str
    token: str
    title: str
    description: str
    poster_url: str | None = None
    embed_payload: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class ShareLinkOut(BaseModel):
    token: str
    video_url: str
    dorama_url: str
