"""
ContentItem: embeddable video/dorama. The embed payload is opaque:
third-party markup or an embeddable URL, stored and returned as-is.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text

from streamgate.db.base import Base


class ContentItem(Base):
    __tablename__ = "content_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    poster_url = Column(String, nullable=True)
    embed_payload = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)  # set semantics, stored sorted
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def has_tag(self, tag: str) -> bool:
        return tag in (self.tags or [])
