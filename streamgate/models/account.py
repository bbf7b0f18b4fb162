from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String

from streamgate.db.base import Base


class Account(Base):
    __tablename__ = "accounts"

    # Subject assigned by the identity provider, not generated here.
    id = Column(String, primary_key=True)
    email = Column(String, nullable=True, index=True)
    # NB: changed only out-of-band (SQL console / provider metadata), never by the app.
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
