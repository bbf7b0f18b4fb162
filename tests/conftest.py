"""
Shared fixtures. Required settings are seeded before streamgate.core.config
is imported by any test module.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("IDENTITY_JWT_SECRET", "test-identity-secret-0123456789")

from datetime import datetime, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import streamgate.models  # noqa: E402,F401
from streamgate.db.base import Base  # noqa: E402
from streamgate.models.account import Account  # noqa: E402
from streamgate.models.content_item import ContentItem  # noqa: E402
from streamgate.models.subscription import SubscriptionRecord  # noqa: E402

TEST_JWT_SECRET = os.environ["IDENTITY_JWT_SECRET"]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_account(db):
    def _make(is_admin: bool = False, account_id: str | None = None, email: str | None = None) -> Account:
        account = Account(id=account_id or str(uuid4()), email=email or "viewer@example.com", is_admin=is_admin)
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _make


@pytest.fixture
def make_content(db):
    def _make(**kwargs) -> ContentItem:
        item = ContentItem(
            title=kwargs.get("title", "Pousando no Amor"),
            description=kwargs.get("description", ""),
            poster_url=kwargs.get("poster_url", "https://cdn.example.com/poster.jpg"),
            embed_payload=kwargs.get("embed_payload", '<iframe src="https://player.example.com/e/1"></iframe>'),
            tags=kwargs.get("tags", ["romance"]),
            created_at=kwargs.get("created_at", datetime.now(timezone.utc)),
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture
def make_subscription(db):
    def _make(account_id: str, status: str, created_at: datetime | None = None,
              expires_at: datetime | None = None, amount: Decimal = Decimal("20.00")) -> SubscriptionRecord:
        created_at = created_at or datetime.now(timezone.utc)
        record = SubscriptionRecord(
            account_id=account_id,
            status=status,
            amount=amount,
            created_at=created_at,
            updated_at=created_at,
            expires_at=expires_at,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make

