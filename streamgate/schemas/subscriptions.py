from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class SubscriptionClaimIn(BaseModel):
    amount: Decimal | None = Field(None, gt=0, description="Defaults to the configured price")


class SubscriptionGrantIn(BaseModel):
    amount: Decimal | None = Field(None, gt=0)


class SubscriptionOut(BaseModel):
    id: str
    account_id: str
    status: str
    effective_status: str
    is_usable: bool
    days_remaining: int
    amount: Decimal
    created_at: datetime
    updated_at: datetime
    expires_at: datetime | None = None


class TransitionOut(BaseModel):
    outcome: str  # transitioned / already_resolved
    subscription: SubscriptionOut
