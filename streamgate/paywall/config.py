"""
Paywall config: typed wrapper over streamgate.core.config for subscription terms.
"""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from streamgate.core.config import settings


def get_subscription_period_days() -> int:
    return settings.subscription_period_days


def get_subscription_period() -> timedelta:
    return timedelta(days=get_subscription_period_days())


def get_subscription_price() -> Decimal:
    return settings.subscription_price
