"""
Paywall for embedded content (internal library).
Decision (access) and execution (delivery) are separate; the contract between
them is AccessDecision.
"""
from streamgate.paywall.access import decide_access
from streamgate.paywall.audit import record_access
from streamgate.paywall.delivery import prepare_view
from streamgate.paywall.models import (
    AccessDecision,
    AccessOutcome,
    ContentView,
)

__all__ = [
    "AccessDecision",
    "AccessOutcome",
    "ContentView",
    "decide_access",
    "prepare_view",
    "record_access",
]
