"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
access_decisions_total = Counter(
    "access_decisions_total",
    "Content access decisions",
    ["outcome"],  # allow, require_login, require_subscription, not_found
)

subscription_transitions_total = Counter(
    "subscription_transitions_total",
    "Subscription lifecycle operations",
    ["action", "outcome"],  # outcome: transitioned, already_resolved
)

subscription_claims_total = Counter(
    "subscription_claims_total",
    "Self-service payment claims",
    ["deduplicated"],
)

token_decode_failures_total = Counter(
    "token_decode_failures_total",
    "Public tokens rejected by the codec",
    ["reason"],
)

# Histograms
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration",
    ["method", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
