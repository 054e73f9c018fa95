"""
Prometheus metrics for the authorization code service.

Custom metrics for business logic monitoring.
"""

from prometheus_client import Counter

# Code issuance
codes_generated_total = Counter(
    "codes_generated_total",
    "Total authorization codes generated",
    ["billing_model"],
)

codes_deleted_total = Counter(
    "codes_deleted_total",
    "Total authorization codes deleted",
)

time_adjustments_total = Counter(
    "time_adjustments_total",
    "Total administrative expiry adjustments",
    ["direction"],
)

# Client flows
activations_total = Counter(
    "activations_total",
    "Activation attempts by result",
    ["result"],
)

rebinds_total = Counter(
    "rebinds_total",
    "Device rebind attempts by result",
    ["result"],
)

verifications_total = Counter(
    "verifications_total",
    "License verifications by result",
    ["result"],
)

point_deductions_total = Counter(
    "point_deductions_total",
    "Point deduction attempts by result",
    ["result"],
)

points_deducted_total = Counter(
    "points_deducted_total",
    "Total points deducted",
)

# Presence
heartbeats_total = Counter(
    "heartbeats_total",
    "Heartbeats by result",
    ["result"],
)

sessions_created_total = Counter(
    "sessions_created_total",
    "Sessions created or refreshed",
    ["kind"],
)

sessions_swept_total = Counter(
    "sessions_swept_total",
    "Sessions invalidated by the heartbeat sweep",
)

sessions_forced_offline_total = Counter(
    "sessions_forced_offline_total",
    "Sessions forced offline",
    ["reason"],
)

# Blacklist
blacklist_hits_total = Counter(
    "blacklist_hits_total",
    "Blacklist lookups that matched",
    ["kind"],
)


def outcome_label(outcome) -> str:
    """Label value for an Outcome: 'success' or its failure code."""
    return "success" if outcome.ok else outcome.code.lower()
