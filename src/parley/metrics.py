from __future__ import annotations

from prometheus_client import Counter

REMOTE_CALLS = Counter(
    "parley_remote_calls_total",
    "Remote service calls made by the transport",
    ["operation", "outcome"],
)

STATUS_UNRECOGNIZED = Counter(
    "parley_status_unrecognized_total",
    "Run status strings that did not match a known status",
)
