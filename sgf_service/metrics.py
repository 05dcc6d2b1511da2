"""Prometheus metrics for the SGF service.

This module centralises counters and histograms so that the operation
handlers can record lightweight telemetry without each handler managing its
own metric instances. Collectors are process-wide aggregates only; nothing
here is keyed by request.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram

TOOL_REQUESTS: Final[Counter] = Counter(
    "sgf_tool_requests_total",
    (
        "Total number of SGF tool invocations, labeled by tool and "
        "outcome (success or error kind)."
    ),
    labelnames=("tool", "outcome"),
)

TOOL_LATENCY: Final[Histogram] = Histogram(
    "sgf_tool_latency_seconds",
    "Latency of SGF tool invocations in seconds, labeled by tool.",
    labelnames=("tool",),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
    ),
)

RECORD_MOVES: Final[Histogram] = Histogram(
    "sgf_record_moves",
    "Moves per successfully parsed record (all variations included).",
    buckets=(0, 10, 50, 100, 200, 300, 500, 1000),
)

RECORD_BYTES: Final[Histogram] = Histogram(
    "sgf_record_bytes",
    "Size in bytes of SGF payloads accepted by the text validator.",
    buckets=(256, 1024, 4096, 16384, 65536, 102400),
)


def observe_tool_result(tool: str, outcome: str, duration_seconds: float) -> None:
    """Record one finished invocation."""
    TOOL_REQUESTS.labels(tool, outcome).inc()
    TOOL_LATENCY.labels(tool).observe(duration_seconds)
