"""Prometheus metrics for the Dots game engine.

This module centralises counters and histograms so that the engine and the
automated opponent can record lightweight telemetry without each call site
managing its own metric instances. Labels stay coarse (player color, AI
type, failure reason) so local Prometheus setups can filter them.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


DOTS_CAPTURED: Final[Counter] = Counter(
    "dots_captured_total",
    "Total number of neutral dots captured, labeled by player color.",
    labelnames=("color",),
)

ENCIRCLEMENTS_CLOSED: Final[Counter] = Counter(
    "dots_encirclements_closed_total",
    "Total number of closed encirclement loops, labeled by player color.",
    labelnames=("color",),
)

ENCIRCLED_DOTS: Final[Counter] = Counter(
    "dots_encircled_dots_total",
    (
        "Total number of dots resolved by closed loops, labeled by the "
        "closing color and outcome (scored or dead)."
    ),
    labelnames=("color", "outcome"),
)

ENCIRCLEMENTS_BROKEN: Final[Counter] = Counter(
    "dots_encirclements_broken_total",
    "Total number of aborted encirclement paths, labeled by reason.",
    labelnames=("reason",),
)

AI_TURN_LATENCY: Final[Histogram] = Histogram(
    "dots_ai_turn_latency_seconds",
    "Wall time of one automated opponent turn in seconds, labeled by ai_type.",
    labelnames=("ai_type",),
    # Turns are synchronous and usually well under a second even on a
    # 40x40 board; the upper buckets catch pathological group shapes.
    buckets=(
        0.001,
        0.005,
        0.01,
        0.05,
        0.1,
        0.5,
        1.0,
        5.0,
    ),
)

AI_TURN_FAILURES: Final[Counter] = Counter(
    "dots_ai_turn_failures_total",
    "Total number of failed AI actions, labeled by ai_type and reason.",
    labelnames=("ai_type", "reason"),
)
