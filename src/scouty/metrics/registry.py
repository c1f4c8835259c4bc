"""
Metric registry using prometheus_client.

Exposes the monitor's progress and tracker diagnostics in Prometheus text
format.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

# Dedicated registry, free of default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Chain Position
# -----------------------------------------------------------------------------

current_session = Gauge(
    "scouty_current_session",
    "Current session index",
    registry=REGISTRY,
)

current_era = Gauge(
    "scouty_current_era",
    "Active era index",
    registry=REGISTRY,
)

last_block = Gauge(
    "scouty_last_block",
    "Last finalized block processed",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Block Processing
# -----------------------------------------------------------------------------

blocks_processed = Counter(
    "scouty_blocks_processed_total",
    "Total finalized blocks processed",
    registry=REGISTRY,
)

authored_blocks_recorded = Counter(
    "scouty_authored_blocks_recorded_total",
    "Blocks authored by watched stashes",
    registry=REGISTRY,
)

duplicate_blocks = Counter(
    "scouty_duplicate_blocks_total",
    "Blocks delivered more than once",
    registry=REGISTRY,
)

unresolved_authorities = Counter(
    "scouty_unresolved_authorities_total",
    "Blocks whose author could not be resolved",
    ["reason"],
    registry=REGISTRY,
)

para_sessions_recorded = Counter(
    "scouty_para_sessions_recorded_total",
    "Sessions recorded by the parachain validator tracker",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Hooks and Notifications
# -----------------------------------------------------------------------------

hooks_run = Counter(
    "scouty_hooks_run_total",
    "Hook scripts run",
    ["hook"],
    registry=REGISTRY,
)

hooks_failed = Counter(
    "scouty_hooks_failed_total",
    "Hook scripts that failed",
    ["hook"],
    registry=REGISTRY,
)

messages_sent = Counter(
    "scouty_messages_sent_total",
    "Chat messages delivered",
    registry=REGISTRY,
)

monitor_restarts = Counter(
    "scouty_monitor_restarts_total",
    "Monitor restarts after feed errors",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
