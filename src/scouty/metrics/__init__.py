"""
Metrics module for observability.

Exposes counters and gauges in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    authored_blocks_recorded,
    blocks_processed,
    current_era,
    current_session,
    duplicate_blocks,
    generate_metrics,
    hooks_failed,
    hooks_run,
    last_block,
    messages_sent,
    monitor_restarts,
    para_sessions_recorded,
    unresolved_authorities,
)

__all__ = [
    "REGISTRY",
    "authored_blocks_recorded",
    "blocks_processed",
    "current_era",
    "current_session",
    "duplicate_blocks",
    "generate_metrics",
    "hooks_failed",
    "hooks_run",
    "last_block",
    "messages_sent",
    "monitor_restarts",
    "para_sessions_recorded",
    "unresolved_authorities",
]
