"""Utility modules for retries, fan-out and logging."""
from .connection import NodeResult, run_on_nodes, with_retry
from .logging_config import (
    setup_logging,
    timed,
    timed_section,
    perf_logger,
    OperationTiming,
    PerfStats,
    global_stats,
)

__all__ = [
    "NodeResult",
    "run_on_nodes",
    "with_retry",
    "setup_logging",
    "timed",
    "timed_section",
    "perf_logger",
    "OperationTiming",
    "PerfStats",
    "global_stats",
]
