"""Monitoring tools for AgentX training."""

from .convergence_monitor import (
    NO_BASELINE,
    ConvergenceConfig,
    ConvergenceMonitor,
    ConvergenceState,
    StopDecision,
    StopReason,
)

__all__ = [
    "NO_BASELINE",
    "ConvergenceConfig",
    "ConvergenceMonitor",
    "ConvergenceState",
    "StopDecision",
    "StopReason",
]
