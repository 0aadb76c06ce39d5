"""Module for agent."""

__all__ = [
    "ActionLog",
    "AgentState",
    "AgentStatus",
    "LogEntry",
    "LogType",
    "MetricsPoint",
    "RewardConfig",
    "SessionMetrics",
    "StepEngine",
    "StepResult",
    "calculate_session_metrics",
]

from agentx.agent.action_log import ActionLog, LogEntry, LogType
from agentx.agent.agent import AgentState, AgentStatus, RewardConfig
from agentx.agent.metrics import MetricsPoint, SessionMetrics, calculate_session_metrics
from agentx.agent.step_engine import StepEngine, StepResult
