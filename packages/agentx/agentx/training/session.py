"""The state owned by one training session."""

from __future__ import annotations

from dataclasses import dataclass, field

from agentx.agent import ActionLog, AgentState, AgentStatus, MetricsPoint
from agentx.constants import DEFAULT_LOG_CAPACITY, DEFAULT_START
from agentx.dtypes import GridPosition, RewardHistory
from agentx.monitoring import ConvergenceState, StopReason
from agentx.training.config import DEFAULT_EARLY_STOPPING_PATIENCE


@dataclass
class TrainingSession:
    """
    Everything a training run accumulates.

    Only the controller writes to a session; sinks read from it.

    Attributes
    ----------
    agent : AgentState
        The live agent.
    metrics : list[MetricsPoint]
        Completed episodes, append-only.
    logs : ActionLog
        Recent actions, newest first.
    convergence : ConvergenceState
        Early-stopping bookkeeping.
    stop_reason : StopReason | None
        Set when the convergence monitor stopped training.
    insight : str | None
        Latest narrative insight, if one was requested.
    start : GridPosition
        Cell the agent is placed on by a reset.
    """

    agent: AgentState = field(default_factory=AgentState)
    metrics: list[MetricsPoint] = field(default_factory=list)
    logs: ActionLog = field(default_factory=ActionLog)
    convergence: ConvergenceState = field(
        default_factory=lambda: ConvergenceState.initial(DEFAULT_EARLY_STOPPING_PATIENCE),
    )
    stop_reason: StopReason | None = None
    insight: str | None = None
    start: GridPosition = DEFAULT_START

    @classmethod
    def create(
        cls,
        start: GridPosition = DEFAULT_START,
        patience: int = DEFAULT_EARLY_STOPPING_PATIENCE,
        log_capacity: int = DEFAULT_LOG_CAPACITY,
    ) -> TrainingSession:
        """Build an idle session with the agent on ``start``."""
        return cls(
            agent=AgentState.initial(start),
            logs=ActionLog(log_capacity),
            convergence=ConvergenceState.initial(patience),
            start=start,
        )

    @property
    def status(self) -> AgentStatus:
        """Lifecycle status of the live agent."""
        return self.agent.status

    @property
    def rewards(self) -> RewardHistory:
        """Completed-episode rewards, oldest first."""
        return [point.reward for point in self.metrics]

    @property
    def avg_reward(self) -> float | None:
        """Latest windowed average reward, ``None`` before the first window."""
        return self.convergence.avg_reward

    def patience_fraction(self, patience: int) -> float:
        """Share of patience left, for a stability meter."""
        return self.convergence.patience_left / max(1, patience)

    def reset_convergence(self, patience: int) -> None:
        """Forget the baseline and restore full patience."""
        self.convergence = ConvergenceState.initial(patience)

    def wipe(self, patience: int) -> None:
        """Return to a fresh idle session, keeping the log capacity."""
        self.agent = AgentState.initial(self.start)
        self.metrics = []
        self.logs.clear()
        self.reset_convergence(patience)
        self.stop_reason = None
        self.insight = None
