"""Agent state and reward configuration for the AgentX grid agent."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from agentx.constants import DEFAULT_START
from agentx.dtypes import GridPosition  # noqa: TC001 - pydantic needs it at runtime
from agentx.env import Direction

# Defaults
DEFAULT_DIRECTION = Direction.RIGHT
DEFAULT_REWARD_GOAL = 100.0
DEFAULT_REWARD_PROGRESS = 1.0
DEFAULT_PENALTY_OBSTACLE = 5.0
DEFAULT_PENALTY_REGRESS = 2.0
DEFAULT_PENALTY_STEP = 0.1


class AgentStatus(str, Enum):
    """Lifecycle status of the training session.

    Attributes
    ----------
    IDLE : str
        Not training; either never started, manually stopped, or reset.
    TRAINING : str
        The tick driver is stepping the agent.
    FINISHED : str
        Training was stopped automatically by the convergence monitor.
    """

    IDLE = "IDLE"
    TRAINING = "TRAINING"
    FINISHED = "FINISHED"


class RewardConfig(BaseModel):
    """Configuration for the reward function.

    Penalties are stored as positive magnitudes and subtracted.
    """

    reward_goal: float = DEFAULT_REWARD_GOAL  # Terminal reward for reaching the target
    reward_progress: float = DEFAULT_REWARD_PROGRESS  # Distance strictly decreased
    penalty_obstacle: float = DEFAULT_PENALTY_OBSTACLE  # Bumped into an obstacle
    penalty_regress: float = DEFAULT_PENALTY_REGRESS  # Distance unchanged or increased
    penalty_step: float = DEFAULT_PENALTY_STEP  # Living penalty on non-terminal moves


class AgentState(BaseModel):
    """
    Snapshot of the agent at one tick.

    The state is immutable; the step engine and the lifecycle controller
    replace it rather than mutate it.

    Attributes
    ----------
    x, y : int
        Grid position; ``y`` grows downward.
    direction : Direction
        Last heading taken.
    current_reward : float
        Reward of the last step.
    total_reward : float
        Cumulative reward in the current episode.
    status : AgentStatus
        Lifecycle status.
    episode : int
        1-based episode counter.
    """

    model_config = ConfigDict(frozen=True)

    x: int = DEFAULT_START[0]
    y: int = DEFAULT_START[1]
    direction: Direction = DEFAULT_DIRECTION
    current_reward: float = 0.0
    total_reward: float = 0.0
    status: AgentStatus = AgentStatus.IDLE
    episode: int = 1

    @property
    def position(self) -> GridPosition:
        """Current cell as an ``(x, y)`` tuple."""
        return (self.x, self.y)

    @classmethod
    def initial(
        cls,
        start: GridPosition = DEFAULT_START,
        status: AgentStatus = AgentStatus.IDLE,
        episode: int = 1,
    ) -> AgentState:
        """Build a fresh agent at ``start`` with zeroed rewards."""
        return cls(x=start[0], y=start[1], status=status, episode=episode)

    def with_status(self, status: AgentStatus) -> AgentState:
        """Return a copy with a different lifecycle status."""
        return self.model_copy(update={"status": status})
