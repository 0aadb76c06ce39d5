"""Single-tick transition function for the AgentX grid agent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from agentx.agent.action_log import LogEntry
from agentx.agent.agent import DEFAULT_DIRECTION, AgentState, RewardConfig
from agentx.agent.metrics import MetricsPoint
from agentx.agent.reward_calculator import RewardCalculator
from agentx.constants import DEFAULT_LOG_PROBABILITY
from agentx.env import DIRECTIONS, Direction, GridEnvironment
from agentx.logging_config import logger
from agentx.utils.seeding import get_rng

if TYPE_CHECKING:
    import numpy as np


@dataclass
class StepResult:
    """Outcome of one tick.

    Attributes
    ----------
    agent : AgentState
        Agent after the tick; a fresh episode's state when the target was reached.
    reward : float
        Immediate reward of the move.
    direction : Direction
        Heading chosen this tick.
    explored : bool
        Whether the heading was picked at random.
    log_entry : LogEntry | None
        Sampled action log entry, if any.
    metrics_point : MetricsPoint | None
        Record of the episode that just finished, if any.
    """

    agent: AgentState
    reward: float
    direction: Direction
    explored: bool
    log_entry: LogEntry | None = None
    metrics_point: MetricsPoint | None = None

    @property
    def episode_completed(self) -> bool:
        """Whether the target was reached on this tick."""
        return self.metrics_point is not None


class StepEngine:
    """Moves the agent one cell per tick with an epsilon-greedy heuristic.

    With probability ``exploration_rate`` a uniformly random direction is
    taken; otherwise the engine heads for the target along the x axis first,
    then the y axis. Moves are clamped to the grid and reverted on obstacles.
    Reaching the target closes the episode and rolls the agent over to the
    start cell with the episode counter advanced.

    Parameters
    ----------
    env : GridEnvironment
        Grid, target and obstacles.
    reward_config : RewardConfig | None
        Reward parameters, defaults when ``None``.
    rng : np.random.Generator | None
        Source for exploration and log sampling; seed it for reproducible runs.
    log_probability : float
        Chance that a tick emits an action log entry.
    """

    def __init__(
        self,
        env: GridEnvironment,
        reward_config: RewardConfig | None = None,
        rng: np.random.Generator | None = None,
        log_probability: float = DEFAULT_LOG_PROBABILITY,
    ) -> None:
        self.env = env
        self.reward_calculator = RewardCalculator(reward_config or RewardConfig())
        self.rng = rng if rng is not None else get_rng()
        self.log_probability = log_probability

    def choose_direction(self, agent: AgentState, exploration_rate: float) -> tuple[Direction, bool]:
        """
        Pick the heading for this tick.

        Returns
        -------
        tuple[Direction, bool]
            The heading and whether it was an exploratory pick.
        """
        if self.rng.random() < exploration_rate:
            return DIRECTIONS[int(self.rng.integers(len(DIRECTIONS)))], True
        return self.env.greedy_direction(agent.position, fallback=agent.direction), False

    def step(self, agent: AgentState, exploration_rate: float) -> StepResult:
        """
        Advance the agent by one tick.

        Parameters
        ----------
        agent : AgentState
            Agent before the tick.
        exploration_rate : float
            Probability in ``[0, 1]`` of a random heading.

        Returns
        -------
        StepResult
            The new agent state and everything the tick produced.
        """
        direction, explored = self.choose_direction(agent, exploration_rate)
        previous = agent.position
        destination = self.env.next_position(previous, direction)

        collided = self.env.is_obstacle(destination)
        resulting = previous if collided else destination

        reward = self.reward_calculator.calculate_reward(
            self.env,
            previous,
            resulting,
            collided=collided,
        )
        total_reward = agent.total_reward + reward

        log_entry = None
        if self.rng.random() < self.log_probability:
            log_entry = LogEntry(
                action=f"MOVE_{direction.value.upper()}",
                reward=reward,
                state=f"({resulting[0]}, {resulting[1]})",
            )

        if self.env.is_target(resulting):
            metrics_point = MetricsPoint.for_episode(agent.episode, total_reward)
            logger.info(
                f"Episode {agent.episode} complete with total reward {total_reward:.2f}",
            )
            next_agent = agent.model_copy(
                update={
                    "x": self.env.start[0],
                    "y": self.env.start[1],
                    "direction": DEFAULT_DIRECTION,
                    "current_reward": 0.0,
                    "total_reward": 0.0,
                    "episode": agent.episode + 1,
                },
            )
            return StepResult(
                agent=next_agent,
                reward=reward,
                direction=direction,
                explored=explored,
                log_entry=log_entry,
                metrics_point=metrics_point,
            )

        next_agent = agent.model_copy(
            update={
                "x": resulting[0],
                "y": resulting[1],
                "direction": direction,
                "current_reward": reward,
                "total_reward": total_reward,
            },
        )
        return StepResult(
            agent=next_agent,
            reward=reward,
            direction=direction,
            explored=explored,
            log_entry=log_entry,
        )
