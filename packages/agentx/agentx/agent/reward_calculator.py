"""Reward calculation logic for the AgentX grid agent."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agentx.logging_config import logger

if TYPE_CHECKING:
    from agentx.agent import RewardConfig
    from agentx.dtypes import GridPosition
    from agentx.env import GridEnvironment


class RewardCalculator:
    """Calculates the immediate reward of a single move.

    Cases are checked in precedence order and the first match wins:

    1. the resulting cell is the target: terminal reward;
    2. the move hit an obstacle: fixed collision penalty;
    3. otherwise the living penalty plus a shaping term, positive when the
       Euclidean distance to the target strictly decreased and negative when
       it did not. Ties count against the agent.

    With default magnitudes a shaped step is worth ``-0.1 + 1 = +0.9`` or
    ``-0.1 - 2 = -2.1``. The living penalty is added to the shaping term
    rather than replaced by it, which differs from schemes that score a
    shaped step as a flat ``+1`` / ``-2``. Set ``penalty_step`` to 0 to get
    those values.

    Parameters
    ----------
    config : RewardConfig
        Configuration for reward parameters.
    """

    def __init__(self, config: RewardConfig) -> None:
        self.config = config

    def calculate_reward(
        self,
        env: GridEnvironment,
        previous: GridPosition,
        resulting: GridPosition,
        *,
        collided: bool,
    ) -> float:
        """Calculate the reward for moving from ``previous`` to ``resulting``.

        Parameters
        ----------
        env : GridEnvironment
            The environment holding the target.
        previous : GridPosition
            Cell before the move.
        resulting : GridPosition
            Cell after clamping and collision handling.
        collided : bool
            Whether the attempted destination was an obstacle.

        Returns
        -------
        float
            The step reward.
        """
        if env.is_target(resulting):
            logger.debug(f"[Reward] Target reached: {self.config.reward_goal}")
            return self.config.reward_goal

        if collided:
            logger.debug(f"[Penalty] Obstacle collision: {-self.config.penalty_obstacle}")
            return -self.config.penalty_obstacle

        reward = -self.config.penalty_step
        prev_dist = env.distance_to_target(previous)
        curr_dist = env.distance_to_target(resulting)

        if curr_dist < prev_dist:
            reward += self.config.reward_progress
            logger.debug(
                f"[Reward] Progress reward: {reward} "
                f"(prev_dist={prev_dist:.3f}, curr_dist={curr_dist:.3f})",
            )
        else:
            reward -= self.config.penalty_regress
            logger.debug(
                f"[Penalty] No progress: {reward} "
                f"(prev_dist={prev_dist:.3f}, curr_dist={curr_dist:.3f})",
            )

        return reward
