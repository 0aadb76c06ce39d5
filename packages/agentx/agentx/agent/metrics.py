"""Per-episode metrics records and session-level aggregates."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict

# Bounds of the synthetic chart series
ACCURACY_CEILING = 100.0
ACCURACY_FLOOR = 40.0
ACCURACY_BASE = 95.0
SPEED_FLOOR = 10.0
SPEED_BASE = 50.0


def synthetic_accuracy(episode: int) -> float:
    """Decision-accuracy figure shown on the charts for ``episode``."""
    return min(ACCURACY_CEILING, max(ACCURACY_FLOOR, ACCURACY_BASE - episode / 10))


def synthetic_speed(episode: int) -> float:
    """Speed figure shown on the charts for ``episode``."""
    return max(SPEED_FLOOR, SPEED_BASE - episode / 5)


class MetricsPoint(BaseModel):
    """
    Record of one completed episode.

    Attributes
    ----------
    episode : int
        Episode id at completion.
    reward : float
        Episode total reward at the moment the target was reached.
    accuracy : float
        Synthetic, monotone in ``episode``; drives visualization only.
    speed : float
        Synthetic, monotone in ``episode``; drives visualization only.
    """

    model_config = ConfigDict(frozen=True)

    episode: int
    reward: float
    accuracy: float
    speed: float

    @classmethod
    def for_episode(cls, episode: int, reward: float) -> MetricsPoint:
        """Build the record for a finished episode, deriving the synthetic series."""
        return cls(
            episode=episode,
            reward=reward,
            accuracy=synthetic_accuracy(episode),
            speed=synthetic_speed(episode),
        )


class SessionMetrics(BaseModel):
    """Aggregate figures over a metrics history."""

    total_episodes: int
    average_reward: float | None
    best_reward: float | None
    worst_reward: float | None
    reward_std: float | None
    last_reward: float | None


def calculate_session_metrics(history: Sequence[MetricsPoint]) -> SessionMetrics:
    """
    Summarize a metrics history.

    Parameters
    ----------
    history : Sequence[MetricsPoint]
        Completed episodes in completion order.

    Returns
    -------
    SessionMetrics
        Aggregates; reward fields are ``None`` for an empty history.
    """
    if not history:
        return SessionMetrics(
            total_episodes=0,
            average_reward=None,
            best_reward=None,
            worst_reward=None,
            reward_std=None,
            last_reward=None,
        )

    rewards = np.array([point.reward for point in history], dtype=float)
    return SessionMetrics(
        total_episodes=len(history),
        average_reward=float(np.mean(rewards)),
        best_reward=float(np.max(rewards)),
        worst_reward=float(np.min(rewards)),
        reward_std=float(np.std(rewards)),
        last_reward=float(rewards[-1]),
    )
