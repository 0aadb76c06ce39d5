"""
Plateau and degradation detection for early stopping.

The monitor watches the moving average of completed-episode rewards over a
fixed window. The first full window sets a baseline. Each later window either
improves on the best average by at least ``threshold`` (which resets patience)
or consumes one unit of patience. When patience runs out, training stops and
the stop is classified as a degradation if the last window fell more than
``degradation_threshold`` below the best average, or as convergence otherwise.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np
from pydantic import BaseModel, Field

from agentx.constants import DEGRADATION_THRESHOLD, PLATEAU_THRESHOLD, PLATEAU_WINDOW
from agentx.logging_config import logger

# Sentinel for "no baseline established yet"
NO_BASELINE = -math.inf


class StopReason(str, Enum):
    """Why training was stopped automatically."""

    CONVERGENCE = "convergence"
    DEGRADATION = "degradation"

    @property
    def description(self) -> str:
        """Human-readable reason shown next to the FINISHED status."""
        if self is StopReason.DEGRADATION:
            return "Significant Performance Degradation"
        return "Training Convergence (Plateau)"

    @property
    def marker(self) -> str:
        """Short state marker used in the action log."""
        if self is StopReason.DEGRADATION:
            return "DEGRADATION"
        return "CONVERGED"


class ConvergenceConfig(BaseModel):
    """Configuration for plateau detection.

    Attributes
    ----------
    window : int
        Number of most recent episodes averaged per evaluation.
    threshold : float
        Minimum gain over the best average that counts as improvement.
    degradation_threshold : float
        Drop below the best average beyond which a stop is a degradation.
    """

    window: int = Field(default=PLATEAU_WINDOW, ge=1)
    threshold: float = Field(default=PLATEAU_THRESHOLD, ge=0.0)
    degradation_threshold: float = Field(default=DEGRADATION_THRESHOLD, ge=0.0)


class ConvergenceState(BaseModel):
    """Mutable early-stopping bookkeeping for one training run.

    Attributes
    ----------
    patience_left : int
        Non-improving windows still tolerated.
    best_avg_reward : float
        Best windowed average so far, ``-inf`` before the first window.
    avg_reward : float | None
        Most recent windowed average.
    """

    patience_left: int
    best_avg_reward: float = NO_BASELINE
    avg_reward: float | None = None

    @classmethod
    def initial(cls, patience: int) -> ConvergenceState:
        """Fresh state with full patience and no baseline."""
        return cls(patience_left=max(1, patience))

    @property
    def has_baseline(self) -> bool:
        """Whether the first window has been averaged."""
        return self.best_avg_reward != NO_BASELINE


@dataclass
class StopDecision:
    """A fired early stop.

    Attributes
    ----------
    reason : StopReason
        Classification of the stop.
    improvement : float
        Window average minus best average on the stopping evaluation.
    avg_reward : float
        Window average on the stopping evaluation.
    """

    reason: StopReason
    improvement: float
    avg_reward: float


class ConvergenceMonitor:
    """Decides, once per completed episode, whether training should stop.

    The monitor only reads the reward history and updates the
    :class:`ConvergenceState` handed to it.
    """

    def __init__(self, config: ConvergenceConfig | None = None) -> None:
        self.config = config or ConvergenceConfig()

    def evaluate(
        self,
        state: ConvergenceState,
        rewards: Sequence[float],
        patience: int,
    ) -> StopDecision | None:
        """
        Evaluate the latest window of episode rewards.

        Parameters
        ----------
        state : ConvergenceState
            Bookkeeping to update in place.
        rewards : Sequence[float]
            Rewards of all completed episodes, oldest first.
        patience : int
            Currently configured patience; values below 1 are treated as 1.

        Returns
        -------
        StopDecision | None
            The stop decision when patience ran out, otherwise ``None``.
        """
        window = self.config.window
        if len(rewards) < window:
            return None

        patience = max(1, patience)
        # Patience may have been lowered since the last evaluation
        state.patience_left = min(state.patience_left, patience)

        current_avg = float(np.mean(rewards[-window:]))
        state.avg_reward = current_avg

        if not state.has_baseline:
            state.best_avg_reward = current_avg
            logger.debug(f"[EarlyStop] Baseline average reward set to {current_avg:.3f}")
            return None

        improvement = current_avg - state.best_avg_reward

        if improvement >= self.config.threshold:
            state.best_avg_reward = current_avg
            state.patience_left = patience
            logger.debug(
                f"[EarlyStop] Improvement {improvement:.3f}; new best {current_avg:.3f}, "
                f"patience reset to {patience}",
            )
            return None

        state.patience_left -= 1
        logger.debug(
            f"[EarlyStop] No significant improvement ({improvement:.3f}); "
            f"patience left {state.patience_left}",
        )
        if state.patience_left > 0:
            return None

        state.patience_left = 0
        reason = (
            StopReason.DEGRADATION
            if improvement < -self.config.degradation_threshold
            else StopReason.CONVERGENCE
        )
        return StopDecision(reason=reason, improvement=improvement, avg_reward=current_avg)
