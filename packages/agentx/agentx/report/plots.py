"""Plotting functions for AgentX."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from matplotlib import pyplot as plt

from agentx.constants import PLATEAU_WINDOW
from agentx.logging_config import logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from agentx.agent import MetricsPoint


def plot_reward_trend(  # pragma: no cover
    file_prefix: str,
    metrics: Sequence[MetricsPoint],
    plot_dir: Path,
    window: int = PLATEAU_WINDOW,
) -> None:
    """
    Plot episode rewards with their trailing moving average and save the plot.

    Args:
        file_prefix (str): Prefix for the output file name.
        metrics (Sequence[MetricsPoint]): Completed episodes.
        plot_dir (Path): Directory to save the plot.
        window (int): Moving-average window.
    """
    episodes = [point.episode for point in metrics]
    rewards = np.array([point.reward for point in metrics], dtype=float)

    plt.figure(figsize=(10, 6))
    plt.plot(episodes, rewards, marker="o", label="Episode Reward")
    if len(rewards) >= window:
        moving_avg = np.convolve(rewards, np.ones(window) / window, mode="valid")
        plt.plot(episodes[window - 1 :], moving_avg, color="r", label=f"{window}-Episode Average")
    plt.title("Reward Trend")
    plt.xlabel("Episode")
    plt.ylabel("Total Reward")
    plt.legend()
    plt.grid()
    plt.savefig(plot_dir / f"{file_prefix}reward_trend.png")
    plt.close()


def plot_decision_accuracy(  # pragma: no cover
    file_prefix: str,
    metrics: Sequence[MetricsPoint],
    plot_dir: Path,
) -> None:
    """
    Plot the decision accuracy and speed series and save the plot.

    Args:
        file_prefix (str): Prefix for the output file name.
        metrics (Sequence[MetricsPoint]): Completed episodes.
        plot_dir (Path): Directory to save the plot.
    """
    episodes = [point.episode for point in metrics]

    plt.figure(figsize=(10, 6))
    plt.bar(episodes, [point.accuracy for point in metrics], label="Decision Accuracy (%)")
    plt.plot(episodes, [point.speed for point in metrics], color="orange", label="Speed")
    plt.title("Decision Accuracy")
    plt.xlabel("Episode")
    plt.ylabel("Value")
    plt.legend()
    plt.grid(axis="y")
    plt.savefig(plot_dir / f"{file_prefix}decision_accuracy.png")
    plt.close()


def plot_session(  # pragma: no cover
    file_prefix: str,
    metrics: Sequence[MetricsPoint],
    plot_dir: Path,
) -> None:
    """Write every chart for a session into ``plot_dir``."""
    if not metrics:
        logger.warning("No completed episodes to plot.")
        return
    plot_dir.mkdir(parents=True, exist_ok=True)
    plot_reward_trend(file_prefix, metrics, plot_dir)
    plot_decision_accuracy(file_prefix, metrics, plot_dir)
    logger.info(f"Plots saved to {plot_dir}")
