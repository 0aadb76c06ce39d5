"""Reporting module for AgentX training sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agentx.agent import calculate_session_metrics
from agentx.logging_config import logger

if TYPE_CHECKING:
    from agentx.training import TrainingConfig, TrainingSession


def summary(
    session: TrainingSession,
    config: TrainingConfig,
    session_id: str,
    *,
    verbose: bool = False,
) -> list[str]:
    """
    Print a summary of a training session and return the printed lines.

    Parameters
    ----------
    session : TrainingSession
        The session to summarize.
    config : TrainingConfig
        Knobs the session ran with.
    session_id : str
        Unique identifier of the run, used in file names and logs.
    verbose : bool
        Also list every completed episode.
    """
    metrics = calculate_session_metrics(session.metrics)

    output_lines = [""]
    output_lines.append("Training session summary:")
    output_lines.append(f"Session ID: {session_id}")
    output_lines.append(
        f"Algorithm: {config.algorithm.display_name} "
        f"(lr={config.learning_rate}, epsilon={config.exploration_rate}, "
        f"gamma={config.discount_factor})",
    )
    output_lines.append(f"Status: {session.status.value}")
    output_lines.append("")

    if verbose:
        for point in session.metrics:
            output_lines.append(
                f"Episode: {point.episode:<4} "
                f"Reward: {point.reward:>8.2f} "
                f"Accuracy: {point.accuracy:>6.1f} "
                f"Speed: {point.speed:>5.1f}",
            )
        output_lines.append("")

    output_lines.append(f"Completed episodes: {metrics.total_episodes}")
    if metrics.total_episodes == 0:
        logger.warning("No completed episodes to summarize.")
    else:
        output_lines.append(f"Average reward per episode: {metrics.average_reward:.2f}")
        output_lines.append(f"Best episode reward: {metrics.best_reward:.2f}")
        output_lines.append(f"Worst episode reward: {metrics.worst_reward:.2f}")
        output_lines.append(f"Reward standard deviation: {metrics.reward_std:.2f}")

    if session.avg_reward is not None:
        output_lines.append(f"Latest windowed average reward: {session.avg_reward:.2f}")
    if config.early_stopping:
        output_lines.append(
            f"Stability: {session.patience_fraction(config.early_stopping_patience) * 100:.0f}% "
            f"({session.convergence.patience_left}/{config.early_stopping_patience} patience left)",
        )
    if session.stop_reason is not None:
        output_lines.append(f"Auto-stop reason: {session.stop_reason.description}")
    if session.insight:
        output_lines.append("")
        output_lines.append("Insight:")
        output_lines.append(session.insight)

    for line in output_lines:
        print(line)  # noqa: T201

    if not logger.disabled:
        for line in output_lines:
            logger.info(line)
        logger.info("Training summary complete.")

    return output_lines
