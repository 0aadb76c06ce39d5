"""CSV export functions for AgentX training data."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING

from agentx.logging_config import logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from agentx.agent import LogEntry, MetricsPoint
    from agentx.training import TrainingSession

METRICS_FIELDNAMES = ["episode", "reward", "accuracy", "speed"]
LOG_FIELDNAMES = ["timestamp", "action", "reward", "state", "type"]


def export_session_to_csv(
    session: TrainingSession,
    data_dir: Path,
    file_prefix: str = "",
) -> list[Path]:
    """
    Export the metrics history and the action log of a session.

    Args:
        session (TrainingSession): Session to export.
        data_dir (Path): Directory to save the CSV files; created if missing.
        file_prefix (str): Prefix for the output file names.

    Returns
    -------
        list[Path]: The written files.
    """
    data_dir.mkdir(parents=True, exist_ok=True)
    written = [
        export_metrics_to_csv(session.metrics, data_dir / f"{file_prefix}metrics.csv"),
        export_logs_to_csv(session.logs.entries, data_dir / f"{file_prefix}action_log.csv"),
    ]
    logger.info(f"Exported session data to {data_dir}")
    return written


def export_metrics_to_csv(metrics: Sequence[MetricsPoint], filepath: Path) -> Path:
    """Write one row per completed episode, oldest first."""
    with filepath.open("w", newline="") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=METRICS_FIELDNAMES)
        writer.writeheader()
        for point in metrics:
            writer.writerow(point.model_dump())
    return filepath


def export_logs_to_csv(entries: Sequence[LogEntry], filepath: Path) -> Path:
    """Write the action log in its display order, newest first."""
    with filepath.open("w", newline="") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=LOG_FIELDNAMES)
        writer.writeheader()
        for entry in entries:
            writer.writerow(
                {
                    "timestamp": entry.timestamp.isoformat(),
                    "action": entry.action,
                    "reward": entry.reward,
                    "state": entry.state,
                    "type": entry.type.value,
                },
            )
    return filepath
