"""Bounded, newest-first log of agent actions."""

from __future__ import annotations

from collections import deque
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from agentx.constants import DEFAULT_LOG_CAPACITY


class LogType(str, Enum):
    """Highlight category of a log entry."""

    DEFAULT = "default"
    WARNING = "warning"
    SUCCESS = "success"


class LogEntry(BaseModel):
    """
    One emitted action.

    Attributes
    ----------
    timestamp : datetime
        When the entry was created (UTC).
    action : str
        Action label, e.g. ``MOVE_RIGHT`` or ``AUTO_STOP``.
    reward : float
        Reward attached to the action; ``0.0`` for lifecycle events.
    state : str
        Resulting coordinates as ``"(x, y)"`` or a lifecycle marker.
    type : LogType
        Highlight category.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: str
    reward: float
    state: str
    type: LogType = LogType.DEFAULT

    @property
    def time_label(self) -> str:
        """Wall-clock time of the entry as ``HH:MM:SS``."""
        return self.timestamp.strftime("%H:%M:%S")


class ActionLog:
    """Ring buffer of log entries, newest first.

    Once ``capacity`` entries are held, adding a new one drops the oldest.
    """

    def __init__(self, capacity: int = DEFAULT_LOG_CAPACITY) -> None:
        self.capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    def add(self, entry: LogEntry) -> None:
        """Record ``entry`` as the newest entry."""
        self._entries.appendleft(entry)

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    @property
    def entries(self) -> list[LogEntry]:
        """Snapshot of the entries, newest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
