"""Module for environments."""

__all__ = [
    "DIRECTIONS",
    "DIRECTION_DELTAS",
    "Direction",
    "GridEnvironment",
]

from agentx.env.env import (
    DIRECTION_DELTAS,
    DIRECTIONS,
    Direction,
    GridEnvironment,
)
