"""User-facing training configuration."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from agentx.constants import (
    DEFAULT_LOG_CAPACITY,
    DEFAULT_LOG_PROBABILITY,
    DEFAULT_TICK_INTERVAL_MS,
)

DEFAULT_LEARNING_RATE = 0.001
DEFAULT_EXPLORATION_RATE = 0.1
DEFAULT_DISCOUNT_FACTOR = 0.99
DEFAULT_EARLY_STOPPING_PATIENCE = 10


class RLAlgorithm(str, Enum):
    """Algorithm label shown to the user; it does not change the step engine."""

    DQN = "DQN"
    PPO = "PPO"
    A2C = "A2C"

    @property
    def display_name(self) -> str:
        """Long name used in reports."""
        return {
            RLAlgorithm.DQN: "Deep Q-Network (DQN)",
            RLAlgorithm.PPO: "Proximal Policy Opt (PPO)",
            RLAlgorithm.A2C: "Adv Actor-Critic (A2C)",
        }[self]


class TrainingConfig(BaseModel):
    """
    Knobs exposed to the user while training runs.

    Assignments are validated, so a slider cannot push a value outside its
    documented range. Only ``exploration_rate``, ``early_stopping`` and
    ``early_stopping_patience`` influence the loop; ``algorithm``,
    ``learning_rate`` and ``discount_factor`` are display-only.
    """

    model_config = ConfigDict(validate_assignment=True)

    algorithm: RLAlgorithm = RLAlgorithm.DQN
    learning_rate: float = Field(default=DEFAULT_LEARNING_RATE, gt=0.0)
    exploration_rate: float = Field(default=DEFAULT_EXPLORATION_RATE, ge=0.0, le=1.0)
    discount_factor: float = Field(default=DEFAULT_DISCOUNT_FACTOR, ge=0.0, le=1.0)
    early_stopping: bool = True
    early_stopping_patience: int = Field(default=DEFAULT_EARLY_STOPPING_PATIENCE, ge=1)


class SessionConfig(BaseModel):
    """Driver settings for a training session."""

    tick_interval_ms: int = Field(default=DEFAULT_TICK_INTERVAL_MS, gt=0)
    log_capacity: int = Field(default=DEFAULT_LOG_CAPACITY, ge=1)
    log_probability: float = Field(default=DEFAULT_LOG_PROBABILITY, ge=0.0, le=1.0)
    seed: int | None = None
