"""Load and configure training settings from a YAML file."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from agentx.agent import RewardConfig
from agentx.constants import (
    DEFAULT_GRID_SIZE,
    DEFAULT_OBSTACLES,
    DEFAULT_START,
    DEFAULT_TARGET,
    MIN_GRID_SIZE,
)
from agentx.dtypes import GridPosition
from agentx.env import GridEnvironment
from agentx.env.theme import DEFAULT_THEME, Theme
from agentx.errors import (
    ERROR_CELL_OUT_OF_GRID,
    ERROR_START_ON_OBSTACLE,
    ERROR_TARGET_ON_OBSTACLE,
)
from agentx.insight import InsightConfig
from agentx.logging_config import logger
from agentx.monitoring import ConvergenceConfig
from agentx.training import SessionConfig, TrainingConfig


class EnvironmentConfig(BaseModel):
    """Configuration for the grid environment."""

    grid_size: int = Field(default=DEFAULT_GRID_SIZE, ge=MIN_GRID_SIZE)
    start: GridPosition = DEFAULT_START
    target: GridPosition = DEFAULT_TARGET
    obstacles: list[GridPosition] = Field(default_factory=lambda: list(DEFAULT_OBSTACLES))
    theme: Theme = DEFAULT_THEME

    @model_validator(mode="after")
    def validate_layout(self) -> "EnvironmentConfig":
        """Reject layouts the step engine cannot handle."""
        for cell in (self.start, self.target, *self.obstacles):
            if not all(0 <= coord < self.grid_size for coord in cell):
                raise ValueError(ERROR_CELL_OUT_OF_GRID.format(cell=cell, size=self.grid_size))
        if self.target in self.obstacles:
            raise ValueError(ERROR_TARGET_ON_OBSTACLE.format(target=self.target))
        if self.start in self.obstacles:
            raise ValueError(ERROR_START_ON_OBSTACLE.format(start=self.start))
        return self

    def build(self) -> GridEnvironment:
        """Instantiate the environment described by this configuration."""
        return GridEnvironment(
            grid_size=self.grid_size,
            target=self.target,
            obstacles=self.obstacles,
            start=self.start,
            theme=self.theme,
        )


class SimulationConfig(BaseModel):
    """Top-level configuration; every section is optional."""

    training: TrainingConfig | None = None
    environment: EnvironmentConfig | None = None
    reward: RewardConfig | None = None
    convergence: ConvergenceConfig | None = None
    session: SessionConfig | None = None
    insight: InsightConfig | None = None


def load_simulation_config(config_path: str | Path) -> SimulationConfig:
    """
    Load a YAML configuration file and parse it into a SimulationConfig model.

    An empty file yields all defaults.

    Args:
        config_path (str | Path): Path to the YAML configuration file.

    Returns
    -------
        SimulationConfig: Parsed configuration as a Pydantic model.
    """
    with Path(config_path).open() as file:
        data = yaml.safe_load(file) or {}
    logger.info(f"Loaded configuration from {config_path}")
    return SimulationConfig(**data)


def configure_training(config: SimulationConfig) -> TrainingConfig:
    """Return the training knobs, defaulting when the section is missing."""
    return config.training or TrainingConfig()


def configure_environment(config: SimulationConfig) -> EnvironmentConfig:
    """
    Configure the environment based on the provided configuration.

    Args:
        config (SimulationConfig): Simulation configuration object.

    Returns
    -------
        EnvironmentConfig: The configured environment object.
    """
    return config.environment or EnvironmentConfig()


def configure_reward(config: SimulationConfig) -> RewardConfig:
    """Return the reward magnitudes, defaulting when the section is missing."""
    return config.reward or RewardConfig()


def configure_convergence(config: SimulationConfig) -> ConvergenceConfig:
    """Return the early-stopping thresholds, defaulting when the section is missing."""
    return config.convergence or ConvergenceConfig()


def configure_session(config: SimulationConfig) -> SessionConfig:
    """Return the driver settings, defaulting when the section is missing."""
    return config.session or SessionConfig()


def configure_insight(config: SimulationConfig) -> InsightConfig:
    """Return the insight service settings, defaulting when the section is missing."""
    return config.insight or InsightConfig()
